"""API Routes for expenses"""
from fastapi import APIRouter, HTTPException, Body, Depends, Request
from fastapi.responses import JSONResponse
from typing import Annotated, Any, Dict
from models.expense import CATEGORIES, EntryForm
from services.entry_workflow import EntryWorkflow
from services.errors import StorageError
import logging

router = APIRouter()
logger = logging.getLogger(__name__)

# --- Dependency Function ---
def get_workflow(request: Request) -> EntryWorkflow:
    """Dependency to get the entry workflow from the request state."""
    startup_error = request.state.startup_error
    if startup_error is not None:
        raise HTTPException(status_code=503, detail=f"Error starting application: {startup_error}")
    workflow = request.state.workflow
    if workflow is None:
        logger.error("Entry workflow not found in application state. Check MongoDB connection.")
        raise HTTPException(status_code=503, detail="Database service not available.")
    return workflow

WorkflowDep = Annotated[EntryWorkflow, Depends(get_workflow)]


def table_payload(workflow: EntryWorkflow) -> Dict[str, Any]:
    payload = workflow.table.snapshot()
    payload["total"] = round(workflow.total, 2)
    payload["total_label"] = workflow.total_label
    payload["skipped"] = workflow.skipped
    return payload

# --- API Routes ---

@router.get("/expenses", summary="Get All Expenses", description="Reloads every expense, most recent first, with the running total.")
async def get_expenses(workflow: WorkflowDep) -> Dict[str, Any]:
    logger.info("GET /expenses endpoint called.")
    try:
        await workflow.refresh()
    except StorageError as se:
        logger.error(f"Storage error fetching expenses: {se}")
        raise HTTPException(status_code=503, detail=f"Database connection error: {se}")
    return table_payload(workflow)

@router.post("/expenses", summary="Add Expense", description="Validates the entry form, stores the expense and returns the refreshed table.")
async def add_expense(workflow: WorkflowDep, form: Annotated[EntryForm, Body(...)]):
    logger.info(f"POST /expenses endpoint called with amount {form.amount!r}, category {form.category!r}")
    result = await workflow.submit(form)
    content: Dict[str, Any] = {
        "message": result.message,
        "form": result.form.model_dump(mode="json"),
    }
    if result.ok:
        content["expense"] = result.expense.model_dump(mode="json")
        content["table"] = table_payload(workflow)
        return JSONResponse(status_code=201, content=content)
    status_code = 400 if result.kind == "validation" else 503
    return JSONResponse(status_code=status_code, content=content)

@router.get("/form", summary="Entry Form Defaults", description="Default values of the entry form and the category choices.")
async def get_form() -> Dict[str, Any]:
    return {
        "form": EntryForm.defaults().model_dump(mode="json"),
        "categories": list(CATEGORIES),
    }

@router.get("/health", summary="Database Health", description="Pings the expense database.")
async def health(workflow: WorkflowDep) -> Dict[str, Any]:
    try:
        await workflow.store.ping()
    except StorageError as se:
        raise HTTPException(status_code=503, detail=str(se))
    return {"status": "ok", "database": workflow.store.database_name}
