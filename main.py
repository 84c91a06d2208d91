"""Main FastAPI application"""
import logging
import logging.config
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from pathlib import Path
from routes import router as api_router
from services.entry_workflow import EntryWorkflow
from services.expense_store import ExpenseStore
from services.table_view import ExpenseTableModel
from settings import Settings

settings = Settings.from_env()

# --- Unified Logging Configuration with Rich ---
LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(name)s - %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "default": {
            "class": "rich.logging.RichHandler",
            "formatter": "default",
            "level": "DEBUG",
            "rich_tracebacks": True,
            "show_time": True,
            "show_path": False,
            "log_time_format": "%Y-%m-%d %H:%M:%S",
            "markup": False
        },
    },
    "loggers": {
        "uvicorn": {
             "handlers": ["default"],
             "level": "INFO",
             "propagate": False,
        },
        "uvicorn.error": {
            "handlers": ["default"],
            "level": "INFO",
            "propagate": False,
        },
        "uvicorn.access": {
            "handlers": ["default"],
            "level": "INFO",
            "propagate": False,
        },
        "": { # Root logger for our application
            "handlers": ["default"],
            "level": settings.log_level,
            "propagate": False,
        },
    },
}

logging.config.dictConfig(LOGGING_CONFIG)

logger = logging.getLogger(__name__)

PUBLIC_DIR = Path(__file__).parent / "public"

if not settings.mongodb_uri:
    logger.error("MONGODB_URI environment variable not set! Database connection will fail.")

# Application state shared with the routes through the request state
app_state = {}


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: connect to MongoDB and load the current expenses
    app_state["startup_error"] = None
    app_state["workflow"] = None
    store = None
    try:
        if not settings.mongodb_uri:
            raise RuntimeError("MONGODB_URI is not set.")
        store = ExpenseStore.connect(settings.mongodb_uri, settings.db_name, settings.collection_name)
        app_state["store"] = store
        await store.ping()
        workflow = EntryWorkflow(store, ExpenseTableModel(), currency_symbol=settings.currency_symbol)
        await workflow.refresh()
        app_state["workflow"] = workflow
        logger.info(f"Loaded {workflow.table.row_count} expenses from database: {settings.db_name}. {workflow.total_label}")
    except Exception as e:
        logger.exception(f"Error starting application: {e}")
        app_state["startup_error"] = str(e)

    yield # Application runs here

    # Shutdown: Close MongoDB connection
    if store is not None:
        store.close()
    app_state.pop("store", None)


app = FastAPI(
    title="Expense Tracker API",
    description="Record expenses and list them with a running total.",
    version="0.1.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(
    api_router,
    prefix="/api",
    tags=["api"],
)

# Mount static files directory (MUST be after API router)
app.mount("/", StaticFiles(directory=PUBLIC_DIR, html=True), name="static")

# Make app state accessible via middleware
@app.middleware("http")
async def add_app_state_to_request(request: Request, call_next):
    """Adds the entry workflow and any startup failure to the request state."""
    request.state.workflow = app_state.get("workflow")
    request.state.startup_error = app_state.get("startup_error")
    response = await call_next(request)
    return response


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
