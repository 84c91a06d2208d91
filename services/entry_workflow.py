"""Service layer for recording an expense from the entry form."""
import asyncio
import logging
import math
import re
from dataclasses import dataclass
from typing import Optional
from models.expense import EntryForm, Expense
from services.errors import ExpenseValidationError, StorageError
from services.expense_store import ExpenseStore
from services.table_view import ExpenseTableModel

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Expense added successfully!"

# Plain decimal or exponent notation, ASCII digits only
AMOUNT_PATTERN = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?", re.ASCII)


@dataclass
class SubmissionResult:
    ok: bool
    message: str
    form: EntryForm
    kind: Optional[str] = None  # "validation" or "storage" on failure
    expense: Optional[Expense] = None


def validate_amount(text: str) -> float:
    """Parses the amount text, raising ExpenseValidationError with the message to show."""
    text = (text or "").strip()
    if not text:
        raise ExpenseValidationError("Amount cannot be empty.")
    if not AMOUNT_PATTERN.fullmatch(text):
        raise ExpenseValidationError("Please enter a valid numeric amount.")
    amount = float(text)
    if not math.isfinite(amount):
        raise ExpenseValidationError("Please enter a valid numeric amount.")
    if amount <= 0:
        raise ExpenseValidationError("Amount must be greater than zero.")
    return amount


def format_total(total: float) -> str:
    return f"{total:.2f}"


class EntryWorkflow:
    """
    Validates form input, saves the expense, then reloads the table and total.

    One submission runs at a time: the refresh that follows an insert is
    finished before the next submission starts.
    """

    def __init__(self, store: ExpenseStore, table: ExpenseTableModel, currency_symbol: str = "₹"):
        self.store = store
        self.table = table
        self.currency_symbol = currency_symbol
        self.total = 0.0
        self.skipped = 0
        self._lock = asyncio.Lock()

    @property
    def total_label(self) -> str:
        return f"Total: {self.currency_symbol}{format_total(self.total)}"

    async def refresh(self) -> float:
        """Reloads every expense into the table and recomputes the total.

        Waits for any submission in progress, so an older read never
        replaces the table a submission just refreshed.
        """
        async with self._lock:
            return await self._refresh()

    async def _refresh(self) -> float:
        expenses = await self.store.list_all()
        self.table.set_items(expenses)
        self.total = sum(expense.amount for expense in expenses)
        self.skipped = len(self.store.last_skipped)
        if self.skipped:
            logger.warning(f"{self.skipped} malformed expense record(s) left out of the table.")
        return self.total

    async def submit(self, form: EntryForm) -> SubmissionResult:
        async with self._lock:
            try:
                amount = validate_amount(form.amount)
            except ExpenseValidationError as e:
                logger.warning(f"Rejected expense input {form.amount!r}: {e}")
                return SubmissionResult(ok=False, kind="validation", message=str(e), form=form)

            expense = Expense(
                amount=amount,
                category=form.category,
                description=form.description.strip(),
                date=form.date,
            )
            try:
                await self.store.insert(expense)
                await self._refresh()
            except StorageError as e:
                logger.error(f"Failed to add expense: {e}")
                return SubmissionResult(ok=False, kind="storage", message=f"Failed to add expense: {e}", form=form)

            logger.info(f"Expense {expense.id} recorded. {self.total_label}")
            return SubmissionResult(ok=True, message=SUCCESS_MESSAGE, form=EntryForm.defaults(), expense=expense)
