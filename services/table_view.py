"""Read-only table of expenses for the presentation layer."""
from typing import Any, Callable, Dict, List, Optional, Sequence
from models.expense import Expense

COLUMNS = ("Date", "Category", "Description", "Amount")
DATE_FORMAT = "%Y-%m-%d"

Listener = Callable[["ExpenseTableModel"], None]


class ExpenseTableModel:
    """
    Holds the expenses currently on display and renders them as cells.

    Nothing here talks to a widget toolkit: displays subscribe and get
    called whenever the whole data set is replaced.
    """

    def __init__(self):
        self._items: List[Expense] = []
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Registers a change listener and returns a function removing it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_items(self, items: Optional[Sequence[Expense]]) -> None:
        self._items = list(items) if items is not None else []
        for listener in list(self._listeners):
            listener(self)

    @property
    def row_count(self) -> int:
        return len(self._items)

    @property
    def column_count(self) -> int:
        return len(COLUMNS)

    def column_name(self, column: int) -> str:
        if 0 <= column < len(COLUMNS):
            return COLUMNS[column]
        return ""

    def expense_at(self, row: int) -> Optional[Expense]:
        """The expense behind a row, or None when the row does not exist."""
        if 0 <= row < len(self._items):
            return self._items[row]
        return None

    def value_at(self, row: int, column: int) -> str:
        expense = self.expense_at(row)
        if expense is None:
            return ""
        if column == 0:
            return expense.date.strftime(DATE_FORMAT) if expense.date is not None else ""
        if column == 1:
            return expense.category
        if column == 2:
            return expense.description
        if column == 3:
            return f"{expense.amount:.2f}"
        return ""

    def is_cell_editable(self, row: int, column: int) -> bool:
        return False

    def rows(self) -> List[List[str]]:
        return [
            [self.value_at(row, column) for column in range(self.column_count)]
            for row in range(self.row_count)
        ]

    def snapshot(self) -> Dict[str, Any]:
        return {"columns": list(COLUMNS), "rows": self.rows()}
