"""Error types raised by the expense services."""


class ExpenseValidationError(ValueError):
    """Raised when form input cannot become an expense. The message is shown to the user as is."""


class StorageError(ConnectionError):
    """Raised when the expense database cannot be reached or rejects an operation."""
