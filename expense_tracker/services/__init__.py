"""Services package."""

from expense_tracker.services.storage import (
    LEDGER_COLUMNS,
    CsvExpenseStorage,
    ExpenseStorageInterface,
    HeaderMismatchError,
    RowRejectedError,
    StorageError,
)

__all__ = [
    # Storage services
    "CsvExpenseStorage",
    "ExpenseStorageInterface",
    "HeaderMismatchError",
    "LEDGER_COLUMNS",
    "RowRejectedError",
    "StorageError",
]
