"""
Storage Services Package

Provides the abstract ledger interface and the CSV file implementation.
"""

from expense_tracker.services.storage.interface import (
    ExpenseStorageInterface,
    HeaderMismatchError,
    RowRejectedError,
    StorageError,
)
from expense_tracker.services.storage.csv_file import (
    LEDGER_COLUMNS,
    CsvExpenseStorage,
)

__all__ = [
    # Interfaces
    "ExpenseStorageInterface",
    # Exceptions
    "HeaderMismatchError",
    "RowRejectedError",
    "StorageError",
    # CSV implementation
    "CsvExpenseStorage",
    "LEDGER_COLUMNS",
]
