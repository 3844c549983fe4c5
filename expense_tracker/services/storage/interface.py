"""
Abstract Storage Interface

DESIGN DECISION: The ledger format sits behind an abstract interface.
The store and the orchestrator only see load/save results, so the CSV
file can be swapped for another backend (or an in-memory fake in tests)
without touching them.

The interface is intentionally simple: one call to read the whole
ledger, one call to write it.
"""

from abc import ABC, abstractmethod
from typing import Sequence

from expense_tracker.models.expense import Expense, LoadResult, SaveResult, ValidationIssue


class ExpenseStorageInterface(ABC):
    """
    Abstract interface for ledger persistence.

    Implementations report expected failures (missing file, bad rows,
    unwritable destination) through the returned result objects and
    never raise for them.
    """

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable location of the ledger (e.g. a file path)."""
        pass

    @abstractmethod
    def load_expenses(self) -> LoadResult:
        """
        Read every expense from storage.

        Returns:
            LoadResult with the decoded expenses in file order and one
            ValidationIssue per skipped row. A missing ledger is a
            successful load of zero expenses.
        """
        pass

    @abstractmethod
    def save_expenses(self, expenses: Sequence[Expense]) -> SaveResult:
        """
        Replace the stored ledger with ``expenses``.

        Args:
            expenses: Expenses to write, in order

        Returns:
            SaveResult telling whether the write succeeded
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class HeaderMismatchError(StorageError):
    """The ledger header is missing or does not name the expected columns."""
    pass


class RowRejectedError(StorageError):
    """A single ledger row could not be decoded and must be skipped."""

    def __init__(self, issue: ValidationIssue):
        super().__init__(issue.message)
        self.issue = issue
