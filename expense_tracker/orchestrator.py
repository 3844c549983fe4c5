"""
Main Orchestrator for the Expense Tracker

Ties the record store, the ledger storage, the query executor and the
audit logger together. The presentation layer talks only to
ExpenseTracker and passes it already-validated primitives.

DESIGN DECISION: A load replaces the store contents only when the
ledger was read successfully. A failed load leaves the store as it was,
so partially decoded data is never presented as loaded.
"""

from decimal import Decimal
from typing import Optional, Union

from expense_tracker.audit import AuditLogger
from expense_tracker.config import Settings, get_settings
from expense_tracker.models.expense import (
    CalendarDate,
    Expense,
    ExpenseQuery,
    LoadResult,
    QueryResult,
    SaveResult,
    TransactionType,
)
from expense_tracker.queries import QueryExecutor
from expense_tracker.services.storage import CsvExpenseStorage, ExpenseStorageInterface
from expense_tracker.store import ExpenseStore


class ExpenseTracker:
    """
    Orchestrates every ledger operation for one session.

    Operations:
    1. Add / delete / list expenses (in-memory store)
    2. Save / load the ledger (storage)
    3. Summarize by day, month, year or range (query executor)

    Every operation is audited.
    """

    def __init__(
        self,
        storage: ExpenseStorageInterface,
        store: Optional[ExpenseStore] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._store = store if store is not None else ExpenseStore()
        self._audit_logger = audit_logger or AuditLogger()
        self._query_executor = QueryExecutor(self._store)

    @property
    def store(self) -> ExpenseStore:
        return self._store

    @property
    def storage(self) -> ExpenseStorageInterface:
        return self._storage

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    def add_expense(
        self,
        description: str,
        amount: Union[Decimal, str, int, float],
        date: CalendarDate,
        category: str,
        transaction_type: TransactionType,
    ) -> Expense:
        """
        Create an expense and append it to the store.

        Floats are converted through their string form so 4.1 is
        stored as Decimal("4.1").

        Raises:
            pydantic.ValidationError: If the values do not form a valid expense
        """
        if isinstance(amount, float):
            amount = Decimal(str(amount))
        expense = Expense(
            description=description,
            amount=amount,
            date=date,
            category=category,
            transaction_type=transaction_type,
        )
        self._store.add(expense)
        self._audit_logger.log_expense_added(len(self._store) - 1, expense)
        return expense

    def delete_expense(self, position: int) -> bool:
        """Delete the expense at ``position``; False if there is none."""
        size = len(self._store)
        if not 0 <= position < size:
            self._audit_logger.log_delete_rejected(position, size)
            return False

        expense = self._store.get(position)
        self._store.delete_at(position)
        self._audit_logger.log_expense_deleted(position, expense, len(self._store))
        return True

    def list_expenses(self) -> list[Expense]:
        return self._store.all()

    def save(self) -> SaveResult:
        """Write the whole store to the ledger."""
        result = self._storage.save_expenses(self._store.all())
        if result.success:
            self._audit_logger.log_ledger_saved(result.destination, result.saved_count)
        else:
            self._audit_logger.log_save_failed(
                result.destination, result.error_message or "unknown error"
            )
        return result

    def load(self) -> LoadResult:
        """
        Replace the store contents with the ledger.

        Skipped rows are audited one by one. On failure the store is
        not touched.
        """
        result = self._storage.load_expenses()

        for issue in result.issues:
            self._audit_logger.log_row_skipped(result.source, issue)

        if not result.success:
            self._audit_logger.log_load_failed(
                result.source, result.error_message or "unknown error"
            )
            return result

        self._store.replace_all(result.expenses)
        self._audit_logger.log_ledger_loaded(
            path=result.source,
            loaded=result.loaded_count,
            skipped=result.skipped_count,
            file_found=result.file_found,
        )
        return result

    def summarize(self, query: ExpenseQuery) -> QueryResult:
        """Run a summary query over the store."""
        result = self._query_executor.execute(query)
        if result.success:
            self._audit_logger.log_query_executed(
                query_id=query.query_id,
                period=query.period.value,
                result_count=result.result_count,
            )
        else:
            self._audit_logger.log_query_failed(
                query_id=query.query_id,
                period=query.period.value,
                error_message=result.error_message or "unknown error",
            )
        return result


def create_app_components(
    settings: Optional[Settings] = None,
) -> ExpenseTracker:
    """
    Factory function to create the application components.

    Args:
        settings: Settings to use. Defaults to the cached application
                  settings.

    Returns:
        An ExpenseTracker with an empty store, bound to the configured
        ledger file.
    """
    settings = settings or get_settings()
    storage = CsvExpenseStorage(settings.storage.ledger_path)
    return ExpenseTracker(
        storage=storage,
        store=ExpenseStore(),
        audit_logger=AuditLogger(),
    )
