"""
Query Execution Engine

Runs an ExpenseQuery against the in-memory store and reports the
matched expenses, their total, and an optional per-group breakdown.

Execution is deterministic and read-only: every filter returns a new
list and the store is never reordered.
"""

import calendar
from collections import defaultdict
from decimal import Decimal
from typing import Optional

from expense_tracker.models.expense import (
    CalendarDate,
    Expense,
    ExpenseQuery,
    QueryPeriod,
    QueryResult,
)
from expense_tracker.store import ExpenseStore


class QueryExecutionError(Exception):
    """Error during query execution."""
    pass


class QueryExecutor:
    """
    Executes summary queries against the expense store.

    GUARANTEES:
    - Only returns expenses actually held by the store
    - Keeps insertion order in the results
    - Clear "no data found" if nothing matches
    """

    def __init__(self, store: ExpenseStore):
        self._store = store

    def execute(self, query: ExpenseQuery) -> QueryResult:
        """Execute a query; unexpected errors become a failed result."""
        try:
            expenses = self._select(query)
            return self._build_result(query, expenses)
        except Exception as e:
            return QueryResult(
                query_id=query.query_id,
                success=False,
                error_message=str(e),
                data_found=False,
                result_count=0,
                query_description=f"Query failed: {str(e)}",
            )

    def _select(self, query: ExpenseQuery) -> list[Expense]:
        """Route to the store filter matching the query period."""
        if query.period == QueryPeriod.ALL:
            return self._store.all()
        elif query.period == QueryPeriod.DAY:
            return self._store.filter_by_day(query.day)
        elif query.period == QueryPeriod.MONTH:
            return self._store.filter_by_month(query.month, query.year)
        elif query.period == QueryPeriod.YEAR:
            return self._store.filter_by_year(query.year)
        elif query.period == QueryPeriod.RANGE:
            return self._store.filter_by_range(query.start, query.end)
        raise QueryExecutionError(f"Unsupported query period: {query.period}")

    def _build_result(self, query: ExpenseQuery, expenses: list[Expense]) -> QueryResult:
        breakdown = {}
        if query.group_by:
            breakdown = self._grouped_totals(expenses, query.group_by)

        return QueryResult(
            query_id=query.query_id,
            success=True,
            data_found=len(expenses) > 0,
            result_count=len(expenses),
            expenses=expenses,
            total_amount=sum((e.amount for e in expenses), Decimal("0")),
            breakdown=breakdown,
            query_description=self._describe(query),
        )

    def _grouped_totals(self, expenses: list[Expense], group_by: str) -> dict[str, Decimal]:
        """Sum amounts per group, groups in order of first appearance."""
        groups: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))

        for expense in expenses:
            if group_by == "category":
                key = expense.category or "Uncategorised"
            elif group_by == "type":
                key = expense.transaction_type.value
            elif group_by == "month":
                key = f"{expense.date.year:04d}-{expense.date.month:02d}"
            else:
                key = "other"
            groups[key] += expense.amount

        return dict(groups)

    def _describe(self, query: ExpenseQuery) -> str:
        """Human-readable description of the queried period."""
        parts = ["Expenses"]
        if query.period == QueryPeriod.ALL:
            parts.append("(all)")
        elif query.period == QueryPeriod.DAY:
            parts.append(f"on {self._date_str(query.day)}")
        elif query.period == QueryPeriod.MONTH:
            parts.append(f"in {calendar.month_name[query.month]} {query.year}")
        elif query.period == QueryPeriod.YEAR:
            parts.append(f"in {query.year}")
        elif query.period == QueryPeriod.RANGE:
            parts.append(self._range_str(query.start, query.end))
        if query.group_by:
            parts.append(f"grouped by {query.group_by}")
        return " ".join(parts)

    def _date_str(self, day: Optional[CalendarDate]) -> str:
        # CalendarDate allows days a month does not have, so no strftime
        if day is None:
            return ""
        return f"{day.day:02d} {calendar.month_abbr[day.month]} {day.year}"

    def _range_str(self, start: CalendarDate, end: CalendarDate) -> str:
        if start.as_tuple() == end.as_tuple():
            return f"on {self._date_str(start)}"
        return f"from {self._date_str(start)} to {self._date_str(end)}"
