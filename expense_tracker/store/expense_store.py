"""
In-Memory Expense Store

The store is the authoritative, ordered list of expenses for one
session. Queries are full linear scans that return new lists; nothing
handed out by the store can be used to change it.

TRADEOFFS:
- No date index (fine for a personal ledger of a few thousand rows)
- Positions are not stable keys: deleting shifts every later record
"""

from typing import Callable, Iterable, Iterator

from expense_tracker.models.expense import CalendarDate, Expense


class ExpenseStore:
    """Ordered, in-memory collection of expenses."""

    def __init__(self, expenses: Iterable[Expense] = ()):
        self._expenses: list[Expense] = list(expenses)

    def __len__(self) -> int:
        return len(self._expenses)

    def __iter__(self) -> Iterator[Expense]:
        return iter(self.all())

    def add(self, expense: Expense) -> None:
        """Append an expense at the end of the store."""
        self._expenses.append(expense)

    def delete_at(self, position: int) -> bool:
        """
        Remove the expense at a zero-based position.

        Returns:
            True if an expense was removed, False if the position is
            out of bounds (the store is left untouched).
        """
        if not 0 <= position < len(self._expenses):
            return False
        del self._expenses[position]
        return True

    def get(self, position: int) -> Expense:
        """Return the expense at a position; raises IndexError if out of bounds."""
        if not 0 <= position < len(self._expenses):
            raise IndexError(f"No expense at position {position}")
        return self._expenses[position]

    def all(self) -> list[Expense]:
        """All expenses in insertion order."""
        return list(self._expenses)

    def replace_all(self, expenses: Iterable[Expense]) -> None:
        """Drop the current contents and take ``expenses`` in their order."""
        self._expenses = list(expenses)

    def clear(self) -> None:
        self._expenses = []

    # -------------------------------------------------------------------------
    # Filters
    # -------------------------------------------------------------------------

    def _filter(self, predicate: Callable[[Expense], bool]) -> list[Expense]:
        return [expense for expense in self._expenses if predicate(expense)]

    def filter_by_day(self, day: CalendarDate) -> list[Expense]:
        """Expenses dated exactly ``day``."""
        return self._filter(lambda e: e.date.as_tuple() == day.as_tuple())

    def filter_by_month(self, month: int, year: int) -> list[Expense]:
        """Expenses in the given month of the given year."""
        return self._filter(lambda e: e.date.year == year and e.date.month == month)

    def filter_by_year(self, year: int) -> list[Expense]:
        return self._filter(lambda e: e.date.year == year)

    def filter_by_range(self, start: CalendarDate, end: CalendarDate) -> list[Expense]:
        """
        Expenses with ``start <= date <= end`` (both ends inclusive).

        When start is after end nothing can match and the result is empty.
        """
        return self._filter(lambda e: start <= e.date <= end)
