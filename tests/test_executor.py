"""
Tests for the summary query executor
"""

import pytest
from decimal import Decimal

from expense_tracker.models.expense import (
    CalendarDate,
    Expense,
    ExpenseQuery,
    QueryPeriod,
    TransactionType,
)
from expense_tracker.queries import QueryExecutor
from expense_tracker.store import ExpenseStore


def make_expense(description, date_text, amount, category="Food",
                 transaction_type=TransactionType.CASH):
    return Expense(
        description=description,
        amount=Decimal(amount),
        date=CalendarDate.parse(date_text),
        category=category,
        transaction_type=transaction_type,
    )


@pytest.fixture
def executor():
    store = ExpenseStore([
        make_expense("Coffee", "2024-03-05", "4.50"),
        make_expense("Lunch", "2024-03-05", "12.00"),
        make_expense("Train", "2024-03-20", "3.10", "Transport", TransactionType.CREDIT),
        make_expense("Refund", "2024-04-02", "-10.00", "Food", TransactionType.CREDIT),
        make_expense("Gift", "2023-12-24", "30.00", ""),
    ])
    return QueryExecutor(store)


class TestQueryExecutor:
    """Tests for period selection and totals."""

    def test_all(self, executor):
        """Test the unfiltered listing."""
        result = executor.execute(ExpenseQuery())
        assert result.success is True
        assert result.result_count == 5
        assert result.total_amount == Decimal("39.60")
        assert result.query_description == "Expenses (all)"

    def test_day(self, executor):
        """Test a single-day summary."""
        result = executor.execute(
            ExpenseQuery(period=QueryPeriod.DAY, day=CalendarDate.parse("2024-03-05"))
        )
        assert [e.description for e in result.expenses] == ["Coffee", "Lunch"]
        assert result.total_amount == Decimal("16.50")
        assert result.query_description == "Expenses on 05 Mar 2024"

    def test_month(self, executor):
        """Test a month summary."""
        result = executor.execute(ExpenseQuery(period=QueryPeriod.MONTH, month=3, year=2024))
        assert result.result_count == 3
        assert result.total_amount == Decimal("19.60")
        assert result.query_description == "Expenses in March 2024"

    def test_year(self, executor):
        """Test a year summary, where refunds reduce the total."""
        result = executor.execute(ExpenseQuery(period=QueryPeriod.YEAR, year=2024))
        assert result.result_count == 4
        assert result.total_amount == Decimal("9.60")

    def test_range(self, executor):
        """Test an inclusive range summary."""
        result = executor.execute(ExpenseQuery(
            period=QueryPeriod.RANGE,
            start=CalendarDate.parse("2023-12-24"),
            end=CalendarDate.parse("2024-03-05"),
        ))
        assert [e.description for e in result.expenses] == ["Coffee", "Lunch", "Gift"]
        assert result.query_description == "Expenses from 24 Dec 2023 to 05 Mar 2024"

    def test_no_match(self, executor):
        """Test a period with no expenses."""
        result = executor.execute(ExpenseQuery(period=QueryPeriod.YEAR, year=1999))
        assert result.success is True
        assert result.data_found is False
        assert result.total_amount == Decimal("0")
        assert result.expenses == []

    def test_day_description_for_impossible_date(self, executor):
        """Test that a lax date such as Feb 30 can still be described."""
        result = executor.execute(
            ExpenseQuery(period=QueryPeriod.DAY, day=CalendarDate.parse("2024-02-30"))
        )
        assert result.success is True
        assert result.query_description == "Expenses on 30 Feb 2024"


class TestGroupedTotals:
    """Tests for the per-group breakdown."""

    def test_group_by_category(self, executor):
        """Test category totals, with empty categories grouped together."""
        result = executor.execute(ExpenseQuery(group_by="category"))
        assert result.breakdown == {
            "Food": Decimal("6.50"),
            "Transport": Decimal("3.10"),
            "Uncategorised": Decimal("30.00"),
        }
        assert result.query_description == "Expenses (all) grouped by category"

    def test_group_by_type(self, executor):
        """Test cash versus credit totals."""
        result = executor.execute(ExpenseQuery(group_by="type"))
        assert result.breakdown == {
            "Cash": Decimal("46.50"),
            "Credit": Decimal("-6.90"),
        }

    def test_group_by_month(self, executor):
        """Test per-month totals in order of first appearance."""
        result = executor.execute(ExpenseQuery(period=QueryPeriod.YEAR, year=2024, group_by="month"))
        assert list(result.breakdown) == ["2024-03", "2024-04"]
        assert result.breakdown["2024-04"] == Decimal("-10.00")

    def test_no_breakdown_without_group_by(self, executor):
        """Test that the breakdown is empty by default."""
        assert executor.execute(ExpenseQuery()).breakdown == {}
