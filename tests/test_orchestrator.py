"""
Integration tests for ExpenseTracker against a temporary ledger file
"""

import pytest
from decimal import Decimal

from pydantic import ValidationError

from expense_tracker.config import Settings
from expense_tracker.models.audit import AuditEventType, AuditSeverity
from expense_tracker.models.expense import (
    CalendarDate,
    ExpenseQuery,
    QueryPeriod,
    TransactionType,
)
from expense_tracker.orchestrator import ExpenseTracker, create_app_components
from expense_tracker.services.storage import CsvExpenseStorage


@pytest.fixture
def ledger(tmp_path):
    return tmp_path / "expenses.csv"


@pytest.fixture
def tracker(ledger):
    return ExpenseTracker(storage=CsvExpenseStorage(ledger))


def add_coffee(tracker, date_text="2024-03-05", amount="4.50"):
    return tracker.add_expense(
        description="Coffee",
        amount=Decimal(amount),
        date=CalendarDate.parse(date_text),
        category="Food",
        transaction_type=TransactionType.CASH,
    )


def event_types(tracker):
    return [event.event_type for event in tracker.audit_logger.events]


class TestAddAndDelete:
    """Tests for editing the in-memory ledger."""

    def test_add_appends_and_audits(self, tracker):
        """Test that an added expense is last and audited with its position."""
        add_coffee(tracker)
        add_coffee(tracker, "2024-03-06", "3.00")

        assert [e.amount for e in tracker.list_expenses()] == [Decimal("4.50"), Decimal("3.00")]
        events = tracker.audit_logger.events
        assert event_types(tracker) == [AuditEventType.EXPENSE_ADDED] * 2
        assert events[1].details["position"] == 1

    def test_add_converts_float_through_text(self, tracker):
        """Test that 4.1 is stored as Decimal('4.1')."""
        expense = tracker.add_expense(
            description="Tea",
            amount=4.1,
            date=CalendarDate.parse("2024-03-05"),
            category="Food",
            transaction_type=TransactionType.CASH,
        )
        assert expense.amount == Decimal("4.1")

    def test_add_rejects_non_finite_amount(self, tracker):
        """Test that an invalid expense is never stored."""
        with pytest.raises(ValidationError):
            tracker.add_expense(
                description="Broken",
                amount=Decimal("NaN"),
                date=CalendarDate.parse("2024-03-05"),
                category="Food",
                transaction_type=TransactionType.CASH,
            )
        assert len(tracker.store) == 0
        assert tracker.audit_logger.events == []

    def test_delete(self, tracker):
        """Test deleting by position."""
        add_coffee(tracker)
        add_coffee(tracker, "2024-03-06", "3.00")

        assert tracker.delete_expense(0) is True
        assert [e.amount for e in tracker.list_expenses()] == [Decimal("3.00")]
        deleted = tracker.audit_logger.events[-1]
        assert deleted.event_type == AuditEventType.EXPENSE_DELETED
        assert deleted.details["remaining"] == 1

    @pytest.mark.parametrize("position", [-1, 1, 42])
    def test_delete_invalid_position(self, tracker, position):
        """Test that an invalid position is rejected and audited as a warning."""
        add_coffee(tracker)

        assert tracker.delete_expense(position) is False
        assert len(tracker.store) == 1
        rejected = tracker.audit_logger.events[-1]
        assert rejected.event_type == AuditEventType.DELETE_REJECTED
        assert rejected.severity == AuditSeverity.WARNING

    def test_long_description_is_added_and_deleted(self, tracker):
        """Test that a description longer than an audit line is still accepted."""
        description = "x" * 600
        expense = tracker.add_expense(
            description=description,
            amount=Decimal("1.00"),
            date=CalendarDate.parse("2024-03-05"),
            category="Other",
            transaction_type=TransactionType.CASH,
        )
        assert expense.description == description
        assert len(tracker.store) == 1
        assert len(tracker.audit_logger.events[-1].description) == 500

        assert tracker.delete_expense(0) is True
        assert len(tracker.store) == 0
        assert event_types(tracker) == [
            AuditEventType.EXPENSE_ADDED,
            AuditEventType.EXPENSE_DELETED,
        ]

    def test_long_description_from_ledger_is_deleted(self, tracker, ledger):
        """Test deleting a loaded record whose description is very long."""
        ledger.write_text(
            "Date,Description,Amount,Category,Type\n"
            f'"2024-03-05","{"y" * 600}",2.00,"Other","Credit"\n',
            encoding="utf-8",
        )
        assert tracker.load().loaded_count == 1

        assert tracker.delete_expense(0) is True
        assert len(tracker.store) == 0
        assert event_types(tracker)[-1] == AuditEventType.EXPENSE_DELETED


class TestSaveAndLoad:
    """Tests for persisting the ledger through the tracker."""

    def test_save_then_load_in_new_session(self, tracker, ledger):
        """Test that a second tracker sees what the first one saved."""
        add_coffee(tracker)
        add_coffee(tracker, "2024-03-06", "3.00")
        result = tracker.save()
        assert result.success is True
        assert result.saved_count == 2
        assert event_types(tracker)[-1] == AuditEventType.LEDGER_SAVED

        fresh = ExpenseTracker(storage=CsvExpenseStorage(ledger))
        loaded = fresh.load()
        assert loaded.success is True
        assert fresh.list_expenses() == tracker.list_expenses()
        assert event_types(fresh) == [AuditEventType.LEDGER_LOADED]

    def test_load_replaces_store(self, tracker, ledger):
        """Test that loading does not merge with unsaved expenses."""
        add_coffee(tracker)
        tracker.save()
        add_coffee(tracker, "2024-03-06", "3.00")

        tracker.load()
        assert len(tracker.store) == 1

    def test_load_missing_file_gives_empty_store(self, tracker):
        """Test the first run."""
        result = tracker.load()
        assert result.success is True
        assert result.file_found is False
        assert len(tracker.store) == 0
        assert tracker.audit_logger.events[-1].details["file_found"] is False

    def test_failed_load_leaves_store_unchanged(self, tracker, ledger):
        """Test that a bad header does not wipe the in-memory ledger."""
        add_coffee(tracker)
        ledger.write_text("Date,Desc\n", encoding="utf-8")

        result = tracker.load()
        assert result.success is False
        assert len(tracker.store) == 1
        failed = tracker.audit_logger.events[-1]
        assert failed.event_type == AuditEventType.LOAD_FAILED
        assert failed.severity == AuditSeverity.ERROR

    def test_skipped_rows_are_audited(self, tracker, ledger):
        """Test that each skipped row gets its own audit event."""
        ledger.write_text(
            "Date,Description,Amount,Category,Type\n"
            '"2024-03-05","Card",9.99,"Food","Debit"\n'
            '"0000-00-00","Blank",0,"","Cash"\n'
            '"2024-03-06","Coffee",4.50,"Food","Cash"\n',
            encoding="utf-8",
        )

        result = tracker.load()
        assert result.loaded_count == 1
        events = tracker.audit_logger.events
        assert [e.event_type for e in events] == [
            AuditEventType.ROW_SKIPPED,
            AuditEventType.ROW_SKIPPED,
            AuditEventType.LEDGER_LOADED,
        ]
        assert events[0].severity == AuditSeverity.WARNING
        assert events[1].severity == AuditSeverity.INFO
        assert events[2].details["skipped"] == 2

    def test_failed_save_is_audited(self, tmp_path):
        """Test that a save to a directory path fails cleanly."""
        tracker = ExpenseTracker(storage=CsvExpenseStorage(tmp_path))
        add_coffee(tracker)

        result = tracker.save()
        assert result.success is False
        assert event_types(tracker)[-1] == AuditEventType.SAVE_FAILED


class TestSummaries:
    """Tests for summaries through the tracker."""

    def test_month_summary_is_audited(self, tracker):
        """Test a month summary and its audit event."""
        add_coffee(tracker)
        add_coffee(tracker, "2024-04-01", "3.00")

        query = ExpenseQuery(period=QueryPeriod.MONTH, month=3, year=2024)
        result = tracker.summarize(query)

        assert result.success is True
        assert result.total_amount == Decimal("4.50")
        executed = tracker.audit_logger.events[-1]
        assert executed.event_type == AuditEventType.QUERY_EXECUTED
        assert executed.entity_id == query.query_id
        assert executed.details["result_count"] == 1


class TestCreateAppComponents:
    """Tests for the application factory."""

    def test_uses_configured_ledger_path(self, tmp_path, monkeypatch):
        """Test that the tracker is bound to the configured ledger file."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("EXPENSE_STORAGE_DATA_DIR", str(tmp_path / "ledger"))
        monkeypatch.setenv("EXPENSE_STORAGE_LEDGER_FILENAME", "mine.csv")

        tracker = create_app_components(Settings())

        assert tracker.storage.location == str(tmp_path / "ledger" / "mine.csv")
        assert len(tracker.store) == 0
