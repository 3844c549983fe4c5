"""
Audit Models for the Expense Tracker

Every change to the ledger (add, delete, save, load) produces an
audit event. Events are append-only: they are never edited or removed.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Record store
    EXPENSE_ADDED = "expense_added"
    EXPENSE_DELETED = "expense_deleted"
    DELETE_REJECTED = "delete_rejected"

    # Persistence
    LEDGER_SAVED = "ledger_saved"
    SAVE_FAILED = "save_failed"
    LEDGER_LOADED = "ledger_loaded"
    LOAD_FAILED = "load_failed"
    ROW_SKIPPED = "row_skipped"

    # Query operations
    QUERY_EXECUTED = "query_executed"
    QUERY_FAILED = "query_failed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of the audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'ledger', 'query')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to, if it has one"
    )

    # Event details
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    # User action tracking
    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added(position, description, amount)
        event = AuditEventBuilder.ledger_saved(path, count)
    """

    @staticmethod
    def expense_added(
        position: int,
        description: str,
        amount: str,
        date: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_type="expense",
            description=f"Expense added: {description} ({amount})"[:500],
            details={
                "position": position,
                "amount": amount,
                "date": date,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(
        position: int,
        description: str,
        remaining: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_type="expense",
            description=f"Expense deleted at position {position}: {description}"[:500],
            details={
                "position": position,
                "remaining": remaining,
            },
            is_user_action=True,
        )

    @staticmethod
    def delete_rejected(
        position: int,
        size: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DELETE_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="expense",
            description=f"No expense at position {position}",
            details={
                "position": position,
                "size": size,
            },
            is_user_action=True,
        )

    @staticmethod
    def ledger_saved(
        path: str,
        count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_SAVED,
            entity_type="ledger",
            description=f"Saved {count} expenses to {path}"[:500],
            details={
                "path": path,
                "count": count,
            },
        )

    @staticmethod
    def save_failed(
        path: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="ledger",
            description=f"Failed to save expenses to {path}"[:500],
            error_message=error_message,
            details={
                "path": path,
            },
        )

    @staticmethod
    def ledger_loaded(
        path: str,
        loaded: int,
        skipped: int,
        file_found: bool,
    ) -> AuditEvent:
        if file_found:
            description = f"Loaded {loaded} expenses from {path}"
        else:
            description = f"No ledger file at {path}, starting empty"
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOADED,
            entity_type="ledger",
            description=description[:500],
            details={
                "path": path,
                "loaded": loaded,
                "skipped": skipped,
                "file_found": file_found,
            },
        )

    @staticmethod
    def load_failed(
        path: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="ledger",
            description=f"Failed to load expenses from {path}"[:500],
            error_message=error_message,
            details={
                "path": path,
            },
        )

    @staticmethod
    def row_skipped(
        path: str,
        issue: dict,
    ) -> AuditEvent:
        severity = (
            AuditSeverity.INFO
            if issue.get("severity") == "info"
            else AuditSeverity.WARNING
        )
        return AuditEvent(
            event_type=AuditEventType.ROW_SKIPPED,
            severity=severity,
            entity_type="ledger",
            description=f"Skipped row: {issue.get('message', '')}"[:500],
            details={
                "path": path,
                "issue": issue,
            },
        )

    @staticmethod
    def query_executed(
        query_id: UUID,
        period: str,
        result_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.QUERY_EXECUTED,
            entity_type="query",
            entity_id=query_id,
            description=f"Query executed: {period} returned {result_count} results",
            details={
                "period": period,
                "result_count": result_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def query_failed(
        query_id: UUID,
        period: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.QUERY_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="query",
            entity_id=query_id,
            description=f"Query failed: {period}",
            error_message=error_message,
            details={
                "period": period,
            },
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}"[:500],
            error_message=error_message,
            details=details or {},
        )
