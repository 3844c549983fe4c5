"""
Audit Logger

Every change to the ledger is logged as an AuditEvent:
1. Structured local log (for debugging)
2. In-memory history (so the UI can show what happened this session)

The history is append-only and lives as long as the logger does.
"""

import logging
from typing import Optional
from uuid import UUID

import structlog

from expense_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from expense_tracker.models.expense import Expense, ValidationIssue


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route structlog output through the standard library at ``level``.

    structlog filters by the stdlib level, so nothing below WARNING is
    emitted until this has been called.
    """
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger("expense_tracker").setLevel(level)


class AuditLogger:
    """Central audit logging service."""

    def __init__(self):
        self._events: list[AuditEvent] = []
        self._logger = structlog.get_logger("expense_tracker.audit")

    @property
    def events(self) -> list[AuditEvent]:
        """Events logged so far, oldest first."""
        return list(self._events)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event locally and append it to the history."""
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        self._events.append(event)

    def log_expense_added(self, position: int, expense: Expense) -> None:
        """Log an expense appended to the store."""
        self.log(AuditEventBuilder.expense_added(
            position=position,
            description=expense.description,
            amount=str(expense.amount),
            date=expense.date.isoformat(),
        ))

    def log_expense_deleted(
        self,
        position: int,
        expense: Expense,
        remaining: int,
    ) -> None:
        self.log(AuditEventBuilder.expense_deleted(
            position=position,
            description=expense.description,
            remaining=remaining,
        ))

    def log_delete_rejected(self, position: int, size: int) -> None:
        self.log(AuditEventBuilder.delete_rejected(position=position, size=size))

    def log_ledger_saved(self, path: str, count: int) -> None:
        self.log(AuditEventBuilder.ledger_saved(path=path, count=count))

    def log_save_failed(self, path: str, error_message: str) -> None:
        self.log(AuditEventBuilder.save_failed(path=path, error_message=error_message))

    def log_ledger_loaded(
        self,
        path: str,
        loaded: int,
        skipped: int,
        file_found: bool,
    ) -> None:
        self.log(AuditEventBuilder.ledger_loaded(
            path=path,
            loaded=loaded,
            skipped=skipped,
            file_found=file_found,
        ))

    def log_load_failed(self, path: str, error_message: str) -> None:
        self.log(AuditEventBuilder.load_failed(path=path, error_message=error_message))

    def log_row_skipped(self, path: str, issue: ValidationIssue) -> None:
        """Log one ledger row dropped during load."""
        self.log(AuditEventBuilder.row_skipped(path=path, issue=issue.model_dump()))

    def log_query_executed(
        self,
        query_id: UUID,
        period: str,
        result_count: int,
    ) -> None:
        self.log(AuditEventBuilder.query_executed(
            query_id=query_id,
            period=period,
            result_count=result_count,
        ))

    def log_query_failed(
        self,
        query_id: UUID,
        period: str,
        error_message: str,
    ) -> None:
        self.log(AuditEventBuilder.query_failed(
            query_id=query_id,
            period=period,
            error_message=error_message,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
        ))
