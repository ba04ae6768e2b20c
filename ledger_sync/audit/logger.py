"""
Audit Logger

DESIGN DECISION: Every sync action is logged as a structured event.
This provides:
1. Traceability of which backend answered which action
2. Debugging capability when a bridge or relay misbehaves
3. A short in-memory history the UI can show next to an error

The audit logger:
- Never raises; logging must not break a sync action
- Supports correlation IDs to trace all events of one user action
"""

from collections import deque
from typing import Optional
from uuid import UUID, uuid4

import structlog

from ledger_sync.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


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


DEFAULT_HISTORY_SIZE = 200


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. A bounded in-memory history (for display)
    """

    def __init__(self, history_size: int = DEFAULT_HISTORY_SIZE):
        self._history: deque[AuditEvent] = deque(maxlen=history_size)
        self._logger = structlog.get_logger("ledger_sync.audit")

    def log(self, event: AuditEvent) -> None:
        """Log an audit event."""
        self._history.append(event)
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def recent_events(self, limit: int = 50) -> list[AuditEvent]:
        """Most recent events, newest first."""
        return list(reversed(self._history))[:limit]

    def log_backend_selected(
        self,
        backend: str,
        is_configured: bool,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.backend_selected(
            backend=backend,
            is_configured=is_configured,
            correlation_id=correlation_id,
        ))

    def log_entries_loaded(
        self,
        backend: str,
        count: int,
        correlation_id: UUID,
    ) -> None:
        """Log a successful read."""
        self.log(AuditEventBuilder.entries_loaded(
            backend=backend,
            count=count,
            correlation_id=correlation_id,
        ))

    def log_load_failed(
        self,
        backend: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log a failed read."""
        self.log(AuditEventBuilder.load_failed(
            backend=backend,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_local_fallback(
        self,
        backend: str,
        count: int,
        correlation_id: UUID,
    ) -> None:
        """Log that the local snapshot was shown instead of the remote one."""
        self.log(AuditEventBuilder.local_fallback_used(
            backend=backend,
            count=count,
            correlation_id=correlation_id,
        ))

    def log_entry_added(
        self,
        entry_id: str,
        backend: str,
        count: int,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.entry_added(
            entry_id=entry_id,
            backend=backend,
            count=count,
            correlation_id=correlation_id,
        ))

    def log_entry_deleted(
        self,
        entry_id: str,
        backend: str,
        count: int,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.entry_deleted(
            entry_id=entry_id,
            backend=backend,
            count=count,
            correlation_id=correlation_id,
        ))

    def log_write_failed(
        self,
        operation: str,
        backend: str,
        error_message: str,
        correlation_id: UUID,
        entry_id: Optional[str] = None,
    ) -> None:
        """Log a failed add or delete."""
        self.log(AuditEventBuilder.write_failed(
            operation=operation,
            backend=backend,
            error_message=error_message,
            correlation_id=correlation_id,
            entry_id=entry_id,
        ))

    def log_draft_rejected(
        self,
        issues: list[dict],
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.draft_rejected(
            issues=issues,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (load, add, delete).
    Pass it through all subsequent operations.
    """
    return uuid4()
