"""
Audit Models for Ledger Sync

Every sync action (load, add, delete) leaves a trail of events.
This provides:
1. Traceability of which backend answered each action
2. Debugging information when a remote endpoint misbehaves
3. A record of when the UI was shown a fallback snapshot

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """
    Types of events we audit.
    """
    # Reads
    ENTRIES_LOADED = "entries_loaded"
    LOAD_FAILED = "load_failed"
    LOCAL_FALLBACK_USED = "local_fallback_used"

    # Writes
    ENTRY_ADDED = "entry_added"
    ENTRY_DELETED = "entry_deleted"
    WRITE_FAILED = "write_failed"
    DRAFT_REJECTED = "draft_rejected"

    # Configuration
    BACKEND_SELECTED = "backend_selected"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant sync step creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
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

    # Context
    backend: Optional[str] = Field(
        default=None,
        description="Backend kind that served the action"
    )
    entry_id: Optional[str] = Field(
        default=None,
        description="Entry the event relates to, if any"
    )
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID shared by all events of one user action"
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
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "backend": self.backend,
            "entry_id": self.entry_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.entries_loaded("spreadsheet-bridge", 12, correlation_id)
        event = AuditEventBuilder.write_failed("add", "managed-database", msg, correlation_id)
    """

    @staticmethod
    def backend_selected(
        backend: str,
        is_configured: bool,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKEND_SELECTED,
            severity=AuditSeverity.DEBUG,
            backend=backend,
            correlation_id=correlation_id,
            description=f"Backend selected: {backend}",
            details={
                "is_configured": is_configured,
            },
        )

    @staticmethod
    def entries_loaded(
        backend: str,
        count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRIES_LOADED,
            backend=backend,
            correlation_id=correlation_id,
            description=f"Loaded {count} entries from {backend}",
            details={
                "count": count,
            },
        )

    @staticmethod
    def load_failed(
        backend: str,
        error_message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            backend=backend,
            correlation_id=correlation_id,
            description=f"Loading from {backend} failed",
            error_message=error_message,
        )

    @staticmethod
    def local_fallback_used(
        backend: str,
        count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOCAL_FALLBACK_USED,
            severity=AuditSeverity.WARNING,
            backend=backend,
            correlation_id=correlation_id,
            description=f"Showing local snapshot of {count} entries instead of {backend}",
            details={
                "count": count,
            },
        )

    @staticmethod
    def entry_added(
        entry_id: str,
        backend: str,
        count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_ADDED,
            backend=backend,
            entry_id=entry_id,
            correlation_id=correlation_id,
            description=f"Entry added via {backend}",
            details={
                "count": count,
            },
        )

    @staticmethod
    def entry_deleted(
        entry_id: str,
        backend: str,
        count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_DELETED,
            backend=backend,
            entry_id=entry_id,
            correlation_id=correlation_id,
            description=f"Entry deleted via {backend}",
            details={
                "count": count,
            },
        )

    @staticmethod
    def write_failed(
        operation: str,
        backend: str,
        error_message: str,
        correlation_id: UUID,
        entry_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.WRITE_FAILED,
            severity=AuditSeverity.ERROR,
            backend=backend,
            entry_id=entry_id,
            correlation_id=correlation_id,
            description=f"{operation.capitalize()} via {backend} failed",
            error_message=error_message,
            details={
                "operation": operation,
            },
        )

    @staticmethod
    def draft_rejected(
        issues: list[dict],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DRAFT_REJECTED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"Draft rejected with {len(issues)} issues",
            details={
                "issues": issues,
            },
        )
