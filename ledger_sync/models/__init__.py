"""
Data Models Package

This package contains all Pydantic models used in Ledger Sync.
Everything crossing a storage boundary conforms to these schemas.
"""

from ledger_sync.models.entry import (
    DEFAULT_CATEGORIES,
    DEFAULT_CATEGORY,
    Entry,
    EntryKind,
    decode_entries,
    entry_from_row,
)
from ledger_sync.models.backend import (
    BackendConfig,
    BackendKind,
    LocalOnly,
    ManagedDatabase,
    SpreadsheetBridge,
)
from ledger_sync.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from ledger_sync.models.validation import (
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    # Entry models
    "DEFAULT_CATEGORIES",
    "DEFAULT_CATEGORY",
    "Entry",
    "EntryKind",
    "decode_entries",
    "entry_from_row",
    # Backend configuration
    "BackendConfig",
    "BackendKind",
    "LocalOnly",
    "ManagedDatabase",
    "SpreadsheetBridge",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
]
