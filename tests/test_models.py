"""
Tests for Ledger Sync models

Test strategy:
1. Unit tests for individual components (models, validators)
2. Integration tests for flows (with mocked remote services)
3. No real network calls in tests
"""

import pytest
from pydantic import TypeAdapter, ValidationError
from uuid import uuid4

from ledger_sync.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from ledger_sync.models.backend import (
    BackendConfig,
    BackendKind,
    LocalOnly,
    ManagedDatabase,
    SpreadsheetBridge,
)
from ledger_sync.models.entry import (
    DEFAULT_CATEGORIES,
    DEFAULT_CATEGORY,
    Entry,
    EntryKind,
    decode_entries,
    entry_from_row,
)
from ledger_sync.models.validation import ValidationIssue, ValidationResult


class TestEntryModel:
    """Tests for the Entry model."""

    def test_entry_accepts_kind_or_type(self):
        """Both the Python name and the wire name populate kind."""
        by_name = Entry(id="1", kind="income")
        by_alias = Entry.model_validate({"id": "1", "type": "income"})
        assert by_name.kind == EntryKind.INCOME
        assert by_alias.kind == EntryKind.INCOME

    def test_wire_form_uses_type(self, lunch):
        """Remote backends see `type`, the local mirror sees `kind`."""
        wire = lunch.to_wire()
        local = lunch.to_local()
        assert wire["type"] == "expense"
        assert "kind" not in wire
        assert local["kind"] == "expense"
        assert "type" not in local

    def test_entry_is_immutable(self, lunch):
        """Entries are never edited in place."""
        with pytest.raises(ValidationError):
            lunch.amount = 1

    def test_signed_amount(self, lunch, salary):
        assert lunch.signed_amount == -120
        assert salary.signed_amount == 50000

    def test_default_categories_cover_both_kinds(self):
        assert DEFAULT_CATEGORY in DEFAULT_CATEGORIES[EntryKind.EXPENSE]
        assert "薪水" in DEFAULT_CATEGORIES[EntryKind.INCOME]


class TestRowDecoding:
    """Tests for lenient row decoding."""

    def test_complete_row(self):
        entry = entry_from_row({
            "id": "abc",
            "description": "Salary",
            "amount": "50000",
            "type": "income",
            "category": "薪水",
            "date": "2024-05-01",
            "created_at": "2024-05-01T10:00:00Z",
        })
        assert entry == Entry(
            id="abc",
            description="Salary",
            amount=50000,
            kind=EntryKind.INCOME,
            category="薪水",
            date="2024-05-01",
        )

    def test_missing_fields_fall_back_to_defaults(self):
        entry = entry_from_row({"id": "abc"})
        assert entry.description == ""
        assert entry.amount == 0
        assert entry.kind == EntryKind.EXPENSE
        assert entry.category == DEFAULT_CATEGORY
        assert entry.date == ""

    def test_invalid_fields_fall_back_to_defaults(self):
        entry = entry_from_row({
            "id": 42,
            "description": None,
            "amount": "lots",
            "type": "refund",
            "category": "",
            "date": None,
        })
        assert entry.id == "42"
        assert entry.description == ""
        assert entry.amount == 0
        assert entry.kind == EntryKind.EXPENSE
        assert entry.category == DEFAULT_CATEGORY

    def test_non_finite_amount_is_zero(self):
        assert entry_from_row({"id": "x", "amount": "NaN"}).amount == 0
        assert entry_from_row({"id": "x", "amount": float("inf")}).amount == 0

    def test_rows_without_identity_are_skipped(self):
        assert entry_from_row({"description": "orphan"}) is None
        assert entry_from_row({"id": "  "}) is None
        assert entry_from_row(["id", "abc"]) is None

    def test_decode_entries_skips_bad_rows_only(self):
        entries = decode_entries([{"id": "a"}, "junk", None, {"id": "b", "amount": 5}])
        assert [e.id for e in entries] == ["a", "b"]

    def test_decode_non_list_is_empty(self):
        assert decode_entries({"entries": []}) == []
        assert decode_entries(None) == []
        assert decode_entries("[]") == []


class TestBackendConfig:
    """Tests for the tagged backend variants."""

    def test_local_only_is_always_configured(self):
        config = LocalOnly()
        assert config.kind == BackendKind.LOCAL_ONLY
        assert config.is_configured is True
        assert config.is_remote is False

    def test_bridge_needs_endpoint(self):
        assert SpreadsheetBridge().is_configured is False
        assert SpreadsheetBridge(endpoint="https://example.com").is_configured is True
        assert SpreadsheetBridge().use_proxy is True

    def test_managed_needs_url_and_key(self):
        assert ManagedDatabase(url="https://x.supabase.co").is_configured is False
        assert ManagedDatabase(url="https://x.supabase.co", access_key="k").is_configured is True

    def test_access_key_not_in_repr(self):
        assert "secret-key" not in repr(ManagedDatabase(url="u", access_key="secret-key"))

    def test_discriminated_union(self):
        adapter = TypeAdapter(BackendConfig)
        config = adapter.validate_python({"kind": "spreadsheet-bridge", "endpoint": "https://e"})
        assert isinstance(config, SpreadsheetBridge)
        config = adapter.validate_python({"kind": "managed-database"})
        assert isinstance(config, ManagedDatabase)


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        event = AuditEvent(
            event_type=AuditEventType.ENTRIES_LOADED,
            description="Loaded",
        )
        assert event.severity == AuditSeverity.INFO
        assert event.timestamp.tzinfo is not None

    def test_audit_event_to_log_dict(self):
        event = AuditEvent(
            event_type=AuditEventType.ENTRY_ADDED,
            description="Entry added",
            entry_id="abc",
            details={"count": 3},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "entry_added"
        assert log_dict["entry_id"] == "abc"
        assert log_dict["details"]["count"] == 3

    def test_builder_write_failed(self):
        correlation_id = uuid4()
        event = AuditEventBuilder.write_failed(
            operation="add",
            backend="managed-database",
            error_message="boom",
            correlation_id=correlation_id,
            entry_id="e1",
        )
        assert event.event_type == AuditEventType.WRITE_FAILED
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "boom"
        assert event.correlation_id == correlation_id
        assert event.description == "Add via managed-database failed"

    def test_builder_local_fallback_is_warning(self):
        event = AuditEventBuilder.local_fallback_used("spreadsheet-bridge", 4, uuid4())
        assert event.severity == AuditSeverity.WARNING
        assert event.details["count"] == 4


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_errors_make_result_invalid(self):
        result = ValidationResult(issues=[
            ValidationIssue(
                field="amount",
                issue_type="not_positive",
                message="Amount must be greater than zero",
                severity="error",
            ),
        ])
        assert result.has_errors is True
        assert result.error_count == 1
        assert result.is_valid is False

    def test_info_issues_do_not_block(self):
        result = ValidationResult(issues=[
            ValidationIssue(
                field="category",
                issue_type="missing",
                message="No category",
                severity="info",
            ),
        ])
        assert result.is_valid is True
        assert result.error_count == 0

    def test_severity_is_restricted(self):
        with pytest.raises(ValueError):
            ValidationIssue(field="x", issue_type="y", message="z", severity="fatal")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
