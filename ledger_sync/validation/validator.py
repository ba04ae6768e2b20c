"""
Draft Validation

A draft is what the UI collects from the entry form: free text, an
amount as typed, a kind, and a category. It must pass validation before
an Entry is built and before any request is issued.

Rules:
- description must be non-blank (it is stored stripped)
- amount must parse as a finite number greater than zero
- kind must be "income" or "expense"
- a blank category falls back to DEFAULT_CATEGORY

IMPORTANT: Validation NEVER silently fixes an invalid amount or kind.
It reports the issue and the coordinator turns the action into a no-op.
"""

import math
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union

from ledger_sync.models.entry import DEFAULT_CATEGORY, EntryKind
from ledger_sync.models.validation import ValidationIssue, ValidationResult


def parse_amount(value: Any) -> Optional[float]:
    """Parse a user-typed amount; None when it is not a finite number."""
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            value = Decimal(value)
        except InvalidOperation:
            return None

    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None

    return amount if math.isfinite(amount) else None


class DraftValidator:
    """Validates entry drafts before they reach any backend."""

    def validate(
        self,
        description: Optional[str],
        amount: Any,
        kind: Union[EntryKind, str, None],
        category: Optional[str] = None,
    ) -> ValidationResult:
        issues = []

        clean_description = (description or "").strip()
        if not clean_description:
            issues.append(ValidationIssue(
                field="description",
                issue_type="missing",
                message="Description is required",
                severity="error",
            ))

        parsed_amount = parse_amount(amount)
        if parsed_amount is None:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="not_a_number",
                message=f"Amount must be a number (got {amount!r})",
                severity="error",
            ))
        elif parsed_amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="not_positive",
                message="Amount must be greater than zero",
                severity="error",
            ))

        try:
            entry_kind = EntryKind(kind)
        except ValueError:
            entry_kind = None
            issues.append(ValidationIssue(
                field="kind",
                issue_type="invalid_value",
                message=f"Kind must be 'income' or 'expense' (got {kind!r})",
                severity="error",
            ))

        clean_category = (category or "").strip()
        if not clean_category:
            clean_category = DEFAULT_CATEGORY
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message=f"No category given, using {DEFAULT_CATEGORY}",
                severity="info",
            ))

        result = ValidationResult(issues=issues)
        if result.has_errors:
            return result

        return ValidationResult(
            issues=issues,
            description=clean_description,
            amount=parsed_amount,
            kind=entry_kind,
            category=clean_category,
        )

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """One line per error, for display next to the form."""
        errors = [issue.message for issue in result.issues if issue.severity == "error"]
        return "\n".join(errors)
