"""Tests for draft validation and ledger summaries."""

import pytest

from ledger_sync.models.entry import DEFAULT_CATEGORY, Entry, EntryKind
from ledger_sync.queries import summarize
from ledger_sync.validation import DraftValidator, parse_amount


class TestParseAmount:
    """Tests for amount parsing."""

    @pytest.mark.parametrize("raw,expected", [
        ("120", 120.0),
        (" 3.50 ", 3.5),
        (42, 42.0),
        (0.1, 0.1),
        ("-5", -5.0),
        ("1e3", 1000.0),
    ])
    def test_numbers(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", [
        None, "", "   ", "abc", "12abc", True, "NaN", "inf", float("nan"), [1],
    ])
    def test_not_numbers(self, raw):
        assert parse_amount(raw) is None


class TestDraftValidator:
    """Tests for DraftValidator."""

    @pytest.fixture
    def validator(self):
        return DraftValidator()

    def test_valid_draft_is_normalized(self, validator):
        result = validator.validate("  Lunch ", "120", "expense", " 飲食 ")
        assert result.is_valid
        assert result.description == "Lunch"
        assert result.amount == 120.0
        assert result.kind == EntryKind.EXPENSE
        assert result.category == "飲食"

    def test_blank_category_uses_default(self, validator):
        result = validator.validate("Salary", 50000, EntryKind.INCOME, None)
        assert result.is_valid
        assert result.category == DEFAULT_CATEGORY
        assert [i.severity for i in result.issues] == ["info"]

    @pytest.mark.parametrize("amount,issue_type", [
        (0, "not_positive"),
        (-5, "not_positive"),
        ("abc", "not_a_number"),
        ("", "not_a_number"),
    ])
    def test_bad_amount(self, validator, amount, issue_type):
        result = validator.validate("Lunch", amount, "expense", "飲食")
        assert not result.is_valid
        assert result.amount is None
        assert [i.issue_type for i in result.issues if i.field == "amount"] == [issue_type]

    def test_missing_description(self, validator):
        result = validator.validate("   ", 10, "expense", "飲食")
        assert not result.is_valid
        assert result.issues[0].field == "description"

    @pytest.mark.parametrize("kind", ["refund", None, "INCOME"])
    def test_bad_kind(self, validator, kind):
        result = validator.validate("Lunch", 10, kind, "飲食")
        assert not result.is_valid
        assert result.issues[0].field == "kind"

    def test_all_errors_reported_together(self, validator):
        result = validator.validate("", "x", "refund", "")
        assert result.error_count == 3
        summary = validator.get_user_friendly_summary(result)
        assert len(summary.splitlines()) == 3
        assert "Description is required" in summary


class TestSummarize:
    """Tests for totals and balance."""

    def test_empty(self):
        summary = summarize([])
        assert summary.balance == 0
        assert summary.entry_count == 0
        assert summary.by_category == []

    def test_balance_and_categories(self, lunch, salary):
        dinner = Entry(id="e-dinner", description="Dinner", amount=80, category="飲食")
        summary = summarize([lunch, salary, dinner])

        assert summary.total_income == 50000
        assert summary.total_expense == 200
        assert summary.balance == 49800
        assert summary.entry_count == 3

        food = summary.by_category[0]
        assert (food.kind, food.category, food.total, food.count) == (
            EntryKind.EXPENSE, "飲食", 200, 2,
        )
        assert summary.by_category[1].category == "薪水"

    def test_same_category_different_kinds_are_separate(self):
        entries = [
            Entry(id="a", amount=10, kind="income", category="其他"),
            Entry(id="b", amount=4, kind="expense", category="其他"),
        ]
        summary = summarize(entries)
        assert len(summary.by_category) == 2
        assert summary.balance == 6
