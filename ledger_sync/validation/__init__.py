"""Draft validation package."""

from ledger_sync.validation.validator import DraftValidator, parse_amount

__all__ = ["DraftValidator", "parse_amount"]
