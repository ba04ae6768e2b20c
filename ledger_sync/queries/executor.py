"""
Ledger Summary

DESIGN DECISION: Totals are computed deterministically from whatever
collection the coordinator currently presents. Nothing here talks to a
backend, so the balance shown always matches the list shown, including
when the list is a local fallback snapshot.
"""

from collections.abc import Iterable

from pydantic import BaseModel, Field

from ledger_sync.models.entry import Entry, EntryKind


class CategoryTotal(BaseModel):
    """Sum of one category within one kind."""

    kind: EntryKind
    category: str
    total: float = 0.0
    count: int = 0


class LedgerSummary(BaseModel):
    """Income, expense and balance of a collection."""

    total_income: float = 0.0
    total_expense: float = 0.0
    entry_count: int = Field(default=0, ge=0)
    by_category: list[CategoryTotal] = Field(
        default_factory=list,
        description="Per (kind, category) totals, in first-seen order"
    )

    @property
    def balance(self) -> float:
        return self.total_income - self.total_expense


def summarize(entries: Iterable[Entry]) -> LedgerSummary:
    """
    Summarize a collection of entries.

    Amounts are summed as given; malformed remote rows decoded with a zero
    amount simply contribute nothing.
    """
    total_income = 0.0
    total_expense = 0.0
    count = 0
    categories: dict[tuple[EntryKind, str], CategoryTotal] = {}

    for entry in entries:
        count += 1
        if entry.kind == EntryKind.INCOME:
            total_income += entry.amount
        else:
            total_expense += entry.amount

        key = (entry.kind, entry.category)
        bucket = categories.get(key)
        if bucket is None:
            bucket = categories[key] = CategoryTotal(kind=entry.kind, category=entry.category)
        bucket.total += entry.amount
        bucket.count += 1

    return LedgerSummary(
        total_income=total_income,
        total_expense=total_expense,
        entry_count=count,
        by_category=list(categories.values()),
    )
