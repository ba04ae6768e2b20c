"""
Ledger Entry Models

One Entry is one income or expense record. Entries are append-only:
the sync layer creates them and deletes them by id, it never edits one
in place.

DESIGN DECISION: The field is called `kind` in Python and in the local
mirror, but the spreadsheet bridge and the managed table already store it
as `type`. The model accepts both names and dumps `type` when asked for
the wire form (`by_alias=True`).

Rows coming back from remote backends are decoded leniently by
`entry_from_row`. A single malformed row must never fail a whole read;
the defaults it falls back to are part of the contract:

    description -> ""
    amount      -> 0
    kind        -> expense (anything that is not "income")
    category    -> DEFAULT_CATEGORY
    date        -> ""
"""

import math
from collections.abc import Mapping
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_CATEGORY = "其他"


class EntryKind(str, Enum):
    """Direction of money for an entry."""
    INCOME = "income"
    EXPENSE = "expense"


# Suggested categories per kind. The UI offers these as a closed set;
# storage accepts any label.
DEFAULT_CATEGORIES: dict[EntryKind, tuple[str, ...]] = {
    EntryKind.EXPENSE: ("飲食", "交通", "購物", "娛樂", "居住", "醫療", DEFAULT_CATEGORY),
    EntryKind.INCOME: ("薪水", "獎金", "投資", DEFAULT_CATEGORY),
}


class Entry(BaseModel):
    """
    A single ledger record.

    `id` is opaque and assigned at creation; `date` is the creation date
    as an ISO string and is not edited afterwards.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(
        ...,
        description="Opaque unique identifier"
    )
    description: str = Field(
        default="",
        description="Human text, e.g. 'Lunch'"
    )
    amount: float = Field(
        default=0.0,
        description="Positive amount in a currency-agnostic unit"
    )
    kind: EntryKind = Field(
        default=EntryKind.EXPENSE,
        alias="type",
        description="income or expense"
    )
    category: str = Field(
        default=DEFAULT_CATEGORY,
        description="Free-form label"
    )
    date: str = Field(
        default="",
        description="Creation date, YYYY-MM-DD"
    )

    @property
    def signed_amount(self) -> float:
        """Amount with expenses negative."""
        return self.amount if self.kind == EntryKind.INCOME else -self.amount

    def to_wire(self) -> dict[str, Any]:
        """Shape used by the spreadsheet bridge and the managed table."""
        return self.model_dump(mode="json", by_alias=True)

    def to_local(self) -> dict[str, Any]:
        """Shape used by the local mirror."""
        return self.model_dump(mode="json")


def _coerce_amount(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(amount):
        return 0.0
    return amount


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def entry_from_row(row: Any) -> Optional[Entry]:
    """
    Decode one remote row into an Entry, falling back to safe defaults.

    Returns None only when the row cannot be an entry at all: it is not
    a mapping, or it carries no identifier.
    """
    if not isinstance(row, Mapping):
        return None

    raw_id = row.get("id")
    if raw_id is None or _coerce_text(raw_id).strip() == "":
        return None

    raw_kind = row.get("type", row.get("kind"))
    kind = EntryKind.INCOME if raw_kind == EntryKind.INCOME.value else EntryKind.EXPENSE

    return Entry(
        id=_coerce_text(raw_id),
        description=_coerce_text(row.get("description")),
        amount=_coerce_amount(row.get("amount")),
        kind=kind,
        category=_coerce_text(row.get("category")) or DEFAULT_CATEGORY,
        date=_coerce_text(row.get("date")),
    )


def decode_entries(payload: Any) -> list[Entry]:
    """Decode a remote collection; anything that is not a list is empty."""
    if not isinstance(payload, list):
        return []

    entries = []
    for row in payload:
        entry = entry_from_row(row)
        if entry is not None:
            entries.append(entry)
    return entries
