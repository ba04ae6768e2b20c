"""Ledger summary package."""

from ledger_sync.queries.executor import CategoryTotal, LedgerSummary, summarize

__all__ = ["CategoryTotal", "LedgerSummary", "summarize"]
