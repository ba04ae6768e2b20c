"""Spreadsheet bridge package."""

from ledger_sync.services.bridge.proxy import (
    ProxyTransform,
    candidate_urls,
    first_success,
    needs_proxy,
    query_proxy,
)
from ledger_sync.services.bridge.sheet_bridge import (
    SheetBridgeClient,
    parse_json_body,
)

__all__ = [
    "ProxyTransform",
    "SheetBridgeClient",
    "candidate_urls",
    "first_success",
    "needs_proxy",
    "parse_json_body",
    "query_proxy",
]
