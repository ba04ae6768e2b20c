"""Services package."""

from ledger_sync.services.bridge import (
    SheetBridgeClient,
    candidate_urls,
    first_success,
    parse_json_body,
    query_proxy,
)
from ledger_sync.services.managed import ManagedBackendClient
from ledger_sync.services.storage import (
    ConfigError,
    FileKeyValueStore,
    KeyValueStore,
    LedgerBackend,
    LedgerError,
    LocalBackend,
    LocalStore,
    MalformedResponseError,
    MemoryKeyValueStore,
    RemoteError,
)

__all__ = [
    # Spreadsheet bridge
    "SheetBridgeClient",
    "candidate_urls",
    "first_success",
    "parse_json_body",
    "query_proxy",
    # Managed database
    "ManagedBackendClient",
    # Storage
    "ConfigError",
    "FileKeyValueStore",
    "KeyValueStore",
    "LedgerBackend",
    "LedgerError",
    "LocalBackend",
    "LocalStore",
    "MalformedResponseError",
    "MemoryKeyValueStore",
    "RemoteError",
]
