"""
Storage Services Package

Provides the backend interface, the error hierarchy shared by every
backend, and the device-local store that mirrors remote state.
"""

from ledger_sync.services.storage.interface import (
    ConfigError,
    LedgerBackend,
    LedgerError,
    MalformedResponseError,
    RemoteError,
)
from ledger_sync.services.storage.local_store import (
    FileKeyValueStore,
    KeyValueStore,
    LocalBackend,
    LocalStore,
    MemoryKeyValueStore,
)

__all__ = [
    # Interfaces
    "KeyValueStore",
    "LedgerBackend",
    # Exceptions
    "ConfigError",
    "LedgerError",
    "MalformedResponseError",
    "RemoteError",
    # Local implementation
    "FileKeyValueStore",
    "LocalBackend",
    "LocalStore",
    "MemoryKeyValueStore",
]
