"""
Local Store

Device-local persistence for two things:
1. The entry collection (the mirror of whatever backend is active)
2. The user's backend configuration (kind, endpoints, credential, proxy flag)

DESIGN DECISION: Persistence is a flat string key-value store, one file
per key, mirroring how the ledger stored its state in the browser. Writes
go to a temporary file in the same directory and are swapped in with
os.replace, so a reader sees either the old value or the new one, never
half a file.

Malformed stored entries are treated as an empty ledger. A corrupted
mirror must not take the application down; the next successful remote
read or local write replaces it anyway.
"""

import os
import re
import tempfile
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path
from typing import Optional, Union

import structlog
from pydantic import TypeAdapter, ValidationError

from ledger_sync.models.backend import (
    BackendConfig,
    BackendKind,
    LocalOnly,
    ManagedDatabase,
    SpreadsheetBridge,
)
from ledger_sync.models.entry import Entry
from ledger_sync.services.storage.interface import LedgerBackend


# Storage keys
ENTRIES_KEY = "ledger-entries"
BACKEND_KIND_KEY = "ledger-backend"
SHEET_URL_KEY = "ledger-sheet-url"
USE_PROXY_KEY = "ledger-use-proxy"
MANAGED_URL_KEY = "ledger-supabase-url"
MANAGED_KEY_KEY = "ledger-supabase-anon-key"

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")
_ENTRY_LIST = TypeAdapter(list[Entry])

logger = structlog.get_logger(__name__)


class KeyValueStore(ABC):
    """String key-value persistence."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Forget a key. Removing an absent key is a no-op."""
        pass


class MemoryKeyValueStore(KeyValueStore):
    """In-process store, handy for embedding and tests."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class FileKeyValueStore(KeyValueStore):
    """
    One UTF-8 file per key inside a data directory.

    The directory is created on first write.
    """

    def __init__(self, directory: Union[str, Path]):
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._directory / key

    def get(self, key: str) -> Optional[str]:
        try:
            return self._path(key).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        self._directory.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            dir=self._directory,
            prefix=f".{key}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def remove(self, key: str) -> None:
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            pass


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class LocalStore:
    """
    Entry mirror and backend configuration on top of a KeyValueStore.

    Every accessor reads through to persistence; nothing is cached, so a
    configuration change is visible to the very next operation.
    """

    def __init__(self, kv: KeyValueStore):
        self._kv = kv

    # ------------------------------------------------------------- entries

    def load(self) -> list[Entry]:
        """Persisted collection, or [] when absent or malformed."""
        try:
            raw = self._kv.get(ENTRIES_KEY)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("local_entries_unreadable", error=str(e))
            return []

        if not raw:
            return []

        try:
            return _ENTRY_LIST.validate_json(raw)
        except ValidationError as e:
            logger.warning("local_entries_malformed", error_count=e.error_count())
            return []

    def save(self, entries: Sequence[Entry]) -> None:
        """Replace the persisted collection."""
        payload = _ENTRY_LIST.dump_json(list(entries)).decode("utf-8")
        self._kv.set(ENTRIES_KEY, payload)

    # ------------------------------------------------------- configuration

    def _set_or_remove(self, key: str, value: Optional[str]) -> None:
        value = _clean(value)
        if value is None:
            self._kv.remove(key)
        else:
            self._kv.set(key, value)

    def get_backend_kind(self) -> Optional[BackendKind]:
        raw = _clean(self._kv.get(BACKEND_KIND_KEY))
        if raw is None:
            return None
        try:
            return BackendKind(raw)
        except ValueError:
            logger.warning("unknown_backend_kind", value=raw)
            return None

    def set_backend_kind(self, kind: Optional[BackendKind]) -> None:
        self._set_or_remove(BACKEND_KIND_KEY, kind.value if kind else None)

    def get_sheet_url(self) -> Optional[str]:
        return _clean(self._kv.get(SHEET_URL_KEY))

    def set_sheet_url(self, url: Optional[str]) -> None:
        self._set_or_remove(SHEET_URL_KEY, url)

    def get_use_proxy(self) -> bool:
        """Proxying is on unless explicitly turned off."""
        return _clean(self._kv.get(USE_PROXY_KEY)) != "false"

    def set_use_proxy(self, use: Optional[bool]) -> None:
        self._set_or_remove(USE_PROXY_KEY, None if use is None else str(use).lower())

    def get_managed_url(self) -> Optional[str]:
        return _clean(self._kv.get(MANAGED_URL_KEY))

    def set_managed_url(self, url: Optional[str]) -> None:
        self._set_or_remove(MANAGED_URL_KEY, url)

    def get_managed_key(self) -> Optional[str]:
        return _clean(self._kv.get(MANAGED_KEY_KEY))

    def set_managed_key(self, key: Optional[str]) -> None:
        self._set_or_remove(MANAGED_KEY_KEY, key)

    def clear_managed_config(self) -> None:
        self._kv.remove(MANAGED_URL_KEY)
        self._kv.remove(MANAGED_KEY_KEY)

    def read_backend_config(self) -> BackendConfig:
        """
        Build the active backend variant from persisted fields.

        An explicitly stored kind wins even when its fields are incomplete,
        so the caller can report "not configured" instead of silently
        switching storage. Without one, the kind is inferred from which
        fields are present.
        """
        kind = self.get_backend_kind()
        sheet_url = self.get_sheet_url()
        managed_url = self.get_managed_url()
        managed_key = self.get_managed_key()

        if kind is None:
            if managed_url and managed_key:
                kind = BackendKind.MANAGED_DATABASE
            elif sheet_url:
                kind = BackendKind.SPREADSHEET_BRIDGE
            else:
                kind = BackendKind.LOCAL_ONLY

        if kind == BackendKind.SPREADSHEET_BRIDGE:
            return SpreadsheetBridge(endpoint=sheet_url, use_proxy=self.get_use_proxy())
        if kind == BackendKind.MANAGED_DATABASE:
            return ManagedDatabase(url=managed_url, access_key=managed_key)
        return LocalOnly()


class LocalBackend(LedgerBackend):
    """
    Local-only strategy.

    Computes the next collection from the stored one. Persisting it is
    left to the coordinator, exactly as with remote results.
    """

    name = BackendKind.LOCAL_ONLY.value

    def __init__(self, store: LocalStore):
        self._store = store

    async def fetch_all(self) -> list[Entry]:
        return self._store.load()

    async def add(self, entry: Entry) -> list[Entry]:
        return [*self._store.load(), entry]

    async def delete(self, entry_id: str) -> list[Entry]:
        return [e for e in self._store.load() if e.id != entry_id]
