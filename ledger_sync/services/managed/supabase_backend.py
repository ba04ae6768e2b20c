"""
Managed Database Backend (Supabase)

DESIGN DECISION: A hosted Postgres table reached through the Supabase
client is the "serious" remote option:
1. Real ordering (server-assigned created_at)
2. Row-level filtering for deletes instead of rewriting a sheet
3. Only a project URL and an access key are needed from the user

Expected table (columns match Entry's wire form):

    create table entries (
        id          text primary key,
        description text,
        amount      numeric,
        type        text,
        category    text,
        date        text,
        created_at  timestamptz default now()
    );

Reads decode rows leniently (see models.entry.entry_from_row). Writes
read back the whole table afterwards, so callers always get the
authoritative collection, not just the inserted row.
"""

from collections.abc import Awaitable, Callable
from typing import Any, Optional

from supabase import AsyncClient, acreate_client

from ledger_sync.models.backend import BackendKind
from ledger_sync.models.entry import Entry, decode_entries
from ledger_sync.services.storage.interface import (
    ConfigError,
    LedgerBackend,
    RemoteError,
)


DEFAULT_TABLE = "entries"

ClientFactory = Callable[[str, str], Awaitable[AsyncClient]]


def _error_message(error: Exception) -> str:
    """Prefer the backend's own message (postgrest errors carry one)."""
    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(error) or error.__class__.__name__


class ManagedBackendClient(LedgerBackend):
    """
    Supabase implementation of ledger storage.

    The underlying client is created lazily on first use and reused for
    the lifetime of this object.
    """

    name = BackendKind.MANAGED_DATABASE.value

    def __init__(
        self,
        url: Optional[str],
        access_key: Optional[str],
        table: str = DEFAULT_TABLE,
        client_factory: Optional[ClientFactory] = None,
    ):
        self._url = (url or "").strip()
        self._access_key = (access_key or "").strip()
        self._table = table
        self._client_factory = client_factory or acreate_client
        self._client: Optional[AsyncClient] = None

    @property
    def is_configured(self) -> bool:
        return bool(self._url and self._access_key)

    async def _get_client(self) -> AsyncClient:
        if self._client is None:
            try:
                self._client = await self._client_factory(self._url, self._access_key)
            except Exception as e:
                raise RemoteError(f"Could not connect to the database: {_error_message(e)}") from e
        return self._client

    def _require_configured(self) -> None:
        if not self.is_configured:
            raise ConfigError("Managed database is not configured (URL and access key required)")

    async def fetch_all(self) -> list[Entry]:
        """
        Read every row, newest first.

        Unconfigured reads return [] so that callers can read speculatively.
        """
        if not self.is_configured:
            return []

        client = await self._get_client()
        try:
            response = await (
                client.table(self._table)
                .select("*")
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            raise RemoteError(_error_message(e)) from e

        rows: Any = response.data
        return decode_entries(rows or [])

    async def add(self, entry: Entry) -> list[Entry]:
        self._require_configured()

        client = await self._get_client()
        try:
            await client.table(self._table).insert(entry.to_wire()).execute()
        except Exception as e:
            raise RemoteError(_error_message(e)) from e

        return await self.fetch_all()

    async def delete(self, entry_id: str) -> list[Entry]:
        self._require_configured()

        client = await self._get_client()
        try:
            await client.table(self._table).delete().eq("id", entry_id).execute()
        except Exception as e:
            raise RemoteError(_error_message(e)) from e

        return await self.fetch_all()
