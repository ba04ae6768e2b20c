"""
Abstract Storage Interface

DESIGN DECISION: Every storage strategy answers the same three questions
and always hands back the full, authoritative collection:
1. What entries exist?          -> fetch_all()
2. Add this one, what now?      -> add(entry)
3. Remove this id, what now?    -> delete(entry_id)

Returning the whole collection (rather than the touched row) lets the
coordinator replace its local mirror wholesale, which is the only
consistency mechanism this system has.

The interface is intentionally simple - we're not building a sync engine
with change sets. Just the operations the ledger needs.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ledger_sync.models.entry import Entry


class LedgerBackend(ABC):
    """
    Abstract interface for ledger storage strategies.

    Implementations never swallow errors: they raise a LedgerError
    subclass and let the coordinator decide what the user sees.
    """

    #: BackendKind value reported in audit events
    name: str = "backend"

    @abstractmethod
    async def fetch_all(self) -> list[Entry]:
        """
        Return every entry the backend holds.

        Raises:
            RemoteError: If the backend cannot be read
        """
        pass

    @abstractmethod
    async def add(self, entry: Entry) -> list[Entry]:
        """
        Store a new entry.

        Args:
            entry: Fully built entry with a fresh identifier

        Returns:
            The authoritative collection after the write

        Raises:
            ConfigError: If the backend is not configured
            RemoteError: If the write fails
        """
        pass

    @abstractmethod
    async def delete(self, entry_id: str) -> list[Entry]:
        """
        Remove the entry with this identifier.

        Deleting an unknown id is not an error.

        Returns:
            The authoritative collection after the write
        """
        pass


class LedgerError(Exception):
    """Base exception for ledger storage operations."""
    pass


class ConfigError(LedgerError):
    """Operation attempted against a backend that is not configured."""
    pass


class RemoteError(LedgerError):
    """
    Remote backend failed: transport error, non-success HTTP status, or
    the backend reported a failure. The message is meant for the user.
    """
    pass


class MalformedResponseError(RemoteError):
    """
    Response body could not be read as the expected JSON.

    `is_markup` tells an HTML page (wrong endpoint, relay error page)
    apart from text that was meant to be JSON but is broken.
    """

    def __init__(self, message: str, is_markup: bool = False, preview: Optional[str] = None):
        super().__init__(message)
        self.is_markup = is_markup
        self.preview = preview
