"""
Sync Coordinator for Ledger Sync

This module ties together all the components and defines the three
user-facing flows:
1. Load   (pick backend -> fetch all -> mirror locally -> present)
2. Add    (validate draft -> build entry -> backend add -> mirror -> present)
3. Delete (backend delete -> mirror -> present)

DESIGN DECISION: The coordinator enforces the boundaries:
- The active backend is derived from persisted configuration at the start
  of every action; nothing is cached between actions
- Remote results replace the local mirror wholesale, never merged
- Failed reads fall back to the last mirrored snapshot
- Failed writes change nothing and are not retried
- Every step is audited

Backends are built through a registry keyed by BackendKind, so adding a
storage strategy is a new variant plus one factory entry.
"""

from collections.abc import Callable
from datetime import date, datetime, timezone
from typing import Any, Optional, Union
from uuid import UUID, uuid4

from ledger_sync.audit import AuditLogger, create_correlation_id
from ledger_sync.config import LedgerSettings, get_settings
from ledger_sync.models.backend import (
    BackendConfig,
    BackendKind,
    LocalOnly,
    ManagedDatabase,
    SpreadsheetBridge,
)
from ledger_sync.models.entry import Entry, EntryKind
from ledger_sync.queries import LedgerSummary, summarize
from ledger_sync.services.bridge import SheetBridgeClient
from ledger_sync.services.managed import ManagedBackendClient
from ledger_sync.services.storage import (
    FileKeyValueStore,
    LedgerBackend,
    LedgerError,
    LocalBackend,
    LocalStore,
)
from ledger_sync.validation import DraftValidator


BackendFactory = Callable[[BackendConfig, LocalStore], LedgerBackend]


def _local_backend(config: LocalOnly, store: LocalStore, settings: LedgerSettings) -> LedgerBackend:
    return LocalBackend(store)


def _bridge_backend(config: SpreadsheetBridge, store: LocalStore, settings: LedgerSettings) -> LedgerBackend:
    return SheetBridgeClient(config.endpoint, use_proxy=config.use_proxy, settings=settings)


def _managed_backend(config: ManagedDatabase, store: LocalStore, settings: LedgerSettings) -> LedgerBackend:
    return ManagedBackendClient(config.url, config.access_key, table=settings.managed_table)


BACKEND_REGISTRY: dict[BackendKind, Callable[[Any, LocalStore, LedgerSettings], LedgerBackend]] = {
    BackendKind.LOCAL_ONLY: _local_backend,
    BackendKind.SPREADSHEET_BRIDGE: _bridge_backend,
    BackendKind.MANAGED_DATABASE: _managed_backend,
}


def create_backend(
    config: BackendConfig,
    store: LocalStore,
    settings: Optional[LedgerSettings] = None,
) -> LedgerBackend:
    """Build the client for a backend configuration."""
    return BACKEND_REGISTRY[config.kind](config, store, settings or get_settings())


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


class SyncCoordinator:
    """
    Orchestrates load/add/delete against the configured backend.

    The UI calls the three async actions and reads `entries`, `loading`,
    `error` and `summary` to render. Actions are meant to be issued one at
    a time; two overlapping writes resolve as last-writer-wins on the
    local mirror.
    """

    def __init__(
        self,
        store: LocalStore,
        settings: Optional[LedgerSettings] = None,
        backend_factory: Optional[BackendFactory] = None,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[DraftValidator] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        self._store = store
        self._settings = settings or get_settings()
        self._backend_factory = backend_factory or self._default_backend
        self._audit_logger = audit_logger or AuditLogger()
        self._validator = validator or DraftValidator()
        self._today = today or _utc_today

        # Show the last mirrored snapshot until the first load completes
        self._entries: list[Entry] = store.load()
        self._loading = False
        self._error: Optional[str] = None

    def _default_backend(self, config: BackendConfig, store: LocalStore) -> LedgerBackend:
        return create_backend(config, store, self._settings)

    # ------------------------------------------------------------ UI state

    @property
    def entries(self) -> tuple[Entry, ...]:
        return tuple(self._entries)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> Optional[str]:
        """Message of the last failed action, cleared by the next success."""
        return self._error

    @property
    def summary(self) -> LedgerSummary:
        return summarize(self._entries)

    @property
    def backend_config(self) -> BackendConfig:
        return self._store.read_backend_config()

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    # ------------------------------------------------------------- actions

    def _read_config(self, correlation_id: UUID) -> BackendConfig:
        config = self._store.read_backend_config()
        self._audit_logger.log_backend_selected(
            backend=config.kind.value,
            is_configured=config.is_configured,
            correlation_id=correlation_id,
        )
        return config

    def _present(self, entries: list[Entry], mirror: bool) -> list[Entry]:
        if mirror:
            self._store.save(entries)
        self._entries = list(entries)
        self._error = None
        return list(self._entries)

    async def load_data(self) -> list[Entry]:
        """
        Load entries from the active backend.

        On a remote failure the error is recorded and the local snapshot
        is presented instead, so the list never goes blank because of a
        transient outage.
        """
        correlation_id = create_correlation_id()
        config = self._read_config(correlation_id)
        backend_name = config.kind.value

        self._loading = True
        try:
            if not config.is_configured:
                entries = self._store.load()
                self._audit_logger.log_entries_loaded(
                    backend=BackendKind.LOCAL_ONLY.value,
                    count=len(entries),
                    correlation_id=correlation_id,
                )
                return self._present(entries, mirror=False)

            backend = self._backend_factory(config, self._store)
            try:
                entries = await backend.fetch_all()
            except LedgerError as e:
                self._error = str(e)
                self._audit_logger.log_load_failed(
                    backend=backend_name,
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
                self._entries = self._store.load()
                self._audit_logger.log_local_fallback(
                    backend=backend_name,
                    count=len(self._entries),
                    correlation_id=correlation_id,
                )
                return list(self._entries)

            self._audit_logger.log_entries_loaded(
                backend=backend_name,
                count=len(entries),
                correlation_id=correlation_id,
            )
            return self._present(entries, mirror=config.is_remote)
        finally:
            self._loading = False

    async def add_entry(
        self,
        description: Optional[str],
        amount: Any,
        kind: Union[EntryKind, str],
        category: Optional[str] = None,
    ) -> list[Entry]:
        """
        Validate a draft and add it to the active backend.

        An invalid draft is a no-op: nothing is sent and nothing changes.
        """
        correlation_id = create_correlation_id()

        result = self._validator.validate(description, amount, kind, category)
        if not result.is_valid:
            self._audit_logger.log_draft_rejected(
                issues=[
                    {"field": i.field, "type": i.issue_type, "message": i.message}
                    for i in result.issues
                    if i.severity == "error"
                ],
                correlation_id=correlation_id,
            )
            return list(self._entries)

        entry = Entry(
            id=str(uuid4()),
            description=result.description,
            amount=result.amount,
            kind=result.kind,
            category=result.category,
            date=self._today().isoformat(),
        )

        config = self._read_config(correlation_id)
        backend = self._backend_factory(config, self._store)
        try:
            entries = await backend.add(entry)
        except LedgerError as e:
            self._error = str(e)
            self._audit_logger.log_write_failed(
                operation="add",
                backend=config.kind.value,
                error_message=str(e),
                correlation_id=correlation_id,
                entry_id=entry.id,
            )
            return list(self._entries)

        self._audit_logger.log_entry_added(
            entry_id=entry.id,
            backend=config.kind.value,
            count=len(entries),
            correlation_id=correlation_id,
        )
        return self._present(entries, mirror=True)

    async def delete_entry(self, entry_id: str) -> list[Entry]:
        """Delete an entry by id; unknown ids leave the collection as is."""
        correlation_id = create_correlation_id()

        config = self._read_config(correlation_id)
        backend = self._backend_factory(config, self._store)
        try:
            entries = await backend.delete(entry_id)
        except LedgerError as e:
            self._error = str(e)
            self._audit_logger.log_write_failed(
                operation="delete",
                backend=config.kind.value,
                error_message=str(e),
                correlation_id=correlation_id,
                entry_id=entry_id,
            )
            return list(self._entries)

        self._audit_logger.log_entry_deleted(
            entry_id=entry_id,
            backend=config.kind.value,
            count=len(entries),
            correlation_id=correlation_id,
        )
        return self._present(entries, mirror=True)


def create_coordinator(settings: Optional[LedgerSettings] = None) -> SyncCoordinator:
    """
    Factory function wiring a coordinator to the on-disk store.

    Args:
        settings: Defaults to get_settings(); data_dir decides where the
                  mirror and backend configuration are kept.
    """
    settings = settings or get_settings()
    store = LocalStore(FileKeyValueStore(settings.data_dir))
    return SyncCoordinator(store, settings=settings)
