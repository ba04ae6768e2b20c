"""
Backend Configuration Models

The three storage strategies are mutually exclusive. Each is a small
frozen model tagged by `kind`, and `BackendConfig` is their discriminated
union, so code dispatches on one tag instead of poking at loose settings.
Adding a fourth backend means adding a variant here and a factory in the
orchestrator's registry.
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class BackendKind(str, Enum):
    """Which storage strategy is active."""
    LOCAL_ONLY = "local-only"
    SPREADSHEET_BRIDGE = "spreadsheet-bridge"
    MANAGED_DATABASE = "managed-database"


class LocalOnly(BaseModel):
    """Entries live only in the local store."""
    model_config = ConfigDict(frozen=True)

    kind: Literal[BackendKind.LOCAL_ONLY] = BackendKind.LOCAL_ONLY

    @property
    def is_remote(self) -> bool:
        return False

    @property
    def is_configured(self) -> bool:
        return True


class SpreadsheetBridge(BaseModel):
    """Entries live in a spreadsheet exposed through an HTTP bridge."""
    model_config = ConfigDict(frozen=True)

    kind: Literal[BackendKind.SPREADSHEET_BRIDGE] = BackendKind.SPREADSHEET_BRIDGE
    endpoint: Optional[str] = Field(
        default=None,
        description="Bridge URL (e.g. an Apps Script web app)"
    )
    use_proxy: bool = Field(
        default=True,
        description="Route requests through CORS relays when needed"
    )

    @property
    def is_remote(self) -> bool:
        return True

    @property
    def is_configured(self) -> bool:
        return bool(self.endpoint)


class ManagedDatabase(BaseModel):
    """Entries live in a hosted table reached with a URL and access key."""
    model_config = ConfigDict(frozen=True)

    kind: Literal[BackendKind.MANAGED_DATABASE] = BackendKind.MANAGED_DATABASE
    url: Optional[str] = Field(
        default=None,
        description="Project URL"
    )
    access_key: Optional[str] = Field(
        default=None,
        description="Opaque access key supplied by the user",
        repr=False,
    )

    @property
    def is_remote(self) -> bool:
        return True

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.access_key)


BackendConfig = Annotated[
    Union[LocalOnly, SpreadsheetBridge, ManagedDatabase],
    Field(discriminator="kind"),
]
