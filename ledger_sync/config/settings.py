"""
Configuration Management for Ledger Sync

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: Only process-level tuning lives here (where files go,
which CORS relays exist, timeouts). The backend the user selected, its
endpoint and credentials are user data and are persisted in the local
store instead, so that changing them takes effect on the next action
without a restart.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """
    Main application settings.
    
    Loads configuration from LEDGER_* environment variables and .env file.
    List fields accept JSON arrays, e.g. LEDGER_CORS_PROXIES='["https://..."]'.
    """
    
    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    # Local persistence
    data_dir: Path = Field(
        default=Path.home() / ".ledger-sync",
        description="Directory holding the local entry mirror and backend configuration"
    )
    
    # Spreadsheet bridge
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Per-request timeout for bridge calls"
    )
    cors_proxies: list[str] = Field(
        default=[
            "https://api.cors.lol/?url=",
            "https://corsproxy.io/?url=",
        ],
        description="CORS relay prefixes, tried in this order"
    )
    proxied_hosts: list[str] = Field(
        default=["script.google.com"],
        description="Endpoints known to reject direct cross-origin requests"
    )
    proxy_markers: list[str] = Field(
        default=["corsproxy.io", "cors.sh", "cors.lol"],
        description="Substrings identifying a URL that already goes through a relay"
    )
    
    # Managed database
    managed_table: str = Field(
        default="entries",
        min_length=1,
        description="Table holding ledger entries"
    )
    
    @field_validator('cors_proxies', 'proxied_hosts', 'proxy_markers')
    @classmethod
    def strip_blank_items(cls, v: list[str]) -> list[str]:
        """Drop blank items so a trailing comma in .env does not create a bogus relay."""
        return [item.strip() for item in v if item and item.strip()]


@lru_cache()
def get_settings() -> LedgerSettings:
    """
    Get application settings (cached).
    
    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return LedgerSettings()
