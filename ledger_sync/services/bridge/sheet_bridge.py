"""
Spreadsheet Bridge Client

Talks to a spreadsheet exposed as a JSON read/write surface over HTTP
(typically a Google Apps Script web app). The contract is deliberately
small:

    GET  <endpoint>                                  -> [Entry, ...]
    POST <endpoint> {"action": "add", "entry": {...}} -> envelope
    POST <endpoint> {"action": "delete", "id": "..."} -> envelope

    envelope = {"success": bool, "message"?: str, "entries"?: [Entry, ...]}

Every request goes through the CORS relay fallback (see proxy.py), and
every body is checked before parsing: an HTML page means we hit the wrong
URL or a relay's error page, and the user is told so instead of getting
a generic parse failure.

TRADEOFFS:
- One request per action, no batching (personal-scale ledger)
- No retries of a successful-but-failed write; the user decides
"""

import json
from typing import Any, Optional
from urllib.parse import urlsplit

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, ValidationError

from ledger_sync.config import LedgerSettings, get_settings
from ledger_sync.models.backend import BackendKind
from ledger_sync.models.entry import Entry, decode_entries
from ledger_sync.services.bridge.proxy import (
    candidate_urls,
    first_success,
    query_proxy,
)
from ledger_sync.services.storage.interface import (
    ConfigError,
    LedgerBackend,
    MalformedResponseError,
    RemoteError,
)


PREVIEW_LENGTH = 50

logger = structlog.get_logger(__name__)


class BridgeEnvelope(BaseModel):
    """Reply to a write request."""
    model_config = ConfigDict(extra="ignore")

    success: Optional[bool] = None
    message: Optional[str] = None
    entries: Optional[list[Any]] = None


def status_error(status_code: int) -> RemoteError:
    """Translate a non-2xx status into a user-facing error."""
    if status_code == 403:
        return RemoteError(
            "HTTP 403: the bridge refused access. Make sure the Apps Script "
            "deployment is shared with \"Anyone\"."
        )
    return RemoteError(f"HTTP {status_code}")


def parse_json_body(text: str) -> Any:
    """
    Parse a response body, telling markup apart from broken JSON.

    Raises:
        MalformedResponseError: is_markup=True for HTML pages, False otherwise
    """
    trimmed = text.strip()
    preview = trimmed[:PREVIEW_LENGTH]

    if trimmed.startswith("<"):
        raise MalformedResponseError(
            "Received HTML instead of JSON: the bridge URL may be wrong or a "
            "CORS relay returned an error page. Try turning the CORS relay "
            "off, and check that the bridge URL is correct.",
            is_markup=True,
            preview=preview,
        )

    try:
        return json.loads(trimmed)
    except ValueError:
        raise MalformedResponseError(
            f"Could not parse response: {preview}...",
            is_markup=False,
            preview=preview,
        ) from None


class SheetBridgeClient(LedgerBackend):
    """
    Spreadsheet bridge implementation of ledger storage.

    Args:
        endpoint: Bridge URL
        use_proxy: Allow routing through CORS relays
        settings: Relay list, timeout (defaults to get_settings())
        transport: Optional httpx transport, e.g. httpx.MockTransport in tests
    """

    name = BackendKind.SPREADSHEET_BRIDGE.value

    def __init__(
        self,
        endpoint: Optional[str],
        use_proxy: bool = True,
        settings: Optional[LedgerSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._endpoint = (endpoint or "").strip()
        self._use_proxy = use_proxy
        self._settings = settings or get_settings()
        self._transport = transport
        self._transforms = [query_proxy(prefix) for prefix in self._settings.cors_proxies]

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def candidate_urls(self) -> list[str]:
        """URLs that will be tried for each request, in order."""
        return candidate_urls(
            self._endpoint,
            self._use_proxy,
            self._transforms,
            self._settings.proxied_hosts,
            self._settings.proxy_markers,
        )

    async def _request(self, method: str, payload: Optional[dict] = None) -> str:
        """Send one logical request through the relay fallback; return the body text."""
        if not self._endpoint:
            raise ConfigError("Spreadsheet bridge URL is not set")
        try:
            urlsplit(self._endpoint)
            httpx.URL(self._endpoint)
        except (ValueError, httpx.InvalidURL) as e:
            raise ConfigError(f"Spreadsheet bridge URL is not valid: {e}") from e

        urls = self.candidate_urls()

        async with httpx.AsyncClient(
            timeout=self._settings.request_timeout_seconds,
            follow_redirects=True,
            transport=self._transport,
        ) as client:

            async def attempt(url: str) -> str:
                try:
                    response = await client.request(method, url, json=payload)
                except (httpx.HTTPError, httpx.InvalidURL) as e:
                    logger.warning("bridge_request_failed", method=method, url=url, error=str(e))
                    raise RemoteError(f"Request to the bridge failed: {e}") from e

                if not response.is_success:
                    logger.warning(
                        "bridge_request_rejected",
                        method=method,
                        url=url,
                        status_code=response.status_code,
                    )
                    raise status_error(response.status_code)

                return response.text

            return await first_success(urls, attempt, retry_on=(RemoteError,))

    async def _write(self, payload: dict, failure_message: str) -> list[Entry]:
        data = parse_json_body(await self._request("POST", payload))

        try:
            envelope = BridgeEnvelope.model_validate(data) if isinstance(data, dict) else BridgeEnvelope()
        except ValidationError:
            raise MalformedResponseError(
                f"Unexpected reply from the bridge: {json.dumps(data, ensure_ascii=False)[:PREVIEW_LENGTH]}...",
            ) from None

        if not envelope.success:
            raise RemoteError(envelope.message or failure_message)

        return decode_entries(envelope.entries or [])

    async def fetch_all(self) -> list[Entry]:
        """Read every entry; a reply that is not a list reads as empty."""
        data = parse_json_body(await self._request("GET"))
        return decode_entries(data)

    async def add(self, entry: Entry) -> list[Entry]:
        return await self._write(
            {"action": "add", "entry": entry.to_wire()},
            "Failed to add entry",
        )

    async def delete(self, entry_id: str) -> list[Entry]:
        return await self._write(
            {"action": "delete", "id": entry_id},
            "Failed to delete entry",
        )
