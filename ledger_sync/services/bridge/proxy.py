"""
CORS Relay Fallback

Some bridge endpoints (Apps Script web apps in particular) reject
cross-origin requests made directly from a browser context. The usual
workaround is a public CORS relay, and relays come and go, so several
are tried in a fixed priority order.

Two pieces:
1. candidate_urls() - pure planning: which URLs to try, in which order
2. first_success()  - generic combinator: try candidates in order, the
   first success wins, otherwise the last error propagates

DESIGN DECISION: The combinator is built on tenacity, the same retry
machinery used elsewhere, with one twist: each attempt targets the next
candidate instead of repeating the same call. There is no backoff;
moving to a different relay is the recovery.
"""

from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar
from urllib.parse import quote, urlsplit

from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt


T = TypeVar("T")

# Characters encodeURIComponent leaves alone besides alphanumerics and -_.
_URI_COMPONENT_SAFE = "!~*'()"

ProxyTransform = Callable[[str], str]


def query_proxy(prefix: str) -> ProxyTransform:
    """
    Build a transform that passes the target URL as a query parameter.

    The target is percent-encoded with encodeURIComponent rules, which is
    what relays of the form `https://relay/?url=` expect.
    """
    def transform(url: str) -> str:
        return prefix + quote(url, safe=_URI_COMPONENT_SAFE)
    return transform


def needs_proxy(
    url: str,
    proxied_hosts: Sequence[str],
    proxy_markers: Sequence[str],
) -> bool:
    """True when the URL points at a host known to reject direct calls and is not already relayed."""
    if any(marker in url for marker in proxy_markers):
        return False

    try:
        host = (urlsplit(url).hostname or "").lower()
    except ValueError:
        return False
    if not host:
        return False

    for known in proxied_hosts:
        known = known.lower()
        if host == known or host.endswith("." + known):
            return True
    return False


def candidate_urls(
    url: str,
    use_proxy: bool,
    transforms: Sequence[ProxyTransform],
    proxied_hosts: Sequence[str],
    proxy_markers: Sequence[str],
) -> list[str]:
    """
    Plan the URLs to try for one request.

    Returns:
        [] for a blank URL, [url] when no relay is needed (or none is
        available), otherwise one relayed URL per transform in order.
    """
    target = (url or "").strip()
    if not target:
        return []

    if use_proxy and transforms and needs_proxy(target, proxied_hosts, proxy_markers):
        return [transform(target) for transform in transforms]

    return [target]


async def first_success(
    candidates: Sequence[str],
    attempt: Callable[[str], Awaitable[T]],
    retry_on: tuple[type[BaseException], ...] = (Exception,),
) -> T:
    """
    Run `attempt` against each candidate in order until one succeeds.

    Exactly one call is made per candidate tried; once a call succeeds no
    further candidates are touched. If every candidate fails, the error
    from the last one is raised unchanged. Errors outside `retry_on`
    propagate immediately.

    Raises:
        ValueError: If there are no candidates at all
    """
    if not candidates:
        raise ValueError("No candidate URLs to try")

    retrying = AsyncRetrying(
        stop=stop_after_attempt(len(candidates)),
        retry=retry_if_exception_type(retry_on),
        reraise=True,
    )

    async for try_ in retrying:
        with try_:
            candidate = candidates[try_.retry_state.attempt_number - 1]
            return await attempt(candidate)

    # AsyncRetrying either returns from the block above or raises.
    raise AssertionError("unreachable")
