import asyncio
import logging
from typing import Callable, Mapping, Optional

import httpx

from deferred_fetch.core.config import DEFAULT_USER_AGENT
from deferred_fetch.core.errors import BlockedURLError, FetchError, HttpStatusError

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": DEFAULT_USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,application/json;q=0.9,*/*;q=0.8",
}

def build_headers(
    headers: Optional[Mapping[str, str]] = None,
    user_agent: Optional[str] = None,
) -> httpx.Headers:
    """Default headers overlaid by caller headers (case-insensitive, caller wins)."""
    merged = httpx.Headers(DEFAULT_HEADERS)
    if user_agent:
        merged["User-Agent"] = user_agent
    if headers:
        merged.update(headers)
    return merged

def _redirect_guard(url: str, guard: Callable[..., bool], resolve: bool):
    """Request hook that re-checks every redirect hop against the SSRF guard."""
    first_url = httpx.URL(url)

    async def check(request: httpx.Request) -> None:
        if request.url == first_url:
            return
        target = str(request.url)
        if await asyncio.to_thread(guard, target, resolve=resolve):
            logger.warning("Blocked redirect from %s to %s", url, target)
            raise BlockedURLError(target)

    return check

async def fetch_response(
    url: str,
    headers: Optional[Mapping[str, str]] = None,
    *,
    timeout: float = 30.0,
    user_agent: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    guard: Optional[Callable[..., bool]] = None,
    resolve_hosts: bool = True,
) -> httpx.Response:
    """
    Perform a GET for url and return the fully read response.

    Redirects are followed; with a guard every hop after the first is checked
    and a blocked target raises BlockedURLError. Raises HttpStatusError when
    the final (post-redirect) status is not 2xx.
    """
    event_hooks = {}
    if guard is not None:
        event_hooks["request"] = [_redirect_guard(url, guard, resolve_hosts)]

    async with httpx.AsyncClient(
        timeout=timeout,
        headers=build_headers(headers, user_agent),
        follow_redirects=True,
        transport=transport,
        event_hooks=event_hooks,
    ) as client:
        try:
            response = await client.get(url)
        except httpx.TimeoutException as e:
            raise FetchError(f"Timeout while fetching {url}") from e

    logger.debug("GET %s -> %s (%d bytes)", url, response.status_code, len(response.content))
    if not response.is_success:
        raise HttpStatusError(response.status_code)
    return response
