"""The fetch capability providers use to reach the network."""

from __future__ import annotations

import asyncio
import os
import time
from collections.abc import Awaitable, Callable
from urllib.parse import urlparse

import httpx
import structlog

from .. import __version__
from .errors import ProviderConnectionError

log = structlog.get_logger()

Fetch = Callable[[str], Awaitable[bytes]]

# Open Library API compliance (https://openlibrary.org/developers/api)
# Identified requests get 3 req/s; unidentified get 1 req/s.
_OL_HOSTS = ("openlibrary.org", "covers.openlibrary.org")
_OL_CONTACT = os.environ.get("OL_CONTACT_EMAIL", "")
_OL_USER_AGENT = (
    f"BookRecon/{__version__} ({_OL_CONTACT})" if _OL_CONTACT else f"BookRecon/{__version__}"
)
OL_MIN_INTERVAL = 0.35  # seconds between Open Library requests (~2.8 req/s)
DEFAULT_TIMEOUT = float(os.environ.get("HTTP_TIMEOUT", "10"))


class HttpFetcher:
    """Fetch URLs over HTTP with httpx.

    Either wraps a caller-owned ``httpx.AsyncClient`` or, used as an async
    context manager, opens and closes its own.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        ol_min_interval: float = OL_MIN_INTERVAL,
    ) -> None:
        self._client = client
        self._owns_client = False
        self.timeout = timeout
        self.ol_min_interval = ol_min_interval
        self._ol_last_request: float = 0.0  # monotonic timestamp of last OL request
        self._ol_lock = asyncio.Lock()

    async def __aenter__(self) -> HttpFetcher:
        if self._client is None:
            self._client = httpx.AsyncClient()
            self._owns_client = True
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
            self._owns_client = False

    async def _ol_throttle(self) -> None:
        """Enforce a minimum interval between Open Library requests."""
        async with self._ol_lock:
            elapsed = time.monotonic() - self._ol_last_request
            if elapsed < self.ol_min_interval:
                await asyncio.sleep(self.ol_min_interval - elapsed)
            self._ol_last_request = time.monotonic()

    async def __call__(self, url: str) -> bytes:
        if self._client is None:
            raise RuntimeError("HttpFetcher used outside `async with` and without a client")

        headers = {}
        if urlparse(url).hostname in _OL_HOSTS:
            headers["User-Agent"] = _OL_USER_AGENT
            await self._ol_throttle()

        try:
            resp = await self._client.get(
                url, headers=headers, timeout=self.timeout, follow_redirects=True
            )
            resp.raise_for_status()
        except httpx.HTTPError as e:
            log.debug("fetch_error", url=url, error=str(e))
            raise ProviderConnectionError(url, str(e) or type(e).__name__) from e

        log.debug("fetch_ok", url=url, status=resp.status_code, size=len(resp.content))
        return resp.content
