"""
Bounded outbound HTTP.

``BoundedFetcher.fetch`` enforces a wall-clock deadline on the whole
request (connect, headers and body) and raises FetchTimeout or
TransportError. HTTP error statuses are returned as-is; callers inspect
``response.status_code``.

``try_json`` / ``try_text`` are the forgiving variants used by the
aggregator: any failure is logged and turned into ``None``.
"""

import asyncio
import logging
from typing import Any, Optional

import httpx

from sunpulse.core.config import settings
from sunpulse.core.errors import FetchTimeout, TransportError, UpstreamFormatError

logger = logging.getLogger(__name__)


class BoundedFetcher:
    def __init__(
        self,
        timeout: float = settings.FETCH_TIMEOUT_SECONDS,
        user_agent: str = settings.USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.headers = {"User-Agent": user_agent}
        # Injected in tests (httpx.MockTransport); None means real network.
        self._transport = transport

    async def fetch(
        self,
        url: str,
        method: str = "GET",
        timeout: Optional[float] = None,
        read_body: bool = True,
    ) -> httpx.Response:
        timeout = self.timeout if timeout is None else timeout
        async with httpx.AsyncClient(
            transport=self._transport,
            headers=self.headers,
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
        ) as client:
            try:
                return await asyncio.wait_for(self._send(client, method, url, read_body), timeout=timeout)
            except (asyncio.TimeoutError, httpx.TimeoutException) as e:
                raise FetchTimeout(url, timeout) from e
            except (httpx.TransportError, httpx.InvalidURL) as e:
                raise TransportError(url, str(e) or type(e).__name__) from e

    @staticmethod
    async def _send(client: httpx.AsyncClient, method: str, url: str, read_body: bool) -> httpx.Response:
        response = await client.send(client.build_request(method, url), stream=True)
        try:
            if read_body:
                await response.aread()
        finally:
            # Closing an unread stream discards the body.
            await response.aclose()
        return response

    async def try_json(self, url: str, timeout: Optional[float] = None) -> Optional[Any]:
        try:
            response = await self.fetch(url, timeout=timeout)
            if not response.is_success:
                logger.warning(f"JSON fetch fallback triggered for {url}: HTTP {response.status_code}")
                return None
            try:
                return response.json()
            except ValueError as e:
                raise UpstreamFormatError(url, f"invalid JSON ({e})") from e
        except (FetchTimeout, TransportError, UpstreamFormatError) as e:
            logger.warning(f"JSON fetch fallback triggered for {url}: {e}")
            return None

    async def try_text(self, url: str, timeout: Optional[float] = None) -> Optional[str]:
        try:
            response = await self.fetch(url, timeout=timeout)
        except (FetchTimeout, TransportError) as e:
            logger.warning(f"Text fetch fallback triggered for {url}: {e}")
            return None
        if not response.is_success:
            logger.warning(f"Text fetch fallback triggered for {url}: HTTP {response.status_code}")
            return None
        return response.text
