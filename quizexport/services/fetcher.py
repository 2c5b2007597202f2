"""
Form page fetcher (async, httpx).

The client is created lazily on first use so it binds to the running event
loop, not to whatever loop existed at import time.
"""

import logging
from typing import Optional

import httpx

from quizexport.core.config import settings
from quizexport.core.exceptions import SourceUnavailable

logger = logging.getLogger(__name__)


class FormFetcher:
    def __init__(
        self,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        max_bytes: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.user_agent = user_agent or settings.FETCH_USER_AGENT
        self.timeout = timeout if timeout is not None else settings.FETCH_TIMEOUT_SECONDS
        self.max_bytes = max_bytes or settings.MAX_HTML_BYTES
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers={"User-Agent": self.user_agent},
                follow_redirects=True,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def fetch(self, url: str) -> str:
        """Return the page HTML or raise SourceUnavailable."""
        logger.info(f"Fetching form page: {url}")
        try:
            async with self.client.stream("GET", url) as resp:
                resp.raise_for_status()
                declared = resp.headers.get("Content-Length")
                if declared and declared.isdigit() and int(declared) > self.max_bytes:
                    self._too_large(int(declared))

                chunks = []
                received = 0
                async for chunk in resp.aiter_bytes():
                    received += len(chunk)
                    if received > self.max_bytes:
                        self._too_large(received)
                    chunks.append(chunk)
                encoding = resp.encoding or "utf-8"
        except httpx.HTTPStatusError as e:
            logger.warning(f"Form page returned HTTP {e.response.status_code}: {url}")
            raise SourceUnavailable(
                f"Could not fetch the form (HTTP {e.response.status_code})"
            ) from e
        except httpx.HTTPError as e:
            logger.warning(f"Form page fetch failed: {url} ({e})")
            raise SourceUnavailable(f"Could not fetch the form: {e}") from e

        return b"".join(chunks).decode(encoding, errors="replace")

    def _too_large(self, size: int):
        logger.warning(f"Form page exceeds {self.max_bytes} bytes ({size})")
        raise SourceUnavailable(f"Form page too large ({size // 1024} KB)")

    async def aclose(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None
