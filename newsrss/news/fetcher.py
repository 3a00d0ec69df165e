import asyncio
from typing import Optional, Protocol

import aiohttp

from newsrss.config import CONFIG
from newsrss.logging_config import create_logger
from newsrss.news.errors import TransportError


class Fetcher(Protocol):
    """Anything that can turn a URL into the text of the page behind it."""

    async def fetch(self, url: str) -> str:
        """Fetch a page, raising TransportError on network failure or non-2xx status."""
        ...


class PageFetcher:
    """
    Fetches pages over one shared aiohttp session with a total timeout per request.

    Use as an async context manager; a session passed in by the caller is left
    open on exit.
    """

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        timeout_seconds: Optional[float] = None,
        user_agent: Optional[str] = None,
    ):
        self._session = session
        self._owns_session = session is None
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else CONFIG.FETCH_TIMEOUT_SECONDS
        self.user_agent = user_agent or CONFIG.FETCH_USER_AGENT
        self.logger = create_logger("PageFetcher")

    async def __aenter__(self) -> "PageFetcher":
        if self._session is None:
            headers = {"User-Agent": self.user_agent} if self.user_agent else None
            self._session = aiohttp.ClientSession(headers=headers)
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def fetch(self, url: str) -> str:
        if self._session is None:
            raise RuntimeError("PageFetcher must be entered with 'async with' before fetching")

        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
        try:
            async with self._session.get(url, timeout=timeout) as response:
                if not 200 <= response.status < 300:
                    raise TransportError(url, f"HTTP {response.status}", status=response.status)

                text = await response.text(errors="replace")
                self.logger.debug(f"Fetched {len(text)} chars from {url}")
                return text

        except asyncio.TimeoutError as e:
            raise TransportError(url, f"Timed out after {self.timeout_seconds}s") from e
        except aiohttp.ClientError as e:
            raise TransportError(url, f"Request failed: {e}") from e
