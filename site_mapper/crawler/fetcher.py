# site_mapper/crawler/fetcher.py
"""
Fetcher module: retrieves one address over HTTP and reports content plus metadata.
"""
from __future__ import annotations

import asyncio
from typing import Collection, Optional, Protocol

from aiohttp import ClientError, ClientSession, ClientTimeout

from site_mapper.crawler.content_type import is_crawlable
from site_mapper.crawler.models import FetchError, FetchResult
from site_mapper.logger import logger

__all__ = ("Fetcher", "HttpFetcher")


class Fetcher(Protocol):
    """Anything able to fetch an address; raises FetchError on transport failure."""

    async def fetch(self, address: str) -> FetchResult: ...


class HttpFetcher:
    """aiohttp-backed fetcher owning its ClientSession."""

    def __init__(
        self,
        timeout: float = 10.0,
        user_agent: str = "SiteMapper/1.0",
        allowed_types: Optional[Collection[str]] = None,
        session: Optional[ClientSession] = None,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self.allowed_types = allowed_types
        self.session = session
        self._owns_session = session is None

    @classmethod
    def from_config(cls, config) -> HttpFetcher:
        return cls(
            timeout=config.timeout,
            user_agent=config.user_agent,
            allowed_types=config.allowed_content_types,
        )

    async def __aenter__(self) -> HttpFetcher:
        if self.session is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.timeout),
                headers={"User-Agent": self.user_agent},
                raise_for_status=False,
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def fetch(self, address: str) -> FetchResult:
        """
        GET *address* and return its status, Content-Type and text body.

        The body is left unread for error statuses and, when an allow-list
        is configured, for content types outside it. The response is
        released on every path.
        """
        if not self.session:
            raise RuntimeError("Session not initialized")
        try:
            async with self.session.get(address, allow_redirects=True) as resp:
                ctype = resp.headers.get("Content-Type", "")
                final = str(resp.url)
                if resp.status >= 400:
                    return FetchResult(final, resp.status, ctype)
                if self.allowed_types is not None and not is_crawlable(ctype, self.allowed_types):
                    logger.debug("Skip body of %s (%s)", address, ctype or "no content type")
                    return FetchResult(final, resp.status, ctype)
                text = await resp.text(errors="replace")
                return FetchResult(final, resp.status, ctype, text)
        except asyncio.TimeoutError as exc:
            raise FetchError(address, "timeout") from exc
        except ClientError as exc:
            raise FetchError(address, str(exc) or type(exc).__name__) from exc
