"""
Fetcher module: the HTTP transport used by the crawl workers.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Mapping, Optional

from aiohttp import ClientError, ClientSession, ClientTimeout

from site_crawler.config import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from site_crawler.exceptions import TransportError


@dataclass(slots=True)
class FetchResponse:
    """Headers and fully read body of one HTTP response."""

    url: str
    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""
    charset: Optional[str] = None


class HttpTransport:
    """aiohttp session shared by the workers of one crawl run.

    Status codes are not errors here: whatever the server answers is handed
    to the parsers. Network failures, timeouts and invalid URLs raise
    :class:`TransportError`.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        proxy: Optional[str] = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self.timeout = timeout
        self.proxy = proxy
        self.headers = {
            "User-Agent": user_agent,
            "Connection": "keep-alive",
            "Accept": "*/*",
        }
        self.session: Optional[ClientSession] = None

    async def __aenter__(self) -> HttpTransport:
        self.session = ClientSession(
            timeout=ClientTimeout(total=self.timeout),
            headers=self.headers,
            raise_for_status=False,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def fetch(self, url: str) -> FetchResponse:
        if not self.session:
            raise RuntimeError("Session not initialized")
        try:
            async with self.session.get(url, proxy=self.proxy) as resp:
                body = await resp.read()
                return FetchResponse(
                    url=url,
                    status=resp.status,
                    headers=resp.headers.copy(),
                    body=body,
                    charset=resp.charset,
                )
        except (ClientError, asyncio.TimeoutError, ValueError) as exc:
            raise TransportError(f"GET {url} failed: {exc!r}") from exc
