# File: tests/conftest.py
from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import Dict, List, Mapping, Optional, Union

import pytest
from aiohttp import web

from site_crawler.config import CrawlConfig
from site_crawler.crawler.coordinator import Coordinator, WaitGroup
from site_crawler.crawler.fetcher import FetchResponse
from site_crawler.crawler.models import CrawlTarget
from site_crawler.exceptions import StoreConnectionError, StoreError, TransportError
from site_crawler.storage.base import Store


class RecordingStore(Store):
    """In-memory store that remembers what it was asked to do."""

    def __init__(self, *, fail_connect: bool = False, fail_insert: bool = False) -> None:
        self.fail_connect = fail_connect
        self.fail_insert = fail_insert
        self.connected = False
        self.closed = False
        self.inserted: List[CrawlTarget] = []

    async def connect(self) -> None:
        if self.fail_connect:
            raise StoreConnectionError("store unreachable")
        self.connected = True

    async def insert(self, target: CrawlTarget) -> None:
        if self.fail_insert:
            raise StoreError("insert failed")
        self.inserted.append(target)

    async def close(self) -> None:
        self.closed = True

    @property
    def urls(self) -> List[str]:
        return [t.url for t in self.inserted]


class FakeTransport:
    """Serves canned responses; unknown URLs fail like a network error."""

    def __init__(self, pages: Optional[Mapping[str, tuple[str, Union[str, bytes]]]] = None, delay: float = 0.0) -> None:
        self.pages: Dict[str, tuple[str, Union[str, bytes]]] = dict(pages or {})
        self.delay = delay
        self.requested: List[str] = []

    async def fetch(self, url: str) -> FetchResponse:
        self.requested.append(url)
        if self.delay:
            await asyncio.sleep(self.delay)
        if url not in self.pages:
            raise TransportError(f"GET {url} failed: connection refused")
        content_type, body = self.pages[url]
        if isinstance(body, str):
            body = body.encode("utf-8")
        return FetchResponse(url=url, status=200, headers={"Content-Type": content_type}, body=body)


@pytest.fixture()
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture()
def wait_group() -> WaitGroup:
    return WaitGroup()


@pytest.fixture()
def make_coordinator(store, wait_group):
    """Build a coordinator over the recording store with a given link policy."""

    def _make(max_depth: Optional[int] = None, whitelisted_hosts=None, **kwargs) -> Coordinator:
        hosts = frozenset(whitelisted_hosts) if whitelisted_hosts is not None else None
        config = CrawlConfig(max_depth=max_depth, whitelisted_hosts=hosts)
        return Coordinator(config, store, wait_group, **kwargs)

    return _make


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()
