"""
Crawl worker: fetch/parse loop driven by the coordinator.
"""
from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Optional, Protocol
from urllib.parse import urlsplit

from site_crawler.config import DEFAULT_IDLE_INTERVAL
from site_crawler.crawler.coordinator import CoordinatorConnection, WaitGroup
from site_crawler.crawler.fetcher import FetchResponse
from site_crawler.crawler.models import TIMESTAMP_FORMAT, CrawlTarget, JobCommand
from site_crawler.exceptions import TransportError
from site_crawler.logger import get_logger
from site_crawler.parser import parse_response

logger = get_logger(__name__)


class Transport(Protocol):
    async def fetch(self, url: str) -> FetchResponse: ...


def parse_target_url(target: CrawlTarget) -> None:
    """Fill host and scheme of *target* from its URL; ValueError if malformed."""
    parts = urlsplit(target.url)
    if not parts.scheme or not parts.netloc:
        raise ValueError(f"URL needs a scheme and a host: {target.url!r}")
    target.scheme = parts.scheme
    target.host = parts.netloc.rpartition("@")[2]


class CrawlWorker:
    """Requests jobs until told to stop.

    A job whose fetch or parse fails is dropped: nothing is submitted and
    the URL is not retried.
    """

    def __init__(
        self,
        connection: CoordinatorConnection,
        transport: Transport,
        wait_group: WaitGroup,
        *,
        idle_interval: float = DEFAULT_IDLE_INTERVAL,
        name: str = "worker",
    ) -> None:
        self.connection = connection
        self.transport = transport
        self.wait_group = wait_group
        self.idle_interval = idle_interval
        self.name = name

    async def run(self) -> None:
        logger.debug("%s started", self.name)
        try:
            while True:
                job = await self.connection.get_job()
                if job.command is JobCommand.WAIT:
                    await asyncio.sleep(self.idle_interval)
                    continue
                if job.command is JobCommand.STOP:
                    break
                if job.target is None:
                    logger.warning("%s got a scrape job without a target", self.name)
                    continue
                target = await self.scrape(job.target)
                if target is not None:
                    await self.connection.submit_result(target)
        finally:
            self.wait_group.done()
            logger.debug("%s stopped", self.name)

    async def scrape(self, target: CrawlTarget) -> Optional[CrawlTarget]:
        """Fetch and parse *target*; None when the job has to be dropped."""
        try:
            parse_target_url(target)
        except ValueError as exc:
            logger.warning("Skipping malformed URL: %s", exc)
            return None

        try:
            response = await self.transport.fetch(target.url)
        except TransportError as exc:
            logger.warning("%s", exc)
            return None

        target.timestamp = datetime.now().strftime(TIMESTAMP_FORMAT)
        # parsing is CPU work; keep it off the event loop
        try:
            return await asyncio.to_thread(parse_response, target, response)
        except Exception as exc:
            logger.warning("Could not parse %s: %s", target.url, exc)
            return None
