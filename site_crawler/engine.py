# File: site_crawler/engine.py
"""site_crawler.engine: wiring of store, coordinator, transport and workers for one run."""

from __future__ import annotations

import asyncio
import signal
import sys
from typing import List, Optional

from site_crawler import __version__
from site_crawler.config import CrawlerSettings, load_config
from site_crawler.crawler.coordinator import Coordinator, WaitGroup
from site_crawler.crawler.fetcher import HttpTransport
from site_crawler.crawler.worker import CrawlWorker
from site_crawler.logger import get_logger
from site_crawler.storage import Store, create_store
from site_crawler.utils import redact_password

__all__ = ["Engine", "start_crawl"]

logger = get_logger(__name__)


def _install_signal_handlers(shutdown: asyncio.Event) -> List[signal.Signals]:
    loop = asyncio.get_running_loop()
    installed = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, shutdown.set)
        except (NotImplementedError, RuntimeError):
            continue
        installed.append(sig)
    return installed


class Engine:
    """Facade for the CLI and tests: one crawl run from settings to shutdown."""

    @staticmethod
    def load_config(path: Optional[str]) -> CrawlerSettings:
        return load_config(path)

    def __init__(self, settings: CrawlerSettings, store: Optional[Store] = None) -> None:
        self.settings = settings
        self.store = store if store is not None else create_store(settings)
        self.wait_group = WaitGroup()
        self.coordinator = Coordinator(
            settings.crawl_config,
            self.store,
            self.wait_group,
            random_index_threshold=settings.random_index_threshold,
            status_log_frequency=settings.status_log_frequency,
        )
        self.workers: List[asyncio.Task[None]] = []

    def log_banner(self) -> None:
        s = self.settings
        logger.info("site_crawler %s starting...", __version__)
        logger.info("Python version: %s", sys.version.split()[0])
        if s.mock_db:
            logger.info("Store: mock database")
        else:
            logger.info("MongoDB URI: %s", redact_password(s.mongodb_uri))
        logger.info("Start URL(s): %s", ", ".join(s.seed_urls))
        if s.proxy:
            logger.info("HTTP proxy: %s", redact_password(s.proxy))

    async def run(self, shutdown: asyncio.Event) -> None:
        """Crawl until *shutdown* is set, then drain the workers and close the store."""
        s = self.settings
        self.log_banner()
        self.wait_group.add(s.crawlers)
        self.coordinator.seed(s.seed_urls)
        try:
            await self.coordinator.run()
        except BaseException:
            self.wait_group.add(-s.crawlers)
            raise

        try:
            async with HttpTransport(timeout=s.timeout, proxy=s.proxy, user_agent=s.user_agent) as transport:
                logger.debug("Starting %d crawler(s)...", s.crawlers)
                for i in range(s.crawlers):
                    worker = CrawlWorker(
                        self.coordinator.connection(),
                        transport,
                        self.wait_group,
                        idle_interval=s.idle_interval,
                        name=f"worker-{i}",
                    )
                    self.workers.append(asyncio.create_task(worker.run()))

                await shutdown.wait()
                logger.info("Shutting down, waiting for running jobs...")
                self.coordinator.stop()
                await self.coordinator.wait_closed()
                await asyncio.gather(*self.workers)
        finally:
            await self.store.close()
        logger.info("Crawl finished: %d sites scraped", self.coordinator.scraped_count)


async def start_crawl(settings: CrawlerSettings, shutdown: Optional[asyncio.Event] = None) -> int:
    """Run a crawl until *shutdown* is set (SIGINT/SIGTERM when none is given).

    Returns the number of successfully scraped sites.
    """
    installed: List[signal.Signals] = []
    if shutdown is None:
        shutdown = asyncio.Event()
        installed = _install_signal_handlers(shutdown)
    engine = Engine(settings)
    try:
        await engine.run(shutdown)
    finally:
        loop = asyncio.get_running_loop()
        for sig in installed:
            loop.remove_signal_handler(sig)
    return engine.coordinator.scraped_count
