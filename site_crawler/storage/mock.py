"""No-op store used for dry runs."""
from __future__ import annotations

from site_crawler.crawler.models import CrawlTarget
from site_crawler.logger import get_logger
from site_crawler.storage.base import Store

logger = get_logger(__name__)


class MockStore(Store):
    """Pretends to persist results; only counts them."""

    def __init__(self) -> None:
        self.inserted = 0

    async def connect(self) -> None:
        logger.debug("Connected to mock database")

    async def insert(self, target: CrawlTarget) -> None:
        self.inserted += 1

    async def close(self) -> None:
        logger.debug("Mock database closed after %d inserts", self.inserted)
