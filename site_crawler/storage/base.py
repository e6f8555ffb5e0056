"""
Storage interface for crawl results.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict

from site_crawler.crawler.models import CrawlTarget
from site_crawler.utils import document_id


def target_document(target: CrawlTarget) -> Dict[str, Any]:
    """Document persisted for a successfully parsed target."""
    return {
        "_id": document_id(target.url),
        "url": target.url,
        "host": target.host,
        "scheme": target.scheme,
        "timestamp": target.timestamp,
        "text": list(target.text),
        "depth": target.depth,
        "foundThrough": target.found_via,
        "type": target.content_type,
    }


class Store(ABC):
    """Abstract base class for result stores.

    ``connect`` is called once before the crawl starts, ``close`` once after
    it ended and ``insert`` once per successfully parsed target. Only the
    coordinator talks to the store.
    """

    @abstractmethod
    async def connect(self) -> None:
        """Open the connection; raise StoreConnectionError if unreachable."""

    @abstractmethod
    async def insert(self, target: CrawlTarget) -> None:
        """Persist *target*; raise StoreError on failure."""

    @abstractmethod
    async def close(self) -> None:
        """Release the connection."""
