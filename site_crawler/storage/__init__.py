"""
Result stores for the crawler.
"""
from __future__ import annotations

from site_crawler.config import CrawlerSettings
from site_crawler.storage.base import Store, target_document
from site_crawler.storage.mock import MockStore
from site_crawler.storage.mongo import MongoStore


def create_store(settings: CrawlerSettings) -> Store:
    """Mock store for dry runs, MongoDB otherwise."""
    if settings.mock_db:
        return MockStore()
    return MongoStore(settings.mongodb_uri, settings.mongodb_database)


__all__ = ["Store", "MockStore", "MongoStore", "create_store", "target_document"]
