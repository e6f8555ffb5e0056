"""
MongoDB store. pymongo is blocking, so every call runs in a worker thread
while the coordinator awaits it.
"""
from __future__ import annotations

import asyncio
from typing import Optional

from bson.errors import BSONError
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from site_crawler.config import DEFAULT_MONGODB_DATABASE
from site_crawler.crawler.models import CrawlTarget
from site_crawler.exceptions import StoreConnectionError, StoreError
from site_crawler.logger import get_logger
from site_crawler.storage.base import Store, target_document
from site_crawler.utils import redact_password

logger = get_logger(__name__)

SITES_COLLECTION = "sites"
SERVER_SELECTION_TIMEOUT_MS = 10_000


class MongoStore(Store):
    """Upserts one document per crawled URL into ``<database>.sites``."""

    def __init__(
        self,
        uri: Optional[str],
        database: str = DEFAULT_MONGODB_DATABASE,
        collection: str = SITES_COLLECTION,
    ) -> None:
        self.uri = uri
        self.database = database
        self.collection_name = collection
        self.client: Optional[MongoClient] = None
        self._collection: Optional[Collection] = None

    async def connect(self) -> None:
        if not self.uri:
            raise StoreConnectionError("no MongoDB URI configured")
        try:
            await asyncio.to_thread(self._connect)
        except PyMongoError as exc:
            raise StoreConnectionError(
                f"could not connect to MongoDB at {redact_password(self.uri)}: {exc}"
            ) from exc
        logger.info("Connected to MongoDB at %s", redact_password(self.uri))

    def _connect(self) -> None:
        client: MongoClient = MongoClient(self.uri, serverSelectionTimeoutMS=SERVER_SELECTION_TIMEOUT_MS)
        try:
            client.admin.command("ping")
        except PyMongoError:
            client.close()
            raise
        self.client = client
        self._collection = client[self.database][self.collection_name]

    async def insert(self, target: CrawlTarget) -> None:
        if self._collection is None:
            raise StoreError("store is not connected")
        document = target_document(target)
        try:
            await asyncio.to_thread(
                self._collection.replace_one, {"_id": document["_id"]}, document, upsert=True
            )
        except (PyMongoError, BSONError) as exc:
            raise StoreError(f"could not store {target.url}: {exc}") from exc

    async def close(self) -> None:
        if self.client is not None:
            await asyncio.to_thread(self.client.close)
            self.client = None
            self._collection = None
