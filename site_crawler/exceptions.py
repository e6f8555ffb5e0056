"""Exception hierarchy shared by the crawler, its transport and the stores."""
from __future__ import annotations


class CrawlerError(Exception):
    """Base class for all site_crawler errors."""


class TransportError(CrawlerError):
    """A page could not be fetched (network failure, timeout, bad URL)."""


class StoreError(CrawlerError):
    """A store operation failed."""


class StoreConnectionError(StoreError):
    """The store could not be reached at startup."""


__all__ = ["CrawlerError", "TransportError", "StoreError", "StoreConnectionError"]
