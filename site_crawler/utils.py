"""site_crawler.utils: small URL and list helpers shared across the package."""

from __future__ import annotations

from typing import Collection, List, Sequence
from urllib.parse import urlsplit, urlunsplit

from site_crawler.logger import get_logger

logger = get_logger(__name__)

__all__: Sequence[str] = (
    "remove_duplicates",
    "strip_fragment",
    "extract_host",
    "document_id",
    "redact_password",
)


def remove_duplicates(items: Collection[str]) -> List[str]:
    """Remove duplicates from a list of URLs, keeping first-occurrence order."""
    unique = list(dict.fromkeys(items))
    removed = len(items) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique


def strip_fragment(url: str) -> str:
    """Drop everything from the first ``#`` on."""
    return url.split("#", 1)[0]


def extract_host(url: str) -> str:
    """Host part of *url* (with port, without credentials)."""
    return urlsplit(url).netloc.rpartition("@")[2]


def document_id(url: str) -> str:
    """Canonical storage key of a URL: the URL without its scheme."""
    _, sep, rest = url.partition("://")
    return rest if sep else url


def redact_password(uri: str | None) -> str:
    """Replace the password of a URI with ``***`` so it can be logged."""
    if not uri:
        return ""
    parts = urlsplit(uri)
    if parts.password is None:
        return uri
    userinfo, _, hostinfo = parts.netloc.rpartition("@")
    username = userinfo.split(":", 1)[0]
    return urlunsplit(parts._replace(netloc=f"{username}:***@{hostinfo}"))
