"""
Data models for the site_crawler coordinator and workers.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"


@dataclass(slots=True)
class CrawlTarget:
    """One URL's crawl record, from discovery to parsed result.

    Created by the coordinator (seed or accepted link), filled in by the
    worker that fetches it and read-only once submitted back.
    """

    url: str
    depth: int = 0
    found_via: str = ""
    host: str = ""
    scheme: str = ""
    text: List[str] = field(default_factory=list)
    links: List[str] = field(default_factory=list)
    timestamp: str = ""
    content_type: str = ""
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class JobCommand(enum.Enum):
    SCRAPE = "scrape"
    WAIT = "wait"
    STOP = "stop"


@dataclass(slots=True, frozen=True)
class Job:
    """Coordinator answer to a worker's job request."""

    command: JobCommand
    target: Optional[CrawlTarget] = None

    @classmethod
    def scrape(cls, target: CrawlTarget) -> Job:
        return cls(JobCommand.SCRAPE, target)

    @classmethod
    def wait(cls) -> Job:
        return cls(JobCommand.WAIT)

    @classmethod
    def stop(cls) -> Job:
        return cls(JobCommand.STOP)
