"""
Crawl coordinator: the single owner of the frontier and the visited set.

Workers never touch crawl state directly. They talk to the coordinator
through a :class:`CoordinatorConnection`, which puts job requests and
results into one inbound queue. The coordinator's serve loop takes those
messages one at a time, so every frontier mutation happens in a single
task and no lock is needed.
"""
from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Sequence, Set, Tuple, Union

from site_crawler.config import (
    DEFAULT_RANDOM_INDEX_THRESHOLD,
    DEFAULT_STATUS_LOG_FREQUENCY,
    CrawlConfig,
)
from site_crawler.crawler.models import CrawlTarget, Job
from site_crawler.exceptions import StoreError
from site_crawler.logger import get_logger
from site_crawler.storage.base import Store
from site_crawler.utils import extract_host

__all__: Sequence[str] = ("Coordinator", "CoordinatorConnection", "WaitGroup")

logger = get_logger(__name__)


class WaitGroup:
    """Counter of running workers; :meth:`wait` returns once it drops to zero."""

    def __init__(self) -> None:
        self._count = 0
        self._zero = asyncio.Event()
        self._zero.set()

    @property
    def count(self) -> int:
        return self._count

    def add(self, delta: int = 1) -> None:
        if self._count + delta < 0:
            raise ValueError("WaitGroup counter would become negative")
        self._count += delta
        if self._count:
            self._zero.clear()
        else:
            self._zero.set()

    def done(self) -> None:
        self.add(-1)

    async def wait(self) -> None:
        await self._zero.wait()


@dataclass(slots=True)
class _JobRequest:
    reply: asyncio.Future


_TERMINATE = object()

_Message = Union[_JobRequest, CrawlTarget, object]


class CoordinatorConnection:
    """A worker's handle on the coordinator."""

    def __init__(self, inbox: asyncio.Queue[_Message]) -> None:
        self._inbox = inbox

    async def get_job(self) -> Job:
        reply: asyncio.Future[Job] = asyncio.get_running_loop().create_future()
        await self._inbox.put(_JobRequest(reply))
        return await reply

    async def submit_result(self, target: CrawlTarget) -> None:
        await self._inbox.put(target)


class Coordinator:
    """Arbitrates jobs and results between all workers of a crawl.

    The caller adds the number of workers to *workers* before :meth:`run`;
    the coordinator finishes once every worker has called ``done()`` on it.
    """

    def __init__(
        self,
        config: CrawlConfig,
        store: Store,
        workers: WaitGroup,
        *,
        random_index_threshold: int = DEFAULT_RANDOM_INDEX_THRESHOLD,
        status_log_frequency: int = DEFAULT_STATUS_LOG_FREQUENCY,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config
        self.store = store
        self.workers = workers
        self.random_index_threshold = random_index_threshold
        self.status_log_frequency = status_log_frequency
        self._rng = rng or random.Random()

        self._queue: List[CrawlTarget] = []
        self._queued: Set[str] = set()
        self._visited: Set[str] = set()
        self.scraped_count = 0
        self._stopping = False

        self._inbox: asyncio.Queue[_Message] = asyncio.Queue()
        self._serve_task: Optional[asyncio.Task[None]] = None
        self._watch_task: Optional[asyncio.Task[None]] = None

    # ------------------------------------------------------------------ #
    # Public API                                                         #
    # ------------------------------------------------------------------ #

    @property
    def queue_size(self) -> int:
        return len(self._queue)

    @property
    def frontier(self) -> Tuple[CrawlTarget, ...]:
        return tuple(self._queue)

    @property
    def visited(self) -> FrozenSet[str]:
        return frozenset(self._visited)

    @property
    def stopping(self) -> bool:
        return self._stopping

    def seed(self, urls: Sequence[str]) -> None:
        """Queue the start URLs at depth 0. Must happen before :meth:`run`."""
        if self._serve_task is not None:
            raise RuntimeError("seed() must be called before run()")
        for url in urls:
            self._enqueue(CrawlTarget(url=url, depth=0, found_via=""))

    def connection(self) -> CoordinatorConnection:
        return CoordinatorConnection(self._inbox)

    async def run(self) -> None:
        """Connect the store and start serving workers.

        Raises :class:`~site_crawler.exceptions.StoreConnectionError` when the
        store is unreachable; nothing is started in that case.
        """
        if self._serve_task is not None:
            raise RuntimeError("coordinator is already running")
        logger.debug("Starting coordinator...")
        await self.store.connect()
        self._watch_task = asyncio.create_task(self._termination_notifier())
        self._serve_task = asyncio.create_task(self._serve())

    def stop(self) -> None:
        """Answer every further job request with STOP. Does not block."""
        if not self._stopping:
            logger.debug("Stopping workers and coordinator...")
        self._stopping = True

    async def wait_closed(self) -> None:
        """Block until all workers have exited and the serve loop has ended."""
        if self._serve_task is None or self._watch_task is None:
            raise RuntimeError("coordinator was never started")
        await asyncio.gather(self._watch_task, self._serve_task)

    # ------------------------------------------------------------------ #
    # Serve loop                                                         #
    # ------------------------------------------------------------------ #

    async def _serve(self) -> None:
        while True:
            message = await self._inbox.get()
            if message is _TERMINATE:
                break
            if isinstance(message, _JobRequest):
                self._answer(message)
            elif isinstance(message, CrawlTarget):
                await self._submit_result(message)
        logger.debug("Coordinator stopped")

    async def _termination_notifier(self) -> None:
        await self.workers.wait()
        await self._inbox.put(_TERMINATE)

    def _answer(self, request: _JobRequest) -> None:
        job = Job.stop() if self._stopping else self._next_job()
        if request.reply.done():
            # the worker went away; keep its target for someone else
            if job.target is not None:
                self._enqueue(job.target)
            return
        request.reply.set_result(job)

    def _next_job(self) -> Job:
        while self._queue:
            # spread jobs over many hosts instead of draining one site's backlog
            if len(self._queue) > self.random_index_threshold:
                index = self._rng.randrange(self.random_index_threshold)
            else:
                index = 0
            target = self._queue.pop(index)
            self._queued.discard(target.url)
            if target.url in self._visited:
                continue
            return Job.scrape(target)

        logger.warning("The crawl queue is empty")
        return Job.wait()

    # ------------------------------------------------------------------ #
    # Results                                                            #
    # ------------------------------------------------------------------ #

    async def _submit_result(self, target: CrawlTarget) -> None:
        self._visited.add(target.url)

        if not target.failed:
            logger.info(
                "Scraped %s (depth=%d, links=%d, text=%d, type=%s)",
                target.url,
                target.depth,
                len(target.links),
                len(target.text),
                target.content_type,
            )
            try:
                await self.store.insert(target)
            except StoreError as exc:
                logger.warning("Could not store %s: %s", target.url, exc)
            self.scraped_count += 1
            if self.scraped_count % self.status_log_frequency == 0:
                self._log_status()
        else:
            logger.warning("Failed %s: %s", target.url, target.error)

        self._add_links_to_queue(target)

    def _add_links_to_queue(self, target: CrawlTarget) -> None:
        depth = target.depth + 1
        if self.config.max_depth is not None and depth > self.config.max_depth:
            return

        for link in target.links:
            if link in self._visited:
                continue
            if self.config.whitelisting_enabled and extract_host(link) not in self.config.whitelisted_hosts:
                continue
            self._enqueue(CrawlTarget(url=link, depth=depth, found_via=target.url))

    def _enqueue(self, target: CrawlTarget) -> bool:
        if target.url in self._queued or target.url in self._visited:
            return False
        self._queue.append(target)
        self._queued.add(target.url)
        return True

    def _log_status(self) -> None:
        logger.info("Status: %d sites scraped, %d queued", self.scraped_count, len(self._queue))
