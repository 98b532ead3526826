"""
Scrape job queue.

Priority-ordered (lower number first, FIFO within a priority) with a
concurrency ceiling. Queued jobs can be cancelled; running jobs cannot.
"""

import asyncio
import itertools
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pagescout.config import ScrapeConfig
from pagescout.core.orchestrator import run_scrape
from pagescout.exceptions import JobNotFoundError
from pagescout.models import PageDocument
from pagescout.utils import metrics
from pagescout.utils.logging import ScraperLogger


class JobStatus(str, Enum):
    """Lifecycle of a scrape job."""

    QUEUED = "queued"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class ScrapeJob:
    """One URL to scrape."""

    url: str
    config: ScrapeConfig = field(default_factory=ScrapeConfig)
    priority: int = 0
    job_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    status: JobStatus = JobStatus.QUEUED
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    started_at: datetime | None = None
    finished_at: datetime | None = None
    result: PageDocument | None = None
    error: str | None = None

    @property
    def done(self) -> bool:
        return self.status in (JobStatus.COMPLETED, JobStatus.FAILED, JobStatus.CANCELLED)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "job_id": self.job_id,
            "url": self.url,
            "priority": self.priority,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "error": self.error,
            "content_items": len(self.result.content) if self.result else 0,
        }


JobRunner = Callable[[ScrapeJob], Awaitable[PageDocument]]


async def default_runner(job: ScrapeJob) -> PageDocument:
    """Scrape the job's URL with a fresh browser."""
    return await run_scrape(job.url, job.config)


class ScrapeQueue:
    """
    Runs scrape jobs with at most ``concurrency`` in flight.

    Workers start lazily on the first ``start()`` or ``join()``.
    """

    def __init__(
        self,
        runner: JobRunner | None = None,
        concurrency: int = 1,
        logger: ScraperLogger | None = None,
    ):
        """
        Initialize the queue.

        Args:
            runner: Coroutine that scrapes one job.
            concurrency: Maximum jobs running at once.
            logger: Logger instance.
        """
        self.runner = runner or default_runner
        self.concurrency = max(1, concurrency)
        self.logger = logger or ScraperLogger("scrape_queue")

        self._queue: asyncio.PriorityQueue[tuple[int, int, ScrapeJob]] = asyncio.PriorityQueue()
        self._counter = itertools.count()
        self._jobs: dict[str, ScrapeJob] = {}
        self._workers: list[asyncio.Task] = []

    def submit(
        self,
        url: str,
        config: ScrapeConfig | None = None,
        priority: int = 0,
    ) -> ScrapeJob:
        """
        Queue a URL.

        Args:
            url: Page to scrape.
            config: Session config for this job.
            priority: Lower runs first.

        Returns:
            The queued job.
        """
        job = ScrapeJob(url=url, config=config or ScrapeConfig(), priority=priority)
        self._jobs[job.job_id] = job
        self._queue.put_nowait((priority, next(self._counter), job))
        metrics.update_queue_size(self._queue.qsize())
        self.logger.debug("Job queued", job_id=job.job_id, url=url, priority=priority)
        return job

    def get(self, job_id: str) -> ScrapeJob:
        """
        Look up a job.

        Raises:
            JobNotFoundError: If the id is unknown.
        """
        job = self._jobs.get(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        return job

    def cancel(self, job_id: str) -> bool:
        """
        Cancel a queued job so it never starts.

        Returns:
            True if the job was cancelled, False if it already started or finished.

        Raises:
            JobNotFoundError: If the id is unknown.
        """
        job = self.get(job_id)
        if job.status is not JobStatus.QUEUED:
            return False
        job.status = JobStatus.CANCELLED
        job.finished_at = datetime.now(timezone.utc)
        metrics.record_job(job.status.value)
        self.logger.info("Job cancelled", job_id=job_id, url=job.url)
        return True

    @property
    def jobs(self) -> list[ScrapeJob]:
        return list(self._jobs.values())

    def get_stats(self) -> dict[str, int]:
        """Job counts by status."""
        stats = {status.value: 0 for status in JobStatus}
        for job in self._jobs.values():
            stats[job.status.value] += 1
        return stats

    # -------------------------------------------------------------------------
    # Workers
    # -------------------------------------------------------------------------

    def start(self) -> None:
        """Start the worker tasks."""
        if self._workers:
            return
        self._workers = [
            asyncio.create_task(self._worker(i), name=f"scrape-worker-{i}")
            for i in range(self.concurrency)
        ]

    async def _worker(self, worker_id: int) -> None:
        while True:
            _, _, job = await self._queue.get()
            metrics.update_queue_size(self._queue.qsize())
            try:
                if job.status is JobStatus.CANCELLED:
                    continue
                await self._run(job, worker_id)
            finally:
                self._queue.task_done()

    async def _run(self, job: ScrapeJob, worker_id: int) -> None:
        job.status = JobStatus.RUNNING
        job.started_at = datetime.now(timezone.utc)
        self.logger.info("Job started", job_id=job.job_id, url=job.url, worker=worker_id)

        try:
            job.result = await self.runner(job)
            job.status = JobStatus.COMPLETED
        except Exception as e:
            job.status = JobStatus.FAILED
            job.error = str(e)
            self.logger.error(
                "Job failed",
                job_id=job.job_id,
                url=job.url,
                error=str(e),
                error_type=type(e).__name__,
            )
        finally:
            job.finished_at = datetime.now(timezone.utc)

        metrics.record_job(job.status.value)

        if job.status is JobStatus.COMPLETED:
            self.logger.info(
                "Job completed",
                job_id=job.job_id,
                url=job.url,
                content_items=len(job.result.content) if job.result else 0,
            )

    async def join(self) -> None:
        """Wait until every queued job has finished or been cancelled."""
        self.start()
        await self._queue.join()

    async def close(self) -> None:
        """Stop the workers. Jobs still queued stay queued."""
        for task in self._workers:
            task.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []

    async def __aenter__(self) -> "ScrapeQueue":
        """Async context manager entry."""
        self.start()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.join()
        await self.close()
