"""
Tests for the scrape job queue.
"""

import asyncio

import pytest

from pagescout.core.queue import JobStatus, ScrapeJob, ScrapeQueue
from pagescout.exceptions import JobNotFoundError
from pagescout.models import PageDocument


class RecordingRunner:
    """Job runner that records execution order."""

    def __init__(self, fail_urls: set[str] | None = None):
        self.order: list[str] = []
        self.fail_urls = fail_urls or set()
        self.running = 0
        self.max_running = 0

    async def __call__(self, job: ScrapeJob) -> PageDocument:
        self.running += 1
        self.max_running = max(self.max_running, self.running)
        try:
            await asyncio.sleep(0)
            self.order.append(job.url)
            if job.url in self.fail_urls:
                raise RuntimeError("browser crashed")
            return PageDocument(url=job.url, content=[f"content of {job.url}"])
        finally:
            self.running -= 1


class TestScrapeQueue:
    @pytest.mark.asyncio
    async def test_priority_order(self) -> None:
        runner = RecordingRunner()
        queue = ScrapeQueue(runner=runner)

        queue.submit("https://example.com/low", priority=5)
        queue.submit("https://example.com/high", priority=0)
        queue.submit("https://example.com/high-second", priority=0)

        async with queue:
            pass

        assert runner.order == [
            "https://example.com/high",
            "https://example.com/high-second",
            "https://example.com/low",
        ]

    @pytest.mark.asyncio
    async def test_results_and_status(self) -> None:
        queue = ScrapeQueue(runner=RecordingRunner(fail_urls={"https://example.com/bad"}))
        good = queue.submit("https://example.com/good")
        bad = queue.submit("https://example.com/bad")

        async with queue:
            pass

        assert good.status is JobStatus.COMPLETED
        assert good.result.content == ["content of https://example.com/good"]
        assert good.to_dict()["content_items"] == 1
        assert bad.status is JobStatus.FAILED
        assert bad.error == "browser crashed"
        assert bad.done and bad.finished_at is not None
        assert queue.get_stats()["completed"] == 1
        assert queue.get_stats()["failed"] == 1

    @pytest.mark.asyncio
    async def test_cancel_queued_job(self) -> None:
        runner = RecordingRunner()
        queue = ScrapeQueue(runner=runner)
        kept = queue.submit("https://example.com/kept")
        dropped = queue.submit("https://example.com/dropped")

        assert queue.cancel(dropped.job_id) is True

        async with queue:
            pass

        assert runner.order == ["https://example.com/kept"]
        assert kept.status is JobStatus.COMPLETED
        assert dropped.status is JobStatus.CANCELLED
        assert queue.cancel(kept.job_id) is False

    @pytest.mark.asyncio
    async def test_concurrency_ceiling(self) -> None:
        runner = RecordingRunner()
        queue = ScrapeQueue(runner=runner, concurrency=2)
        for i in range(6):
            queue.submit(f"https://example.com/{i}")

        await queue.join()
        await queue.close()

        assert len(runner.order) == 6
        assert runner.max_running <= 2

    def test_unknown_job(self) -> None:
        queue = ScrapeQueue(runner=RecordingRunner())

        with pytest.raises(JobNotFoundError):
            queue.get("missing")
        with pytest.raises(JobNotFoundError):
            queue.cancel("missing")

    def test_jobs_listing(self) -> None:
        queue = ScrapeQueue(runner=RecordingRunner())
        job = queue.submit("https://example.com/")

        assert queue.jobs == [job]
        assert queue.get(job.job_id) is job
        assert job.to_dict()["status"] == "queued"
