"""In-process job queue backed by ``asyncio.Queue``.

Used by default and in tests. Jobs survive handler failures (they are
re-queued after the policy's backoff) but not process restarts; use
:class:`notifications.queue.redis_streams.RedisStreamJobQueue` when
jobs must outlive the worker.
"""

import asyncio
from typing import Any

import structlog

from notifications.queue.base import Job, JobHandler, RetryPolicy

logger = structlog.get_logger(__name__)


class InMemoryJobQueue:
    def __init__(self, retry_policy: RetryPolicy | None = None, concurrency: int = 1) -> None:
        self.retry_policy = retry_policy or RetryPolicy()
        self.concurrency = max(1, concurrency)
        self.enqueued_jobs: list[Job] = []
        self.completed_jobs: list[Job] = []
        self.failed_jobs: list[Job] = []

        self._queue: asyncio.Queue[Job] = asyncio.Queue()
        self._handler: JobHandler | None = None
        self._workers: list[asyncio.Task] = []
        self._retries: set[asyncio.Task] = set()

    # -------------------------------------------------------------------
    # Producer side
    # -------------------------------------------------------------------
    async def enqueue(self, name: str, data: dict[str, Any]) -> Job:
        job = Job(name=name, data=dict(data))
        self.enqueued_jobs.append(job)
        self._queue.put_nowait(job)
        logger.debug("Job enqueued", job_id=job.id, job_name=name)
        return job

    @property
    def size(self) -> int:
        return self._queue.qsize()

    # -------------------------------------------------------------------
    # Consumer side
    # -------------------------------------------------------------------
    def process(self, handler: JobHandler) -> None:
        self._handler = handler

    async def start(self) -> None:
        if self._handler is None:
            raise RuntimeError("No job handler registered; call process() first")
        if self._workers:
            return
        self._workers = [asyncio.create_task(self._work(), name=f"job-worker-{i}") for i in range(self.concurrency)]
        logger.info("Job queue started", backend="memory", concurrency=self.concurrency)

    async def stop(self) -> None:
        for task in [*self._workers, *self._retries]:
            task.cancel()
        await asyncio.gather(*self._workers, *self._retries, return_exceptions=True)
        self._workers = []
        self._retries.clear()
        logger.info("Job queue stopped", backend="memory")

    async def drain(self) -> None:
        """Wait until every queued job, including scheduled retries, has settled."""
        while True:
            await self._queue.join()
            if not self._retries:
                return
            await asyncio.gather(*list(self._retries), return_exceptions=True)

    async def run_until_empty(self) -> None:
        """Process queued jobs inline, without worker tasks."""
        while not self._queue.empty() or self._retries:
            if self._queue.empty():
                await asyncio.gather(*list(self._retries), return_exceptions=True)
                continue
            job = self._queue.get_nowait()
            try:
                await self._run(job)
            finally:
                self._queue.task_done()

    async def _work(self) -> None:
        while True:
            job = await self._queue.get()
            try:
                await self._run(job)
            finally:
                self._queue.task_done()

    async def _run(self, job: Job) -> None:
        if self._handler is None:
            raise RuntimeError("No job handler registered; call process() first")
        try:
            await self._handler(job)
        except Exception as exc:
            job.attempts_made += 1
            job.failed_reason = str(exc)
            if self.retry_policy.should_retry(job.attempts_made):
                delay = self.retry_policy.delay_for(job.attempts_made)
                logger.warning(
                    "Job failed, retry scheduled",
                    job_id=job.id,
                    attempts_made=job.attempts_made,
                    delay_seconds=delay,
                    error=str(exc),
                )
                self._schedule_retry(job, delay)
            else:
                self.failed_jobs.append(job)
                logger.error(
                    "Job failed permanently",
                    job_id=job.id,
                    attempts_made=job.attempts_made,
                    error=str(exc),
                )
        else:
            self.completed_jobs.append(job)

    def _schedule_retry(self, job: Job, delay: float) -> None:
        async def _requeue() -> None:
            await asyncio.sleep(delay)
            self._queue.put_nowait(job)

        task = asyncio.create_task(_requeue())
        self._retries.add(task)
        task.add_done_callback(self._retries.discard)
