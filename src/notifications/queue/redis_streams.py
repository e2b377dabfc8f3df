"""Durable job queue on Redis Streams.

Jobs are appended to a stream and consumed through a consumer group, so
a job read by a worker that dies before acknowledging it stays in the
group's pending list and is reclaimed after ``reclaim_idle_ms``.

A failed job is written to the sorted set ``<stream>:delayed``, scored by
the epoch millisecond it becomes due, before its stream entry is
acknowledged. The consumer loop moves due jobs back onto the stream, so a
pending retry survives ``stop()`` and worker crashes. Once attempts are
exhausted, or when an entry cannot be decoded at all, it is moved to the
dead-letter stream ``<stream>:failed``.
"""

import asyncio
import json
import time
from typing import Any

import redis.asyncio as redis
import structlog
from redis.exceptions import ResponseError

from notifications.queue.base import Job, JobHandler, RetryPolicy

logger = structlog.get_logger(__name__)

# KEYS[1] delayed set, KEYS[2] stream; ARGV[1] now (ms), ARGV[2] batch size,
# ARGV[3] stream maxlen. Moves due members onto the stream atomically.
PROMOTE_DUE_SCRIPT = """
local due = redis.call('ZRANGEBYSCORE', KEYS[1], '-inf', ARGV[1], 'LIMIT', 0, tonumber(ARGV[2]))
for _, payload in ipairs(due) do
    redis.call('XADD', KEYS[2], 'MAXLEN', '~', ARGV[3], '*', 'd', payload)
    redis.call('ZREM', KEYS[1], payload)
end
return #due
"""


def _now_ms() -> int:
    return int(time.time() * 1000)


class RedisStreamJobQueue:
    def __init__(
        self,
        url: str = "redis://127.0.0.1:6379/0",
        stream: str = "deployhub:notifications",
        group: str = "notification-workers",
        consumer: str = "worker-1",
        retry_policy: RetryPolicy | None = None,
        reclaim_idle_ms: int = 60000,
        maxlen: int = 10000,
        client: Any | None = None,
    ) -> None:
        self.url = url
        self.stream = stream
        self.dead_letter_stream = f"{stream}:failed"
        self.delayed_key = f"{stream}:delayed"
        self.group = group
        self.consumer = consumer
        self.retry_policy = retry_policy or RetryPolicy()
        self.reclaim_idle_ms = reclaim_idle_ms
        self.maxlen = maxlen

        self._redis = client
        self._owns_client = client is None
        self._handler: JobHandler | None = None
        self._task: asyncio.Task | None = None

    @property
    def client(self):
        if self._redis is None:
            self._redis = redis.from_url(self.url)
        return self._redis

    # -------------------------------------------------------------------
    # Producer side
    # -------------------------------------------------------------------
    async def enqueue(self, name: str, data: dict[str, Any]) -> Job:
        job = Job(name=name, data=dict(data))
        await self._append(job)
        logger.debug("Job enqueued", job_id=job.id, job_name=name, stream=self.stream)
        return job

    async def _append(self, job: Job, stream: str | None = None) -> None:
        await self.client.xadd(
            name=stream or self.stream,
            id="*",
            fields={"d": json.dumps(job.to_dict())},
            maxlen=self.maxlen,
            approximate=True,
        )

    async def _defer(self, job: Job, delay: float) -> None:
        due_ms = _now_ms() + int(delay * 1000)
        await self.client.zadd(self.delayed_key, {json.dumps(job.to_dict()): due_ms})

    # -------------------------------------------------------------------
    # Consumer side
    # -------------------------------------------------------------------
    def process(self, handler: JobHandler) -> None:
        self._handler = handler

    async def start(self) -> None:
        if self._handler is None:
            raise RuntimeError("No job handler registered; call process() first")
        try:
            await self.client.xgroup_create(name=self.stream, groupname=self.group, id="0", mkstream=True)
        except ResponseError as exc:
            if "BUSYGROUP" not in str(exc):
                raise
        self._task = asyncio.create_task(self._loop(), name="redis-job-consumer")
        logger.info("Job queue started", backend="redis", stream=self.stream, group=self.group)

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            await asyncio.gather(self._task, return_exceptions=True)
            self._task = None
        if self._redis is not None and self._owns_client:
            await self._redis.aclose()
            self._redis = None
        logger.info("Job queue stopped", backend="redis")

    async def _loop(self) -> None:
        while True:
            try:
                await self.promote_due()
                batches = await self.client.xreadgroup(
                    groupname=self.group,
                    consumername=self.consumer,
                    streams={self.stream: ">"},
                    count=10,
                    block=2000,
                )
                if batches:
                    for _stream_key, entries in batches:
                        for entry_id, fields in entries:
                            await self.handle_entry(entry_id, fields)
                else:
                    await self._reclaim_pending()
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                logger.error("Redis consumer loop error", error=str(exc))
                await asyncio.sleep(1.0)

    async def promote_due(self, batch: int = 100) -> int:
        """Move retries whose backoff has elapsed back onto the stream."""
        moved = await self.client.eval(
            PROMOTE_DUE_SCRIPT,
            2,
            self.delayed_key,
            self.stream,
            _now_ms(),
            batch,
            self.maxlen,
        )
        if moved:
            logger.debug("Delayed jobs promoted", count=moved, stream=self.stream)
        return moved or 0

    async def handle_entry(self, entry_id, fields: dict) -> None:
        """Run the handler for one stream entry and settle it."""
        if self._handler is None:
            raise RuntimeError("No job handler registered; call process() first")

        raw = fields.get("d") or fields.get(b"d")
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="replace")

        try:
            job = Job.from_dict(json.loads(raw))
        except (TypeError, ValueError, KeyError) as exc:
            await self.client.xadd(
                name=self.dead_letter_stream,
                id="*",
                fields={"d": raw or "", "error": f"Undecodable entry: {exc}"},
                maxlen=self.maxlen,
                approximate=True,
            )
            logger.error("Undecodable job entry dead-lettered", entry_id=entry_id, error=str(exc))
            await self._settle(entry_id)
            return

        try:
            await self._handler(job)
        except Exception as exc:
            job.attempts_made += 1
            job.failed_reason = str(exc)
            if self.retry_policy.should_retry(job.attempts_made):
                delay = self.retry_policy.delay_for(job.attempts_made)
                await self._defer(job, delay)
                logger.warning(
                    "Job failed, retry scheduled",
                    job_id=job.id,
                    attempts_made=job.attempts_made,
                    delay_seconds=delay,
                    error=str(exc),
                )
            else:
                await self._append(job, stream=self.dead_letter_stream)
                logger.error(
                    "Job failed permanently",
                    job_id=job.id,
                    attempts_made=job.attempts_made,
                    error=str(exc),
                )

        await self._settle(entry_id)

    async def _settle(self, entry_id) -> None:
        await self.client.xack(self.stream, self.group, entry_id)
        await self.client.xdel(self.stream, entry_id)

    async def _reclaim_pending(self) -> None:
        pending = await self.client.xpending_range(
            name=self.stream,
            groupname=self.group,
            min="-",
            max="+",
            count=10,
        )
        stale = [p["message_id"] for p in pending or [] if p["time_since_delivered"] >= self.reclaim_idle_ms]
        if not stale:
            return

        entries = await self.client.xclaim(
            name=self.stream,
            groupname=self.group,
            consumername=self.consumer,
            min_idle_time=self.reclaim_idle_ms,
            message_ids=stale,
        )
        logger.info("Reclaimed stale jobs", count=len(entries or []))
        for entry_id, fields in entries or []:
            if fields:
                await self.handle_entry(entry_id, fields)
