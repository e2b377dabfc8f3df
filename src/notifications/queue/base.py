"""Work-queue contract shared by the notification producer and worker.

A queue carries named jobs with a JSON-serialisable payload. Producers
call :meth:`JobQueue.enqueue` and only wait for the acknowledgement;
the worker side registers one handler with :meth:`JobQueue.process`
and the queue invokes it for every job, applying the retry policy when
the handler raises.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Protocol
from uuid import uuid4

PROCESS_NOTIFICATION = "process-notification"


@dataclass(slots=True)
class RetryPolicy:
    """Exponential backoff: ``backoff_ms``, then doubled for every further attempt."""

    attempts: int = 3
    backoff_ms: int = 1000

    def delay_for(self, attempts_made: int) -> float:
        """Seconds to wait before the next attempt after ``attempts_made`` failures."""
        if attempts_made < 1:
            return 0.0
        return self.backoff_ms * (2 ** (attempts_made - 1)) / 1000

    def should_retry(self, attempts_made: int) -> bool:
        return attempts_made < self.attempts


@dataclass(slots=True)
class Job:
    name: str
    data: dict[str, Any]
    id: str = field(default_factory=lambda: uuid4().hex)
    attempts_made: int = 0
    failed_reason: str | None = None
    enqueued_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "data": self.data,
            "attempts_made": self.attempts_made,
            "failed_reason": self.failed_reason,
            "enqueued_at": self.enqueued_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Job":
        return cls(
            id=raw["id"],
            name=raw["name"],
            data=raw.get("data") or {},
            attempts_made=int(raw.get("attempts_made") or 0),
            failed_reason=raw.get("failed_reason"),
            enqueued_at=datetime.fromisoformat(raw["enqueued_at"]) if raw.get("enqueued_at") else datetime.now(UTC),
        )


JobHandler = Callable[[Job], Awaitable[Any]]


class JobQueue(Protocol):
    async def enqueue(self, name: str, data: dict[str, Any]) -> Job: ...

    def process(self, handler: JobHandler) -> None: ...

    async def start(self) -> None: ...

    async def stop(self) -> None: ...
