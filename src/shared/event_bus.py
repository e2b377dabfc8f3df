"""In-process event bus connecting business modules to their consumers.

Handlers are kept in a registry of callback lists keyed by event name.
``emit`` schedules every handler as its own task and returns at once
(called outside a running event loop it runs them to completion instead);
``publish`` awaits them all. Either way one handler failing is logged
and never reaches the emitter or the other handlers.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import structlog

from shared.events.base import DomainEvent

logger = structlog.get_logger(__name__)

EventHandler = Callable[[Any], Awaitable[None]]


class EventBus:
    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = {}
        self._pending: set[asyncio.Task] = set()

    def on(self, event_name: str, handler: EventHandler) -> None:
        self._handlers.setdefault(event_name, []).append(handler)

    def off(self, event_name: str, handler: EventHandler) -> None:
        handlers = self._handlers.get(event_name, [])
        if handler in handlers:
            handlers.remove(handler)

    def handlers_for(self, event_name: str) -> list[EventHandler]:
        return list(self._handlers.get(event_name, []))

    def emit(self, event: DomainEvent, event_name: str | None = None) -> int:
        """Fire-and-forget dispatch. Returns the number of handlers scheduled."""
        name = event_name or event.event_name
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            # No loop to schedule on: dispatch synchronously.
            return asyncio.run(self.publish(event, name))

        handlers = self.handlers_for(name)
        for handler in handlers:
            task = asyncio.create_task(self._invoke(name, handler, event))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
        return len(handlers)

    async def publish(self, event: DomainEvent, event_name: str | None = None) -> int:
        """Dispatch and wait until every handler has finished."""
        name = event_name or event.event_name
        handlers = self.handlers_for(name)
        await asyncio.gather(*(self._invoke(name, handler, event) for handler in handlers))
        return len(handlers)

    async def drain(self) -> None:
        """Wait for handlers scheduled by ``emit`` to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def _invoke(self, event_name: str, handler: EventHandler, event: Any) -> None:
        try:
            await handler(event)
        except Exception as exc:
            logger.error(
                "Event handler failed",
                event_name=event_name,
                handler=getattr(handler, "__qualname__", repr(handler)),
                error=str(exc),
            )
