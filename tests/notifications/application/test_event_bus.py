"""Tests for the in-process event bus."""

from shared.event_bus import EventBus
from shared.events.users import UserCreated


def _event():
    return UserCreated(user_id="u1", email="a@example.com", first_name="A")


class TestSubscriptions:
    def test_on_and_off(self):
        bus = EventBus()

        async def handler(event):
            pass

        bus.on("user.created", handler)
        assert bus.handlers_for("user.created") == [handler]

        bus.off("user.created", handler)
        assert bus.handlers_for("user.created") == []

    def test_off_unknown_handler_is_ignored(self):
        async def handler(event):
            pass

        EventBus().off("user.created", handler)


class TestPublish:
    async def test_publish_awaits_every_handler(self):
        bus = EventBus()
        received = []

        async def first(event):
            received.append(("first", event.user_id))

        async def second(event):
            received.append(("second", event.user_id))

        bus.on("user.created", first)
        bus.on("user.created", second)

        assert await bus.publish(_event()) == 2
        assert sorted(received) == [("first", "u1"), ("second", "u1")]

    async def test_failing_handler_does_not_affect_others(self):
        bus = EventBus()
        received = []

        async def broken(event):
            raise RuntimeError("boom")

        async def healthy(event):
            received.append(event.user_id)

        bus.on("user.created", broken)
        bus.on("user.created", healthy)

        await bus.publish(_event())

        assert received == ["u1"]

    async def test_explicit_event_name(self):
        bus = EventBus()
        received = []

        async def handler(event):
            received.append(event)

        bus.on("custom.topic", handler)

        await bus.publish(_event(), event_name="custom.topic")

        assert len(received) == 1


class TestEmit:
    async def test_emit_is_fire_and_forget(self):
        bus = EventBus()
        received = []

        async def handler(event):
            received.append(event.user_id)

        bus.on("user.created", handler)

        scheduled = bus.emit(_event())
        assert scheduled == 1
        assert received == []

        await bus.drain()
        assert received == ["u1"]

    async def test_emit_without_handlers(self):
        assert EventBus().emit(_event()) == 0

    def test_emit_outside_event_loop_runs_handlers_inline(self):
        bus = EventBus()
        received = []

        async def handler(event):
            received.append(event.user_id)

        bus.on("user.created", handler)

        assert bus.emit(_event()) == 1
        assert received == ["u1"]
