"""Fake push transport — records sent pushes for testing."""

from uuid import uuid4

from notifications.channel.push_port import PushTransport


class FakePushTransport(PushTransport):
    """Push transport that records messages in memory for test assertions.

    ``invalid_tokens`` lets a test mark individual tokens as rejected so
    multicast sends report partial failure.
    """

    def __init__(self):
        self.sent_pushes: list[dict] = []
        self.multicast_calls: list[dict] = []
        self.invalid_tokens: set[str] = set()
        self.should_succeed = True
        self.failure_reason = "Push service unavailable"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Push service unavailable"):
        """Configure the fake transport behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    @property
    def call_count(self) -> int:
        return len(self.sent_pushes) + len(self.multicast_calls)

    async def send(self, message: dict) -> str:
        if not self.should_succeed:
            raise ConnectionError(self.failure_reason)
        if message["token"] in self.invalid_tokens:
            raise ValueError(f"Registration token is not valid: {message['token']}")

        message_id = f"push-{uuid4().hex[:12]}"
        self.sent_pushes.append({"message_id": message_id, **message})
        return message_id

    async def send_each_for_multicast(self, message: dict) -> dict:
        if not self.should_succeed:
            raise ConnectionError(self.failure_reason)

        self.multicast_calls.append(message)
        responses = []
        for token in message["tokens"]:
            if token in self.invalid_tokens:
                responses.append({"success": False, "error": "Registration token is not valid"})
            else:
                responses.append({"success": True, "message_id": f"push-{uuid4().hex[:12]}"})

        success_count = sum(1 for r in responses if r["success"])
        return {
            "success_count": success_count,
            "failure_count": len(responses) - success_count,
            "responses": responses,
        }

    def reset(self):
        """Clear sent pushes (useful between tests)."""
        self.sent_pushes.clear()
        self.multicast_calls.clear()
        self.invalid_tokens.clear()
        self.should_succeed = True
        self.failure_reason = "Push service unavailable"
