"""Fake email transport — records sent mail for testing."""

from uuid import uuid4

from notifications.channel.email_port import EmailTransport


class FakeEmailTransport(EmailTransport):
    """Email transport that records messages in memory for test assertions."""

    def __init__(self):
        self.sent_emails: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Connection refused"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Connection refused"):
        """Configure the fake transport behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    async def send_mail(self, message: dict) -> dict:
        if not self.should_succeed:
            raise ConnectionError(self.failure_reason)

        message_id = f"<{uuid4().hex[:12]}@fake.smtp>"
        self.sent_emails.append({"message_id": message_id, **message})
        return {"message_id": message_id}

    def reset(self):
        """Clear sent emails (useful between tests)."""
        self.sent_emails.clear()
        self.should_succeed = True
        self.failure_reason = "Connection refused"
