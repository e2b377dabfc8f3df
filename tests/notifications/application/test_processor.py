"""Application tests for NotificationProcessor — one job, one delivery attempt."""

from unittest.mock import AsyncMock

import pytest
from notifications.channel.errors import DeliveryError
from notifications.notification.notification import NotificationStatus
from notifications.queue.base import PROCESS_NOTIFICATION, Job
from protean.exceptions import ObjectNotFoundError


def _job(notification_id):
    return Job(name=PROCESS_NOTIFICATION, data={"notification_id": notification_id})


async def _create(service, **overrides):
    payload = {
        "type": "EMAIL",
        "scope": "WELCOME",
        "user_id": "user-1",
        "recipient": "ada@example.com",
        "subject": "Welcome",
        "message": "Hello Ada",
        "data": {"first_name": "Ada"},
    }
    payload.update(overrides)
    return await service.create(payload)


# ---------------------------------------------------------------------------
# EMAIL
# ---------------------------------------------------------------------------
class TestEmailDelivery:
    async def test_delivers_and_marks_delivered(self, context, service, email_transport):
        notification = await _create(service)

        result = await context.processor(_job(notification.id))

        assert result["success"] is True
        stored = await context.notifications.get(notification.id)
        assert stored.status == NotificationStatus.DELIVERED.value
        assert stored.processed_at is not None
        assert len(email_transport.sent_emails) == 1
        sent = email_transport.sent_emails[0]
        assert sent["to"] == "ada@example.com"
        assert sent["subject"] == "Welcome"
        assert sent["text"] == "Hello Ada"
        assert "Welcome to Deploy Hub, Ada!" in sent["html"]

    async def test_missing_subject_uses_default(self, context, service, email_transport):
        notification = await _create(service, subject=None)
        await context.processor(_job(notification.id))
        assert email_transport.sent_emails[0]["subject"] == "Notification"

    async def test_missing_recipient_fails_notification(self, context, service, email_transport):
        notification = await _create(service, recipient=None)

        with pytest.raises(ValueError, match="Email recipient is required"):
            await context.processor(_job(notification.id))

        stored = await context.notifications.get(notification.id)
        assert stored.status == NotificationStatus.FAILED.value
        assert stored.error == "Email recipient is required for email notifications"
        assert email_transport.sent_emails == []

    async def test_transport_failure_records_error_and_reraises(self, context, service, email_transport):
        email_transport.configure(should_succeed=False, failure_reason="SMTP down")
        notification = await _create(service)

        with pytest.raises(DeliveryError):
            await context.processor(_job(notification.id))

        stored = await context.notifications.get(notification.id)
        assert stored.status == NotificationStatus.FAILED.value
        assert "SMTP down" in stored.error

    async def test_read_during_send_is_kept(self, context, service):
        notification = await _create(service)
        send = context.processor.email.send

        async def send_while_user_reads(**kwargs):
            await service.mark_as_read(notification.id)
            return await send(**kwargs)

        context.processor.email.send = send_while_user_reads

        await context.processor(_job(notification.id))

        stored = await context.notifications.get(notification.id)
        assert stored.status == NotificationStatus.DELIVERED.value
        assert stored.read is True


# ---------------------------------------------------------------------------
# SMS
# ---------------------------------------------------------------------------
class TestSmsDelivery:
    async def test_sms_delivered(self, context, service):
        notification = await _create(service, type="SMS", scope=None, recipient="+15550100")

        result = await context.processor(_job(notification.id))

        assert result["status"] == "sent"
        stored = await context.notifications.get(notification.id)
        assert stored.status == NotificationStatus.DELIVERED.value

    async def test_sms_without_phone_fails(self, context, service):
        notification = await _create(service, type="SMS", scope=None, recipient=None)

        with pytest.raises(ValueError, match="Phone number is required"):
            await context.processor(_job(notification.id))

        stored = await context.notifications.get(notification.id)
        assert stored.status == NotificationStatus.FAILED.value


# ---------------------------------------------------------------------------
# SYSTEM
# ---------------------------------------------------------------------------
class TestSystemDelivery:
    async def test_pushes_to_every_registered_token(self, context, service, push_transport):
        await context.tokens_service.create("user-1", "tok-a")
        await context.tokens_service.create("user-1", "tok-b")
        notification = await _create(
            service, type="SYSTEM", recipient=None, subject="Deploy", data={"deployment_id": 42}
        )

        result = await context.processor(_job(notification.id))

        assert result["success_count"] == 2
        call = push_transport.multicast_calls[0]
        assert call["tokens"] == ["tok-a", "tok-b"]
        assert call["notification"] == {"title": "Deploy", "body": "Hello Ada"}
        assert call["data"] == {"deployment_id": "42"}

    async def test_missing_subject_uses_system_title(self, context, service, push_transport):
        await context.tokens_service.create("user-1", "tok-a")
        notification = await _create(service, type="SYSTEM", recipient=None, subject=None)

        await context.processor(_job(notification.id))

        assert push_transport.multicast_calls[0]["notification"]["title"] == "System Notification"

    async def test_no_tokens_still_marks_delivered(self, context, service, push_transport):
        notification = await _create(service, type="SYSTEM", recipient=None)

        result = await context.processor(_job(notification.id))

        assert result == {"success": False, "message": "No device tokens found for user"}
        stored = await context.notifications.get(notification.id)
        assert stored.status == NotificationStatus.DELIVERED.value
        assert push_transport.call_count == 0

    async def test_push_provider_outage_does_not_fail_notification(self, context, service, push_transport):
        await context.tokens_service.create("user-1", "tok-a")
        push_transport.configure(should_succeed=False)
        notification = await _create(service, type="SYSTEM", recipient=None)

        result = await context.processor(_job(notification.id))

        assert result["success"] is False
        stored = await context.notifications.get(notification.id)
        assert stored.status == NotificationStatus.DELIVERED.value


# ---------------------------------------------------------------------------
# Redelivery and missing records
# ---------------------------------------------------------------------------
class TestRedelivery:
    async def test_missing_notification_raises_without_writes(self, context):
        context.notifications.add = AsyncMock()

        with pytest.raises(ObjectNotFoundError):
            await context.processor(_job("ghost"))

        context.notifications.add.assert_not_awaited()

    async def test_delivered_notification_is_not_sent_twice(self, context, service, email_transport):
        notification = await _create(service)
        await context.processor(_job(notification.id))

        result = await context.processor(_job(notification.id))

        assert result == {"success": True, "skipped": True, "status": "delivered"}
        assert len(email_transport.sent_emails) == 1

    async def test_failed_notification_is_attempted_again_on_retry(self, context, service, email_transport):
        email_transport.configure(should_succeed=False)
        notification = await _create(service)
        with pytest.raises(DeliveryError):
            await context.processor(_job(notification.id))

        email_transport.configure(should_succeed=True)
        await context.processor(_job(notification.id))

        stored = await context.notifications.get(notification.id)
        assert stored.status == NotificationStatus.DELIVERED.value
        assert stored.error is None
        assert len(email_transport.sent_emails) == 1

    async def test_processing_notification_is_dispatched_again(self, context, service, email_transport):
        notification = await _create(service)
        stored = await context.notifications.get(notification.id)
        stored.mark_processing()
        await context.notifications.add(stored)

        await context.processor(_job(notification.id))

        assert len(email_transport.sent_emails) == 1
        stored = await context.notifications.get(notification.id)
        assert stored.status == NotificationStatus.DELIVERED.value

    async def test_failure_while_recording_failure_keeps_original_error(self, context, service, email_transport):
        email_transport.configure(should_succeed=False, failure_reason="SMTP down")
        notification = await _create(service)
        context.notifications.get = AsyncMock(side_effect=RuntimeError("store offline"))

        with pytest.raises(DeliveryError, match="SMTP down"):
            await context.processor(_job(notification.id))
