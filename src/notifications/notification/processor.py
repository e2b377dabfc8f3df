"""Queue worker — delivers one notification per ``process-notification`` job.

Per job: load the record, claim it (``processing``), dispatch by type,
then record ``delivered``. Any exception records ``failed`` with the
error text and is re-raised once so the queue's retry policy applies.
The processor itself never retries a channel call.
"""

from typing import Any

import structlog
from protean.exceptions import ObjectNotFoundError

from notifications.channel.email_channel import EmailChannel
from notifications.channel.push_channel import PushChannel, stringify
from notifications.channel.sms_channel import SmsChannel
from notifications.notification.notification import Notification, NotificationType
from notifications.notification.repository import NotificationRepository
from notifications.queue.base import Job
from notifications.token.repository import UserTokenRepository

logger = structlog.get_logger(__name__)


class NotificationProcessor:
    def __init__(
        self,
        notifications: NotificationRepository,
        tokens: UserTokenRepository,
        email: EmailChannel,
        sms: SmsChannel,
        push: PushChannel,
    ) -> None:
        self.notifications = notifications
        self.tokens = tokens
        self.email = email
        self.sms = sms
        self.push = push

    async def __call__(self, job: Job) -> Any:
        return await self.process(job)

    async def process(self, job: Job) -> Any:
        notification_id = job.data.get("notification_id")
        logger.debug("Processing notification job", job_id=job.id, notification_id=notification_id)

        try:
            notification = await self.notifications.find(notification_id)
            if notification is None:
                raise ObjectNotFoundError({"_entity": f"Notification with ID {notification_id} not found"})

            # Redelivered job for a record that already reached its recipient
            if notification.is_delivered:
                logger.info(
                    "Notification already delivered, skipping",
                    job_id=job.id,
                    notification_id=notification_id,
                    status=notification.status,
                )
                return {"success": True, "skipped": True, "status": notification.status}

            notification.mark_processing()
            await self.notifications.add(notification)

            result = await self._dispatch(notification)

            # Reload: read tracking may have saved a newer version during the send
            notification = await self.notifications.get(notification_id)
            notification.mark_delivered()
            await self.notifications.add(notification)

            logger.info(
                "Notification job completed",
                job_id=job.id,
                notification_id=notification_id,
                type=notification.type,
                recipient=notification.recipient or notification.user_id,
            )
            return result
        except Exception as exc:
            logger.error(
                "Error processing notification",
                job_id=job.id,
                notification_id=notification_id,
                error=str(exc),
            )
            if not isinstance(exc, ObjectNotFoundError):
                await self._record_failure(notification_id, str(exc))
            raise

    async def _record_failure(self, notification_id: str, error: str) -> None:
        try:
            notification = await self.notifications.get(notification_id)
            notification.mark_failed(error)
            await self.notifications.add(notification)
        except Exception as exc:
            logger.error(
                "Error updating failed notification",
                notification_id=notification_id,
                error=str(exc),
            )

    async def _dispatch(self, notification: Notification) -> Any:
        if notification.type == NotificationType.EMAIL.value:
            return await self._send_email(notification)
        if notification.type == NotificationType.SMS.value:
            return await self._send_sms(notification)
        return await self._send_system(notification)

    async def _send_email(self, notification: Notification) -> dict:
        if not notification.recipient:
            raise ValueError("Email recipient is required for email notifications")
        return await self.email.send(
            to=notification.recipient,
            subject=notification.subject or "Notification",
            text=notification.message,
            template=notification.template,
            template_data=notification.data or {},
        )

    async def _send_sms(self, notification: Notification) -> dict:
        if not notification.recipient:
            raise ValueError("Phone number is required for SMS notifications")
        return await self.sms.send(to=notification.recipient, message=notification.message)

    async def _send_system(self, notification: Notification) -> dict:
        if not notification.user_id:
            raise ValueError("User ID is required for system notifications")

        user_token = await self.tokens.get_user_token(notification.user_id)
        if user_token is None or not user_token.tokens:
            logger.warning("No device tokens found for user", user_id=notification.user_id)
            return {"success": False, "message": "No device tokens found for user"}

        return await self.push.send_multicast(
            user_token.tokens,
            title=notification.subject or "System Notification",
            body=notification.message,
            data=stringify(notification.data),
        )
