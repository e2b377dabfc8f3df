"""Notification service — the single entry point for creating and managing notifications.

Creation persists the record as ``pending`` and enqueues exactly one
``process-notification`` job; delivery happens later in the processor.
The remaining operations are read-tracking and housekeeping over the
repository.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any

import structlog

from notifications.notification.notification import Notification, template_for_scope
from notifications.notification.repository import NotificationRepository, page_count
from notifications.notification.schemas import (
    CreateNotification,
    NotificationQuery,
    Page,
    PageMeta,
    UpdateNotification,
    validate_input,
)
from notifications.queue.base import PROCESS_NOTIFICATION, JobQueue

logger = structlog.get_logger(__name__)


def _type_values(types) -> list[str] | None:
    if not types:
        return None
    return [t.value if isinstance(t, Enum) else t for t in types]


class NotificationService:
    def __init__(self, repository: NotificationRepository, queue: JobQueue) -> None:
        self.repository = repository
        self.queue = queue

    async def create(self, payload: CreateNotification | dict[str, Any]) -> Notification:
        """Persist a new pending notification and queue it for delivery.

        Raises:
            ValidationError: the payload is missing ``user_id`` or ``message``,
                or carries an unknown type or scope.
        """
        command = validate_input(CreateNotification, payload)

        template = command.template or template_for_scope(command.scope)
        notification = Notification(
            type=command.type,
            scope=command.scope,
            user_id=command.user_id,
            recipient=command.recipient,
            subject=command.subject,
            message=command.message,
            template=template,
            data=command.data or {},
        )
        await self.repository.add(notification)

        # Not atomic with the insert; a failed enqueue leaves a pending orphan.
        await self.queue.enqueue(PROCESS_NOTIFICATION, {"notification_id": notification.id})

        logger.info(
            "Notification created",
            notification_id=notification.id,
            user_id=notification.user_id,
            type=notification.type,
            scope=notification.scope,
        )
        return notification

    async def find_all(self, query: NotificationQuery | dict[str, Any] | None = None) -> Page:
        query = validate_input(NotificationQuery, query or {})
        items, total = await self.repository.query(query)
        return Page(
            items=items,
            meta=PageMeta(
                total_items=total,
                item_count=len(items),
                items_per_page=query.limit,
                total_pages=page_count(total, query.limit),
                current_page=query.page,
            ),
        )

    async def find_one(self, notification_id: str) -> Notification:
        return await self.repository.get(notification_id)

    async def update(self, notification_id: str, patch: UpdateNotification | dict[str, Any]) -> Notification:
        """Merge the provided fields into the notification.

        ``read`` going from false to true stamps ``read_at``; true to false
        clears it; repeating the current value leaves ``read_at`` alone.
        """
        changes = validate_input(UpdateNotification, patch).model_dump(exclude_unset=True)
        notification = await self.repository.get(notification_id)

        read = changes.pop("read", None)
        for field, value in changes.items():
            setattr(notification, field, value)
        if read is not None:
            notification.set_read(read)
        notification.updated_at = datetime.now(UTC)

        await self.repository.add(notification)
        return notification

    async def mark_as_read(self, notification_id: str) -> Notification:
        return await self.update(notification_id, {"read": True})

    async def mark_all_as_read(self, user_id: str, types: list[str] | None = None) -> dict[str, int]:
        affected = await self.repository.mark_all_read(user_id, _type_values(types), datetime.now(UTC))
        logger.info("Notifications marked as read", user_id=user_id, affected=affected)
        return {"affected": affected}

    async def count_unread(self, user_id: str, types: list[str] | None = None) -> dict[str, int]:
        return {"count": await self.repository.count_unread(user_id, _type_values(types))}

    async def remove(self, notification_id: str) -> dict[str, bool]:
        notification = await self.repository.get(notification_id)
        await self.repository.remove(notification)
        logger.info("Notification removed", notification_id=notification_id)
        return {"deleted": True}
