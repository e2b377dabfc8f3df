"""Shared helpers for notification event handlers.

Handlers create several notifications per event. Each create goes
through :func:`create_notification`, which logs and absorbs its own
failure so that one bad create never skips the ones after it.
"""

from datetime import UTC, datetime
from typing import Any

import structlog

from notifications.notification.notification import Notification
from notifications.notification.service import NotificationService

logger = structlog.get_logger(__name__)


def current_year() -> int:
    return datetime.now(UTC).year


async def create_notification(
    service: NotificationService,
    source_event: str,
    **payload: Any,
) -> Notification | None:
    """Create one notification, returning ``None`` instead of raising on failure."""
    try:
        return await service.create(payload)
    except Exception as exc:
        logger.error(
            "Failed to create notification",
            source_event=source_event,
            user_id=payload.get("user_id"),
            type=str(payload.get("type")),
            error=str(exc),
        )
        return None
