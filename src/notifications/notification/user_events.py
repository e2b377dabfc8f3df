"""Inbound event handler — Notifications reacts to Users events.

Listens for UserCreated and sends the welcome pair (email + in-app).
"""

import structlog

from notifications.config import Settings
from notifications.notification.helpers import create_notification, current_year
from notifications.notification.notification import NotificationScope, NotificationType
from notifications.notification.service import NotificationService
from shared.events.users import UserCreated

logger = structlog.get_logger(__name__)


class UserEventsHandler:
    def __init__(self, service: NotificationService, settings: Settings) -> None:
        self.service = service
        self.dashboard_url = settings.user_dashboard_url

    async def on_user_created(self, event: UserCreated) -> None:
        logger.info("Handling user created event", user_id=event.user_id)

        await create_notification(
            self.service,
            UserCreated.event_name,
            type=NotificationType.EMAIL,
            scope=NotificationScope.WELCOME,
            user_id=event.user_id,
            recipient=event.email,
            subject="Welcome to Deploy Hub!",
            message=(
                f"Welcome {event.first_name}! Thank you for joining Deploy Hub. "
                "Start exploring and deploying your projects today."
            ),
            data={
                "first_name": event.first_name,
                "last_name": event.last_name,
                "email": event.email,
                "dashboard_url": self.dashboard_url,
                "year": current_year(),
            },
        )
        await create_notification(
            self.service,
            UserCreated.event_name,
            type=NotificationType.SYSTEM,
            scope=NotificationScope.WELCOME,
            user_id=event.user_id,
            subject="Welcome to Deploy Hub!",
            message=f"Welcome {event.first_name}! Your account has been created successfully.",
            data={"first_name": event.first_name, "type": "welcome"},
        )
