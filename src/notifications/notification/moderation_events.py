"""Inbound event handler — Notifications reacts to project moderation events.

Moderation decisions reach the project owner by email and in-app;
a submission acknowledgement is in-app only.
"""

import structlog

from notifications.config import Settings
from notifications.notification.helpers import create_notification, current_year
from notifications.notification.notification import NotificationScope, NotificationType
from notifications.notification.service import NotificationService
from shared.events.moderation import (
    ModerationEvent,
    ProjectApproved,
    ProjectChangesApproved,
    ProjectChangesRejected,
    ProjectRejected,
    ProjectSubmittedForReview,
)

logger = structlog.get_logger(__name__)

# event name -> (title, message format)
_DECISIONS = {
    ProjectApproved.event_name: (
        "Project Approved",
        "Your project {project_name} has been approved and is now live on the marketplace.",
    ),
    ProjectRejected.event_name: (
        "Project Rejected",
        "Your project {project_name} was not approved.",
    ),
    ProjectChangesApproved.event_name: (
        "Changes Approved",
        "The changes to {project_name} have been approved and published.",
    ),
    ProjectChangesRejected.event_name: (
        "Changes Rejected",
        "The changes to {project_name} were not approved.",
    ),
}


class ModerationEventsHandler:
    def __init__(self, service: NotificationService, settings: Settings) -> None:
        self.service = service
        self.dashboard_url = settings.owner_dashboard_url

    async def on_submitted_for_review(self, event: ProjectSubmittedForReview) -> None:
        logger.info("Handling project submitted event", project_id=event.project_id)

        await create_notification(
            self.service,
            ProjectSubmittedForReview.event_name,
            type=NotificationType.SYSTEM,
            scope=NotificationScope.PROJECTS,
            user_id=event.owner_id,
            subject="Project Submitted for Review",
            message=f"Your project {event.project_name} has been submitted for review.",
            data={
                "project_id": event.project_id,
                "project_name": event.project_name,
                "type": "submitted_for_review",
            },
        )

    async def on_decision(self, event: ModerationEvent) -> None:
        """Approved / rejected outcomes, for the project or for pending changes."""
        logger.info("Handling moderation decision", project_id=event.project_id, event_name=event.event_name)

        title, template = _DECISIONS[event.event_name]
        message = template.format(project_name=event.project_name)
        if event.note:
            message = f"{message} Note: {event.note}"

        await create_notification(
            self.service,
            event.event_name,
            type=NotificationType.EMAIL,
            scope=NotificationScope.PROJECTS,
            user_id=event.owner_id,
            recipient=event.owner_email,
            subject=f"{title} - {event.project_name}",
            message=message,
            data={
                "project_id": event.project_id,
                "project_name": event.project_name,
                "owner_name": event.owner_name,
                "title": title,
                "message": message,
                "note": event.note,
                "action": event.action,
                "dashboard_url": self.dashboard_url,
                "year": current_year(),
            },
        )
        await create_notification(
            self.service,
            event.event_name,
            type=NotificationType.SYSTEM,
            scope=NotificationScope.PROJECTS,
            user_id=event.owner_id,
            subject=title,
            message=message,
            data={
                "project_id": event.project_id,
                "project_name": event.project_name,
                "type": event.action,
            },
        )
