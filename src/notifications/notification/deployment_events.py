"""Inbound event handler — Notifications reacts to Deployment events.

Deployment updates are in-app only.
"""

import structlog

from notifications.notification.helpers import create_notification
from notifications.notification.notification import NotificationScope, NotificationType
from notifications.notification.service import NotificationService
from shared.events.deployments import DeploymentCompleted, DeploymentCreated, DeploymentFailed

logger = structlog.get_logger(__name__)


class DeploymentEventsHandler:
    def __init__(self, service: NotificationService) -> None:
        self.service = service

    async def on_deployment_created(self, event: DeploymentCreated) -> None:
        logger.info("Handling deployment created event", deployment_id=event.deployment_id)

        await create_notification(
            self.service,
            DeploymentCreated.event_name,
            type=NotificationType.SYSTEM,
            scope=NotificationScope.DEPLOYMENT,
            user_id=event.user_id,
            subject="Deployment Started",
            message="Your deployment has been created and is being processed.",
            data={
                "deployment_id": event.deployment_id,
                "project_id": event.project_id,
                "environment": event.environment,
                "type": "deployment_started",
            },
        )

    async def on_deployment_completed(self, event: DeploymentCompleted) -> None:
        logger.info("Handling deployment completed event", deployment_id=event.deployment_id)

        view_at = f" View at: {event.deployment_url}" if event.deployment_url else ""
        await create_notification(
            self.service,
            DeploymentCompleted.event_name,
            type=NotificationType.SYSTEM,
            scope=NotificationScope.DEPLOYMENT,
            user_id=event.user_id,
            subject="Deployment Successful",
            message=f"Your deployment has been completed successfully!{view_at}",
            data={
                "deployment_id": event.deployment_id,
                "deployment_url": event.deployment_url,
                "project_id": event.project_id,
                "environment": event.environment,
                "type": "deployment_completed",
            },
        )

    async def on_deployment_failed(self, event: DeploymentFailed) -> None:
        logger.info("Handling deployment failed event", deployment_id=event.deployment_id)

        await create_notification(
            self.service,
            DeploymentFailed.event_name,
            type=NotificationType.SYSTEM,
            scope=NotificationScope.DEPLOYMENT,
            user_id=event.user_id,
            subject="Deployment Failed",
            message=f"Your deployment has failed. Error: {event.error_message}",
            data={
                "deployment_id": event.deployment_id,
                "error_message": event.error_message,
                "type": "deployment_failed",
            },
        )
