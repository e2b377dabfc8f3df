"""Event listener — subscribes the per-domain handlers to the event bus.

The routing table below is the full list of events that produce
notifications; anything else published on the bus is ignored here.
"""

import structlog

from notifications.config import Settings
from notifications.notification.deployment_events import DeploymentEventsHandler
from notifications.notification.moderation_events import ModerationEventsHandler
from notifications.notification.order_events import OrderEventsHandler
from notifications.notification.payment_events import PaymentEventsHandler
from notifications.notification.service import NotificationService
from notifications.notification.user_events import UserEventsHandler
from shared.event_bus import EventBus, EventHandler
from shared.events.deployments import DeploymentCompleted, DeploymentCreated, DeploymentFailed
from shared.events.moderation import (
    ProjectApproved,
    ProjectChangesApproved,
    ProjectChangesRejected,
    ProjectRejected,
    ProjectSubmittedForReview,
)
from shared.events.orders import (
    OrderCancelled,
    OrderCompleted,
    OrderCreated,
    OrderFailed,
    OrderRefunded,
    PaymentFailed,
    PaymentReceived,
)
from shared.events.users import UserCreated

logger = structlog.get_logger(__name__)


class NotificationEventListener:
    def __init__(self, service: NotificationService, settings: Settings) -> None:
        self.users = UserEventsHandler(service, settings)
        self.orders = OrderEventsHandler(service, settings)
        self.payments = PaymentEventsHandler(service, settings)
        self.deployments = DeploymentEventsHandler(service)
        self.moderation = ModerationEventsHandler(service, settings)

    def routes(self) -> dict[str, EventHandler]:
        return {
            UserCreated.event_name: self.users.on_user_created,
            OrderCreated.event_name: self.orders.on_order_created,
            OrderCompleted.event_name: self.orders.on_order_completed,
            OrderFailed.event_name: self.orders.on_order_failed,
            OrderCancelled.event_name: self.orders.on_order_cancelled,
            OrderRefunded.event_name: self.orders.on_order_refunded,
            PaymentReceived.event_name: self.payments.on_payment_received,
            PaymentFailed.event_name: self.payments.on_payment_failed,
            DeploymentCreated.event_name: self.deployments.on_deployment_created,
            DeploymentCompleted.event_name: self.deployments.on_deployment_completed,
            DeploymentFailed.event_name: self.deployments.on_deployment_failed,
            ProjectSubmittedForReview.event_name: self.moderation.on_submitted_for_review,
            ProjectApproved.event_name: self.moderation.on_decision,
            ProjectRejected.event_name: self.moderation.on_decision,
            ProjectChangesApproved.event_name: self.moderation.on_decision,
            ProjectChangesRejected.event_name: self.moderation.on_decision,
        }

    def register(self, bus: EventBus) -> None:
        routes = self.routes()
        for event_name, handler in routes.items():
            bus.on(event_name, handler)
        logger.info("Notification listener registered", events=len(routes))
