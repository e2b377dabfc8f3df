"""Inbound event handler — Notifications reacts to payment events on orders."""

import structlog

from notifications.config import Settings
from notifications.notification.helpers import create_notification, current_year
from notifications.notification.notification import NotificationScope, NotificationType
from notifications.notification.service import NotificationService
from shared.events.orders import PaymentFailed, PaymentReceived

logger = structlog.get_logger(__name__)


class PaymentEventsHandler:
    def __init__(self, service: NotificationService, settings: Settings) -> None:
        self.service = service
        self.dashboard_url = settings.user_dashboard_url

    async def on_payment_received(self, event: PaymentReceived) -> None:
        logger.info("Handling payment received event", order_id=event.order_id, payment_id=event.payment_id)

        await create_notification(
            self.service,
            PaymentReceived.event_name,
            type=NotificationType.SYSTEM,
            scope=NotificationScope.PAYMENT,
            user_id=event.buyer_id,
            subject="Payment Received",
            message=f"We received your payment of {event.currency} {event.amount} for {event.license_name}.",
            data={
                "order_id": event.order_id,
                "payment_id": event.payment_id,
                "license_name": event.license_name,
                "amount": event.amount,
                "currency": event.currency,
                "type": "payment_received",
            },
        )

    async def on_payment_failed(self, event: PaymentFailed) -> None:
        logger.info("Handling payment failed event", order_id=event.order_id)

        await create_notification(
            self.service,
            PaymentFailed.event_name,
            type=NotificationType.EMAIL,
            scope=NotificationScope.PAYMENT,
            user_id=event.buyer_id,
            recipient=event.buyer_email,
            subject=f"Payment Failed - {event.license_name}",
            message=(
                f"We could not process your payment for {event.license_name}. "
                f"Error: {event.error_message}"
            ),
            data={
                "order_id": event.order_id,
                "license_name": event.license_name,
                "buyer_name": event.buyer_name,
                "error_message": event.error_message,
                "status": "failed",
                "dashboard_url": self.dashboard_url,
                "year": current_year(),
            },
        )
