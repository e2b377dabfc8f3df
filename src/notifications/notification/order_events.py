"""Inbound event handler — Notifications reacts to Order lifecycle events.

Buyers get order-scoped notifications; license owners get sale-scoped
ones. Each notification is created independently, so a failure for the
buyer still lets the owner's notifications through.
"""

import structlog

from notifications.config import Settings
from notifications.notification.helpers import create_notification, current_year
from notifications.notification.notification import NotificationScope, NotificationType
from notifications.notification.service import NotificationService
from shared.events.orders import (
    OrderCancelled,
    OrderCompleted,
    OrderCreated,
    OrderFailed,
    OrderRefunded,
)

logger = structlog.get_logger(__name__)


class OrderEventsHandler:
    def __init__(self, service: NotificationService, settings: Settings) -> None:
        self.service = service
        self.user_dashboard_url = settings.user_dashboard_url
        self.owner_dashboard_url = settings.owner_dashboard_url

    async def on_order_created(self, event: OrderCreated) -> None:
        """Confirm the order to the buyer and alert the owner."""
        logger.info("Handling order created event", order_id=event.order_id)

        await create_notification(
            self.service,
            OrderCreated.event_name,
            type=NotificationType.EMAIL,
            scope=NotificationScope.ORDER,
            user_id=event.buyer_id,
            recipient=event.buyer_email,
            subject=f"Order Confirmation - {event.license_name}",
            message=(
                f"Your order for {event.license_name} has been created. "
                "Please complete the payment to activate your license."
            ),
            data={
                "order_id": event.order_id,
                "order_reference": event.order_reference,
                "license_name": event.license_name,
                "amount": event.amount,
                "currency": event.currency,
                "buyer_name": event.buyer_name,
                "status": "pending",
                "dashboard_url": self.user_dashboard_url,
                "year": current_year(),
            },
        )
        await create_notification(
            self.service,
            OrderCreated.event_name,
            type=NotificationType.SYSTEM,
            scope=NotificationScope.SALE,
            user_id=event.license_owner_id,
            subject="New Order Received",
            message=f"You have a new order for {event.license_name} from {event.buyer_name}.",
            data={
                "order_id": event.order_id,
                "license_name": event.license_name,
                "buyer_name": event.buyer_name,
                "amount": event.amount,
                "currency": event.currency,
                "type": "new_order",
                "dashboard_url": self.owner_dashboard_url,
            },
        )

    async def on_order_completed(self, event: OrderCompleted) -> None:
        """Email and in-app notice to both the buyer and the license owner."""
        logger.info("Handling order completed event", order_id=event.order_id)

        await create_notification(
            self.service,
            OrderCompleted.event_name,
            type=NotificationType.EMAIL,
            scope=NotificationScope.ORDER,
            user_id=event.buyer_id,
            recipient=event.buyer_email,
            subject=f"Payment Successful - {event.license_name}",
            message=(
                f"Your payment for {event.license_name} has been processed successfully. "
                "Your license is now active."
            ),
            data={
                "order_id": event.order_id,
                "order_reference": event.order_reference,
                "license_name": event.license_name,
                "amount": event.amount,
                "currency": event.currency,
                "buyer_name": event.buyer_name,
                "status": "completed",
                "completed_at": event.timestamp.isoformat(),
                "dashboard_url": self.user_dashboard_url,
                "year": current_year(),
            },
        )
        await create_notification(
            self.service,
            OrderCompleted.event_name,
            type=NotificationType.SYSTEM,
            scope=NotificationScope.ORDER,
            user_id=event.buyer_id,
            subject="Purchase Complete",
            message=f"Your purchase of {event.license_name} is complete. You can now access your license.",
            data={
                "order_id": event.order_id,
                "license_name": event.license_name,
                "type": "purchase_complete",
            },
        )
        await create_notification(
            self.service,
            OrderCompleted.event_name,
            type=NotificationType.EMAIL,
            scope=NotificationScope.SALE,
            user_id=event.license_owner_id,
            recipient=event.owner_email,
            subject=f"New Sale - {event.license_name}",
            message=(
                f"Great news! {event.buyer_name} just purchased {event.license_name} "
                f"for {event.currency} {event.amount}."
            ),
            data={
                "order_id": event.order_id,
                "license_name": event.license_name,
                "buyer_name": event.buyer_name,
                "amount": event.amount,
                "currency": event.currency,
                "owner_name": event.owner_name,
                "status": "sale_completed",
                "dashboard_url": self.owner_dashboard_url,
                "year": current_year(),
            },
        )
        await create_notification(
            self.service,
            OrderCompleted.event_name,
            type=NotificationType.SYSTEM,
            scope=NotificationScope.SALE,
            user_id=event.license_owner_id,
            subject="New Sale!",
            message=f"{event.buyer_name} purchased {event.license_name} for {event.currency} {event.amount}",
            data={
                "order_id": event.order_id,
                "license_name": event.license_name,
                "amount": event.amount,
                "currency": event.currency,
                "type": "sale_completed",
            },
        )

    async def on_order_failed(self, event: OrderFailed) -> None:
        logger.info("Handling order failed event", order_id=event.order_id)

        await create_notification(
            self.service,
            OrderFailed.event_name,
            type=NotificationType.EMAIL,
            scope=NotificationScope.ORDER,
            user_id=event.buyer_id,
            recipient=event.buyer_email,
            subject=f"Payment Failed - {event.license_name}",
            message=(
                f"Unfortunately, your payment for {event.license_name} could not be processed. "
                "Please try again or contact support."
            ),
            data={
                "order_id": event.order_id,
                "license_name": event.license_name,
                "buyer_name": event.buyer_name,
                "error_message": event.error_message,
                "status": "failed",
                "dashboard_url": self.user_dashboard_url,
                "year": current_year(),
            },
        )
        await create_notification(
            self.service,
            OrderFailed.event_name,
            type=NotificationType.SYSTEM,
            scope=NotificationScope.ORDER,
            user_id=event.buyer_id,
            subject="Payment Failed",
            message=f"Your payment for {event.license_name} failed. Please try again.",
            data={
                "order_id": event.order_id,
                "license_name": event.license_name,
                "type": "payment_failed",
            },
        )

    async def on_order_cancelled(self, event: OrderCancelled) -> None:
        logger.info("Handling order cancelled event", order_id=event.order_id)

        reason = f" Reason: {event.reason}" if event.reason else ""
        await create_notification(
            self.service,
            OrderCancelled.event_name,
            type=NotificationType.EMAIL,
            scope=NotificationScope.ORDER,
            user_id=event.buyer_id,
            recipient=event.buyer_email,
            subject=f"Order Cancelled - {event.license_name}",
            message=f"Your order for {event.license_name} has been cancelled.{reason}",
            data={
                "order_id": event.order_id,
                "license_name": event.license_name,
                "buyer_name": event.buyer_name,
                "reason": event.reason,
                "status": "cancelled",
                "dashboard_url": self.user_dashboard_url,
                "year": current_year(),
            },
        )

    async def on_order_refunded(self, event: OrderRefunded) -> None:
        logger.info("Handling order refunded event", order_id=event.order_id)

        await create_notification(
            self.service,
            OrderRefunded.event_name,
            type=NotificationType.EMAIL,
            scope=NotificationScope.ORDER,
            user_id=event.buyer_id,
            recipient=event.buyer_email,
            subject=f"Refund Processed - {event.license_name}",
            message=(
                f"Your refund of {event.currency} {event.amount} for {event.license_name} has been processed."
            ),
            data={
                "order_id": event.order_id,
                "license_name": event.license_name,
                "amount": event.amount,
                "currency": event.currency,
                "buyer_name": event.buyer_name,
                "status": "refunded",
                "dashboard_url": self.user_dashboard_url,
                "year": current_year(),
            },
        )
        await create_notification(
            self.service,
            OrderRefunded.event_name,
            type=NotificationType.SYSTEM,
            scope=NotificationScope.SALE,
            user_id=event.license_owner_id,
            subject="Order Refunded",
            message=(
                f"An order for {event.license_name} has been refunded ({event.currency} {event.amount})"
            ),
            data={
                "order_id": event.order_id,
                "license_name": event.license_name,
                "amount": event.amount,
                "type": "refund_processed",
            },
        )
