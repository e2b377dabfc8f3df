"""Event contracts published by the Orders module.

Order lifecycle events carry enough buyer and license-owner detail for
consumers to address notifications without loading the order.
"""

from typing import ClassVar

from shared.events.base import DomainEvent


class OrderCreated(DomainEvent):
    event_name: ClassVar[str] = "order.created"

    order_id: str
    order_reference: str | None = None
    amount: float
    currency: str = "USD"
    buyer_id: str
    buyer_email: str
    buyer_name: str
    license_name: str
    license_owner_id: str
    owner_email: str | None = None
    owner_name: str | None = None


class OrderCompleted(DomainEvent):
    """Payment cleared and the license was granted to the buyer."""

    event_name: ClassVar[str] = "order.completed"

    order_id: str
    order_reference: str | None = None
    amount: float
    currency: str = "USD"
    buyer_id: str
    buyer_email: str
    buyer_name: str
    license_name: str
    license_owner_id: str
    owner_email: str | None = None
    owner_name: str | None = None


class OrderFailed(DomainEvent):
    event_name: ClassVar[str] = "order.failed"

    order_id: str
    buyer_id: str
    buyer_email: str
    buyer_name: str
    license_name: str
    error_message: str


class OrderCancelled(DomainEvent):
    event_name: ClassVar[str] = "order.cancelled"

    order_id: str
    buyer_id: str
    buyer_email: str
    buyer_name: str
    license_name: str
    reason: str | None = None


class OrderRefunded(DomainEvent):
    event_name: ClassVar[str] = "order.refunded"

    order_id: str
    amount: float
    currency: str = "USD"
    buyer_id: str
    buyer_email: str
    buyer_name: str
    license_name: str
    license_owner_id: str
    owner_email: str | None = None


class PaymentReceived(DomainEvent):
    event_name: ClassVar[str] = "order.payment.received"

    order_id: str
    payment_id: str
    amount: float
    currency: str = "USD"
    buyer_id: str
    buyer_email: str
    license_name: str


class PaymentFailed(DomainEvent):
    event_name: ClassVar[str] = "order.payment.failed"

    order_id: str
    buyer_id: str
    buyer_email: str
    buyer_name: str
    license_name: str
    error_message: str
