"""Notification aggregate: tracks one attempted communication with a user.

Each notification represents a single message sent to a user via a
specific channel type. Notifications are created by the notification
service (from domain events or the expiration sweeps) and moved through
their lifecycle by the queue processor.

State Machine (4 states):
    PENDING → PROCESSING → DELIVERED
    PENDING → PROCESSING → FAILED
    PENDING → FAILED
    PROCESSING → PROCESSING   (redelivery after a worker crash)
    FAILED → PROCESSING       (queue retry of a failed attempt)

DELIVERED is final.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import InvalidOperationError
from protean.fields import Boolean, DateTime, Dict, Identifier, String, Text

from notifications.domain import notifications


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class NotificationType(Enum):
    EMAIL = "EMAIL"
    SMS = "SMS"
    SYSTEM = "SYSTEM"


class NotificationScope(Enum):
    DEPLOYMENT = "DEPLOYMENT"
    PAYMENT = "PAYMENT"
    ORDER = "ORDER"
    SALE = "SALE"
    PROJECTS = "PROJECTS"
    LICENSES = "LICENSES"
    WELCOME = "WELCOME"
    ACCOUNT = "ACCOUNT"


class NotificationStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    DELIVERED = "delivered"
    FAILED = "failed"


SCOPE_TEMPLATES: dict[str, str] = {
    NotificationScope.DEPLOYMENT.value: "deployment-notification",
    NotificationScope.PAYMENT.value: "payment-notification",
    NotificationScope.ORDER.value: "order-notification",
    NotificationScope.SALE.value: "sale-notification",
    NotificationScope.PROJECTS.value: "project-notification",
    NotificationScope.LICENSES.value: "license-notification",
    NotificationScope.WELCOME.value: "welcome-notification",
    NotificationScope.ACCOUNT.value: "account-notification",
}


def template_for_scope(scope: str | None) -> str | None:
    """Return the template name mapped to ``scope``, if any."""
    if scope is None:
        return None
    return SCOPE_TEMPLATES.get(scope)


# ---------------------------------------------------------------------------
# State Machine
# ---------------------------------------------------------------------------
_VALID_TRANSITIONS = {
    NotificationStatus.PENDING: {
        NotificationStatus.PROCESSING,
        NotificationStatus.FAILED,
    },
    NotificationStatus.PROCESSING: {
        NotificationStatus.PROCESSING,  # Redelivered after a crash
        NotificationStatus.DELIVERED,
        NotificationStatus.FAILED,
    },
    NotificationStatus.DELIVERED: set(),  # Terminal
    NotificationStatus.FAILED: {
        NotificationStatus.PROCESSING,  # Retried by the queue
    },
}


def _utcnow() -> datetime:
    return datetime.now(UTC)


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------
@notifications.aggregate
class Notification:
    """A single notification addressed to a user via one channel type."""

    # Channel and business category
    type: String(choices=NotificationType, default=NotificationType.SYSTEM.value)
    scope: String(choices=NotificationScope)

    # Addressing
    user_id: Identifier(required=True)
    recipient: String(max_length=255, sanitize=False)  # Email address or phone number

    # Content
    subject: String(max_length=500, sanitize=False)
    message: Text(required=True, sanitize=False)
    template: String(max_length=100)
    data: Dict()

    # Delivery tracking
    status: String(choices=NotificationStatus, default=NotificationStatus.PENDING.value)
    error: Text(sanitize=False)
    processed_at: DateTime()

    # Read tracking
    read: Boolean(default=False)
    read_at: DateTime()

    # Timestamps
    created_at: DateTime(default=_utcnow)
    updated_at: DateTime(default=_utcnow)

    @property
    def is_delivered(self) -> bool:
        return self.status == NotificationStatus.DELIVERED.value

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status: NotificationStatus) -> None:
        current = NotificationStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidOperationError(
                {"status": [f"Cannot transition from {current.value} to {target_status.value}"]}
            )

    def mark_processing(self) -> None:
        """Claim the notification for delivery."""
        self._assert_can_transition(NotificationStatus.PROCESSING)
        self.status = NotificationStatus.PROCESSING.value
        self.updated_at = _utcnow()

    def mark_delivered(self, processed_at: datetime | None = None) -> None:
        """Record a successful hand-off to the channel."""
        self._assert_can_transition(NotificationStatus.DELIVERED)
        now = processed_at or _utcnow()
        self.status = NotificationStatus.DELIVERED.value
        self.error = None
        self.processed_at = now
        self.updated_at = now

    def mark_failed(self, error: str, processed_at: datetime | None = None) -> None:
        """Record a delivery failure and its error text."""
        self._assert_can_transition(NotificationStatus.FAILED)
        now = processed_at or _utcnow()
        self.status = NotificationStatus.FAILED.value
        self.error = error
        self.processed_at = now
        self.updated_at = now

    # -------------------------------------------------------------------
    # Read tracking
    # -------------------------------------------------------------------
    def set_read(self, read: bool, at: datetime | None = None) -> None:
        """Flip the read flag, stamping ``read_at`` only on an unread → read change."""
        if read == self.read:
            return
        self.read = read
        self.read_at = (at or _utcnow()) if read else None
        self.updated_at = _utcnow()
