"""UserToken aggregate: the device tokens registered for one user.

SYSTEM notifications are pushed to every token on the record. A token
appears at most once; registering it again refreshes its device
metadata instead of duplicating it.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, List, String, ValueObject
from pydantic import BaseModel

from notifications.domain import notifications
from notifications.notification.notification import NotificationType


def _utcnow() -> datetime:
    return datetime.now(UTC)


class DeviceDetails(BaseModel):
    """Client-supplied description of the device a token belongs to."""

    platform: str | None = None
    browser: str | None = None
    version: str | None = None
    device_name: str | None = None


@notifications.value_object(part_of="UserToken")
class DeviceInfo:
    token: String(max_length=512, required=True, sanitize=False)
    platform: String(max_length=50)
    browser: String(max_length=100)
    version: String(max_length=50)
    device_name: String(max_length=100)
    added_at: DateTime(default=_utcnow)
    last_active: DateTime(default=_utcnow)


@notifications.aggregate
class UserToken:
    user_id: Identifier(identifier=True, required=True)
    type: String(choices=NotificationType, default=NotificationType.SYSTEM.value)
    tokens: List(content_type=String(max_length=512, sanitize=False))
    device_info: List(content_type=ValueObject(DeviceInfo))
    platforms: List(content_type=String(max_length=50))  # Distinct device platforms, for filtering

    created_at: DateTime(default=_utcnow)
    updated_at: DateTime(default=_utcnow)

    # Lists are always reassigned so the aggregate registers the change
    def _set_devices(self, devices: list[DeviceInfo]) -> None:
        self.device_info = devices
        self.platforms = sorted({d.platform for d in devices if d.platform})

    def add_token(self, token: str, device: DeviceDetails | None = None) -> None:
        if token not in self.tokens:
            self.tokens = [*self.tokens, token]
        if device is not None:
            now = _utcnow()
            kept = [d for d in self.device_info if d.token != token]
            self._set_devices(
                [*kept, DeviceInfo(token=token, added_at=now, last_active=now, **device.model_dump())]
            )
        self.updated_at = _utcnow()

    def remove_tokens(self, tokens: list[str]) -> None:
        dropped = set(tokens)
        self.tokens = [t for t in self.tokens if t not in dropped]
        self._set_devices([d for d in self.device_info if d.token not in dropped])
        self.updated_at = _utcnow()

    def device_for(self, token: str) -> DeviceInfo | None:
        return next((d for d in self.device_info if d.token == token), None)
