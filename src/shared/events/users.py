"""Event contracts published by the Users module."""

from typing import ClassVar

from shared.events.base import DomainEvent


class UserCreated(DomainEvent):
    """A user account was registered."""

    event_name: ClassVar[str] = "user.created"

    user_id: str
    email: str
    first_name: str
    last_name: str | None = None
