"""Pydantic input models for the notification service.

Inputs are validated here before they reach the service; pydantic
errors are translated into protean ``ValidationError`` by
:func:`validate_input` so callers see a single validation signal.
"""

from datetime import UTC, datetime, time
from typing import Any, Literal

from protean.exceptions import ValidationError
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from notifications.notification.notification import (
    NotificationScope,
    NotificationStatus,
    NotificationType,
)

SORTABLE_FIELDS = ("created_at", "updated_at", "processed_at", "read_at", "status", "type", "scope")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------
class CreateNotification(BaseModel):
    model_config = ConfigDict(use_enum_values=True, extra="forbid")

    type: NotificationType = NotificationType.SYSTEM
    scope: NotificationScope | None = None
    user_id: str = Field(..., min_length=1)
    recipient: str | None = None
    subject: str | None = None
    message: str = Field(..., min_length=1)
    template: str | None = None
    data: dict[str, Any] | None = None

    @field_validator("message")
    @classmethod
    def _message_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("message must not be blank")
        return value


class UpdateNotification(BaseModel):
    model_config = ConfigDict(use_enum_values=True, extra="forbid")

    subject: str | None = None
    message: str | None = Field(default=None, min_length=1)
    recipient: str | None = None
    template: str | None = None
    data: dict[str, Any] | None = None
    read: bool | None = None

    @field_validator("message", "read")
    @classmethod
    def _not_null(cls, value, info):
        # Omit a field to leave it unchanged; null is not a value it can hold
        if value is None:
            raise ValueError(f"{info.field_name} must not be null")
        if isinstance(value, str) and not value.strip():
            raise ValueError(f"{info.field_name} must not be blank")
        return value

    @field_validator("data")
    @classmethod
    def _empty_data(cls, value):
        return {} if value is None else value


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
class NotificationQuery(BaseModel):
    model_config = ConfigDict(use_enum_values=True, extra="forbid")

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)

    user_id: str | None = None
    types: list[NotificationType] | None = None
    scopes: list[NotificationScope] | None = None
    read: bool | None = None
    status: NotificationStatus | None = None
    search: str | None = Field(default=None, max_length=100)
    template: str | None = None
    has_error: bool | None = None

    date_from: datetime | None = None
    date_to: datetime | None = None
    processed_after: datetime | None = None
    read_after: datetime | None = None

    sort_by: str = "created_at"
    sort_order: Literal["ASC", "DESC"] = "DESC"

    @field_validator("types", "scopes", mode="before")
    @classmethod
    def _split_csv(cls, value):
        # Accept "EMAIL,SYSTEM" as well as a list
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @field_validator("date_to", mode="before")
    @classmethod
    def _end_of_day(cls, value):
        # A bare date means "through the end of that day"
        if isinstance(value, str) and "T" not in value and len(value) == 10:
            return datetime.combine(datetime.fromisoformat(value).date(), time.max, tzinfo=UTC)
        return value

    @field_validator("sort_by")
    @classmethod
    def _sortable(cls, value: str) -> str:
        if value not in SORTABLE_FIELDS:
            raise ValueError(f"sort_by must be one of {', '.join(SORTABLE_FIELDS)}")
        return value


class PageMeta(BaseModel):
    total_items: int
    item_count: int
    items_per_page: int
    total_pages: int
    current_page: int


class Page(BaseModel):
    items: list[Any]
    meta: PageMeta


def validate_input(model_cls, payload):
    """Build ``model_cls`` from ``payload`` or raise a protean ``ValidationError``."""
    if isinstance(payload, model_cls):
        return payload
    try:
        return model_cls.model_validate(payload)
    except PydanticValidationError as exc:
        messages: dict[str, list[str]] = {}
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"]) or "_entity"
            messages.setdefault(field, []).append(error["msg"])
        raise ValidationError(messages) from exc
