"""Base class for cross-module domain events.

Events are immutable pydantic models. Each concrete event names the bus
topic it is published on through the ``event_name`` class attribute.
"""

from datetime import UTC, datetime
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field


class DomainEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    event_name: ClassVar[str]

    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
