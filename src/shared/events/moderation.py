"""Event contracts published by project moderation.

All moderation events share one payload; the subclass only selects the
topic.
"""

from typing import Any, ClassVar, Literal

from shared.events.base import DomainEvent


class ModerationEvent(DomainEvent):
    project_id: str
    project_name: str
    action: str
    from_status: str | None = None
    to_status: str | None = None
    note: str | None = None
    performed_by: str
    performed_by_role: Literal["admin", "owner"] = "admin"
    pending_changes: dict[str, Any] | None = None

    owner_id: str
    owner_email: str
    owner_name: str | None = None


class ProjectSubmittedForReview(ModerationEvent):
    event_name: ClassVar[str] = "project.submitted_for_review"


class ProjectApproved(ModerationEvent):
    event_name: ClassVar[str] = "project.approved"


class ProjectRejected(ModerationEvent):
    event_name: ClassVar[str] = "project.rejected"


class ProjectChangesApproved(ModerationEvent):
    event_name: ClassVar[str] = "project.changes_approved"


class ProjectChangesRejected(ModerationEvent):
    event_name: ClassVar[str] = "project.changes_rejected"
