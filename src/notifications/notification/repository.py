"""Notification persistence.

``NotificationRepository`` is the persistence collaborator the service
and processor depend on. It is an async facade over the ``notifications``
domain's repository for :class:`Notification`, so the configured protean
provider (in-memory by default) does the storing, filtering, ordering
and paging.
"""

import math
from datetime import UTC, datetime

import structlog
from protean.utils.globals import current_domain

from notifications.notification.notification import Notification
from notifications.notification.schemas import NotificationQuery

logger = structlog.get_logger(__name__)


def aware(value: datetime | None) -> datetime | None:
    """Normalise to UTC; naive datetimes are taken to be UTC already."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class NotificationRepository:
    """Async access to persisted notifications."""

    @property
    def _repo(self):
        return current_domain.repository_for(Notification)

    async def add(self, notification: Notification) -> Notification:
        return self._repo.add(notification)

    async def find(self, notification_id: str) -> Notification | None:
        return self._repo.get_or_none(notification_id)

    async def get(self, notification_id: str) -> Notification:
        return self._repo.get(notification_id)

    async def remove(self, notification: Notification) -> None:
        self._repo._dao.delete(notification)

    async def query(self, query: NotificationQuery) -> tuple[list[Notification], int]:
        queryset = self._repo._dao.query
        criteria = {}
        if query.user_id:
            criteria["user_id"] = query.user_id
        if query.types:
            criteria["type__in"] = list(query.types)
        if query.scopes:
            criteria["scope__in"] = list(query.scopes)
        if query.read is not None:
            criteria["read"] = query.read
        if query.status:
            criteria["status"] = query.status
        if query.template:
            criteria["template"] = query.template
        if query.has_error:
            criteria["error__isnull"] = False
        if query.search:
            criteria["message__icontains"] = query.search
        if query.date_from:
            criteria["created_at__gte"] = aware(query.date_from)
        if query.date_to:
            criteria["created_at__lte"] = aware(query.date_to)
        if query.processed_after:
            criteria["processed_at__gte"] = aware(query.processed_after)
        if query.read_after:
            criteria["read_at__gte"] = aware(query.read_after)

        direction = "-" if query.sort_order == "DESC" else ""
        results = (
            queryset.filter(**criteria)
            .order_by([f"{direction}{query.sort_by}"])
            .offset((query.page - 1) * query.limit)
            .limit(query.limit)
            .all()
        )
        return results.items, results.total

    def _unread(self, user_id: str, types: list[str] | None):
        criteria = {"user_id": user_id, "read": False}
        if types:
            criteria["type__in"] = list(types)
        return self._repo._dao.query.filter(**criteria)

    async def mark_all_read(self, user_id: str, types: list[str] | None, read_at: datetime) -> int:
        # No limit: the update touches every unread record, not one page
        return self._unread(user_id, types).limit(None).update(read=True, read_at=read_at, updated_at=read_at)

    async def count_unread(self, user_id: str, types: list[str] | None) -> int:
        return self._unread(user_id, types).count()

    async def count(self) -> int:
        return self._repo._dao.query.count()


def page_count(total_items: int, limit: int) -> int:
    return math.ceil(total_items / limit) if total_items else 0
