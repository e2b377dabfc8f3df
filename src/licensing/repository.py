"""User-license persistence used by the expiration sweeps."""

from datetime import datetime

from protean.utils.globals import current_domain

from licensing.user_license import UserLicense
from notifications.notification.repository import aware


class UserLicenseRepository:
    @property
    def _repo(self):
        return current_domain.repository_for(UserLicense)

    async def save(self, user_license: UserLicense) -> UserLicense:
        # Stored bounds are compared against UTC sweep windows
        if user_license.expires_at is not None:
            user_license.expires_at = aware(user_license.expires_at)
        return self._repo.add(user_license)

    async def get(self, user_license_id: str) -> UserLicense:
        return self._repo.get(user_license_id)

    def _active(self, **criteria) -> list[UserLicense]:
        return (
            self._repo._dao.query.filter(active=True, **criteria)
            .order_by(["expires_at"])
            .limit(None)
            .all()
            .items
        )

    async def find_active_expiring_between(self, start: datetime, end: datetime) -> list[UserLicense]:
        """Active licenses with ``start <= expires_at < end``."""
        return self._active(expires_at__gte=aware(start), expires_at__lt=aware(end))

    async def find_active_expired_before(self, moment: datetime) -> list[UserLicense]:
        return self._active(expires_at__lt=aware(moment))
