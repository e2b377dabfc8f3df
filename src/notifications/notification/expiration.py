"""License expiration sweeps and the timer that runs them.

Two sweeps turn time into queued notifications:

- Warning sweep: active licenses expiring exactly 7 or 1 days from today
  (``[today+N 00:00, today+N+1 00:00)``) get an email and an in-app
  warning.
- Expired sweep: active licenses whose ``expires_at`` has passed are
  deactivated, persisted, and then the owner is told.

Both accept ``now`` so tests can pin the clock. ``ExpirationTimer``
fires them daily on an APScheduler ``AsyncIOScheduler``.
"""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from licensing.repository import UserLicenseRepository
from licensing.user_license import UserLicense
from notifications.config import Settings
from notifications.notification.helpers import create_notification, current_year
from notifications.notification.notification import NotificationScope, NotificationType
from notifications.notification.service import NotificationService

logger = structlog.get_logger(__name__)

WARNING_DAYS = (7, 1)


class LicenseExpirationScheduler:
    def __init__(
        self,
        user_licenses: UserLicenseRepository,
        service: NotificationService,
        settings: Settings,
    ) -> None:
        self.user_licenses = user_licenses
        self.service = service
        self.dashboard_url = settings.user_dashboard_url
        self.timezone = ZoneInfo(settings.scheduler_timezone)

    def _now(self, now: datetime | None) -> datetime:
        if now is None:
            return datetime.now(self.timezone)
        return now if now.tzinfo is not None else now.replace(tzinfo=self.timezone)

    def _renew_url(self, user_license: UserLicense) -> str:
        return f"{self.dashboard_url}/licenses/{user_license.id}/renew"

    # -------------------------------------------------------------------
    # Warning sweep
    # -------------------------------------------------------------------
    async def handle_license_expiration_warnings(self, now: datetime | None = None) -> dict[str, int]:
        """Run the 7-day and 1-day warning sweeps. Returns ``{"notified": n}``."""
        logger.info("Running license expiration check")
        notified = 0
        for days in WARNING_DAYS:
            try:
                notified += await self.send_expiration_warnings(days, now)
            except Exception as exc:
                logger.error("License expiration check failed", days=days, error=str(exc))
        logger.info("License expiration check completed", notified=notified)
        return {"notified": notified}

    async def send_expiration_warnings(self, days: int, now: datetime | None = None) -> int:
        """Warn owners of licenses expiring ``days`` from today; returns licenses notified."""
        today = self._now(now).replace(hour=0, minute=0, second=0, microsecond=0)
        start = today + timedelta(days=days)
        end = start + timedelta(days=1)

        expiring = await self.user_licenses.find_active_expiring_between(start, end)
        logger.info("Found expiring licenses", count=len(expiring), days=days)

        notified = 0
        for user_license in expiring:
            if await self._send_warning(user_license, days):
                notified += 1
        return notified

    async def _send_warning(self, user_license: UserLicense, days: int) -> bool:
        if user_license.owner is None or user_license.license is None:
            logger.warning("Skipping license with missing owner or license data", user_license_id=user_license.id)
            return False

        owner = user_license.owner
        license_name = user_license.license_title
        project_name = user_license.project_title
        if days == 1:
            subject = f"⚠️ License Expires Tomorrow - {license_name}"
            message = (
                f"Your license for {license_name} ({project_name}) expires tomorrow! "
                "Renew now to keep access to your deployment features."
            )
        else:
            subject = f"License Expiring Soon - {license_name}"
            message = (
                f"Your license for {license_name} ({project_name}) will expire in {days} days. "
                "Consider renewing to maintain uninterrupted access."
            )

        email = await create_notification(
            self.service,
            "license.expiring",
            type=NotificationType.EMAIL,
            scope=NotificationScope.LICENSES,
            user_id=owner.id,
            recipient=owner.email,
            subject=subject,
            message=message,
            data={
                "owner_name": owner.display_name,
                "license_name": license_name,
                "project_name": project_name,
                "expires_at": user_license.expires_at.isoformat() if user_license.expires_at else None,
                "days_remaining": days,
                "renew_url": self._renew_url(user_license),
                "dashboard_url": self.dashboard_url,
                "year": current_year(),
            },
        )
        system = await create_notification(
            self.service,
            "license.expiring",
            type=NotificationType.SYSTEM,
            scope=NotificationScope.LICENSES,
            user_id=owner.id,
            subject=subject,
            message=message,
            data={
                "user_license_id": user_license.id,
                "license_name": license_name,
                "project_name": project_name,
                "days_remaining": days,
                "type": "license_expiring",
            },
        )
        logger.info("Sent expiration warning", user_license_id=user_license.id, days=days)
        return email is not None and system is not None

    # -------------------------------------------------------------------
    # Expired sweep
    # -------------------------------------------------------------------
    async def handle_expired_licenses(self, now: datetime | None = None) -> dict[str, int]:
        """Deactivate lapsed licenses, then notify their owners.

        Deactivation is saved before any notification is attempted, so a
        failed notification never leaves the license active.
        """
        logger.info("Running expired licenses deactivation")
        deactivated = notified = 0
        try:
            expired = await self.user_licenses.find_active_expired_before(self._now(now))
        except Exception as exc:
            logger.error("Failed to load expired licenses", error=str(exc))
            return {"deactivated": 0, "notified": 0}

        logger.info("Found expired licenses", count=len(expired))
        for user_license in expired:
            try:
                user_license.active = False
                await self.user_licenses.save(user_license)
                deactivated += 1
                if await self._send_expired(user_license):
                    notified += 1
            except Exception as exc:
                logger.error("Failed to expire license", user_license_id=user_license.id, error=str(exc))

        logger.info("Expired licenses deactivation completed", deactivated=deactivated, notified=notified)
        return {"deactivated": deactivated, "notified": notified}

    async def _send_expired(self, user_license: UserLicense) -> bool:
        if user_license.owner is None or user_license.license is None:
            logger.warning("Skipping license with missing owner or license data", user_license_id=user_license.id)
            return False

        owner = user_license.owner
        license_name = user_license.license_title
        project_name = user_license.project_title

        email = await create_notification(
            self.service,
            "license.expired",
            type=NotificationType.EMAIL,
            scope=NotificationScope.LICENSES,
            user_id=owner.id,
            recipient=owner.email,
            subject=f"License Expired - {license_name}",
            message=(
                f"Your license for {license_name} ({project_name}) has expired. "
                "Renew now to restore access to your deployment features."
            ),
            data={
                "owner_name": owner.display_name,
                "license_name": license_name,
                "project_name": project_name,
                "expired_at": user_license.expires_at.isoformat() if user_license.expires_at else None,
                "status": "expired",
                "renew_url": self._renew_url(user_license),
                "dashboard_url": self.dashboard_url,
                "year": current_year(),
            },
        )
        system = await create_notification(
            self.service,
            "license.expired",
            type=NotificationType.SYSTEM,
            scope=NotificationScope.LICENSES,
            user_id=owner.id,
            subject="License Expired",
            message=f"Your license for {license_name} has expired.",
            data={
                "user_license_id": user_license.id,
                "license_name": license_name,
                "project_name": project_name,
                "type": "license_expired",
            },
        )
        logger.info("Sent expiration notice", user_license_id=user_license.id)
        return email is not None and system is not None


class ExpirationTimer:
    """Runs the sweeps daily on APScheduler cron triggers."""

    def __init__(self, sweeps: LicenseExpirationScheduler, settings: Settings) -> None:
        self.sweeps = sweeps
        self.warning_hour = settings.license_warning_hour
        self.expiry_hour = settings.license_expiry_hour
        self.timezone = settings.scheduler_timezone
        self.scheduler = AsyncIOScheduler(timezone=self.timezone)

    def start(self) -> None:
        if self.scheduler.running:
            logger.info("Expiration timer already running, skipping")
            return

        self.scheduler.add_job(
            self.sweeps.handle_license_expiration_warnings,
            trigger=CronTrigger(hour=self.warning_hour, minute=0, timezone=self.timezone),
            id="license_expiration_warnings",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self.scheduler.add_job(
            self.sweeps.handle_expired_licenses,
            trigger=CronTrigger(hour=self.expiry_hour, minute=0, timezone=self.timezone),
            id="expired_licenses",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self.scheduler.start()
        logger.info(
            "Expiration timer started",
            warning_hour=self.warning_hour,
            expiry_hour=self.expiry_hour,
        )

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Expiration timer stopped")
