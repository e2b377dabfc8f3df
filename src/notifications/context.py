"""Notifications context: explicit wiring of the dispatch pipeline.

Builds every collaborator leaves-first (stores, channels, queue, service,
processor, listener, sweeps) and hands back one object holding them.
Hosts and tests call :func:`build_context` inside an active
``notifications`` domain context; nothing is looked up from a global
container.
"""

from dataclasses import dataclass

import structlog

from licensing.repository import UserLicenseRepository
from notifications.channel import Channels, build_channels
from notifications.channel.email_port import EmailTransport
from notifications.channel.push_port import PushTransport
from notifications.config import Settings, get_settings
from notifications.notification.expiration import ExpirationTimer, LicenseExpirationScheduler
from notifications.notification.listener import NotificationEventListener
from notifications.notification.processor import NotificationProcessor
from notifications.notification.repository import NotificationRepository
from notifications.notification.service import NotificationService
from notifications.queue.base import JobQueue, RetryPolicy
from notifications.queue.memory import InMemoryJobQueue
from notifications.queue.redis_streams import RedisStreamJobQueue
from notifications.token.repository import UserTokenRepository
from notifications.token.service import TokensService
from shared.event_bus import EventBus

logger = structlog.get_logger(__name__)


@dataclass
class NotificationsContext:
    settings: Settings
    bus: EventBus
    notifications: NotificationRepository
    tokens: UserTokenRepository
    user_licenses: UserLicenseRepository
    channels: Channels
    queue: JobQueue
    service: NotificationService
    tokens_service: TokensService
    processor: NotificationProcessor
    listener: NotificationEventListener
    expiration: LicenseExpirationScheduler
    timer: ExpirationTimer

    async def start(self, scheduler: bool = True) -> None:
        await self.queue.start()
        if scheduler:
            self.timer.start()
        logger.info("Notifications context started", queue=type(self.queue).__name__, scheduler=scheduler)

    async def stop(self) -> None:
        self.timer.shutdown()
        await self.queue.stop()
        logger.info("Notifications context stopped")


def build_queue(settings: Settings) -> JobQueue:
    policy = RetryPolicy(attempts=settings.queue_attempts, backoff_ms=settings.queue_backoff_ms)
    if settings.queue_backend == "redis":
        return RedisStreamJobQueue(url=settings.redis_url, retry_policy=policy)
    return InMemoryJobQueue(retry_policy=policy, concurrency=settings.queue_concurrency)


def build_context(
    settings: Settings | None = None,
    *,
    bus: EventBus | None = None,
    queue: JobQueue | None = None,
    notifications: NotificationRepository | None = None,
    tokens: UserTokenRepository | None = None,
    user_licenses: UserLicenseRepository | None = None,
    email_transport: EmailTransport | None = None,
    push_transport: PushTransport | None = None,
    mock_delay: float = 0.1,
) -> NotificationsContext:
    """Wire the pipeline. Any collaborator passed in replaces the default."""
    settings = settings or get_settings()
    bus = bus if bus is not None else EventBus()
    notifications = notifications if notifications is not None else NotificationRepository()
    tokens = tokens if tokens is not None else UserTokenRepository()
    user_licenses = user_licenses if user_licenses is not None else UserLicenseRepository()
    channels = build_channels(
        settings,
        email_transport=email_transport,
        push_transport=push_transport,
        mock_delay=mock_delay,
    )
    queue = queue if queue is not None else build_queue(settings)

    service = NotificationService(notifications, queue)
    processor = NotificationProcessor(notifications, tokens, channels.email, channels.sms, channels.push)
    queue.process(processor)

    listener = NotificationEventListener(service, settings)
    listener.register(bus)

    expiration = LicenseExpirationScheduler(user_licenses, service, settings)

    return NotificationsContext(
        settings=settings,
        bus=bus,
        notifications=notifications,
        tokens=tokens,
        user_licenses=user_licenses,
        channels=channels,
        queue=queue,
        service=service,
        tokens_service=TokensService(tokens),
        processor=processor,
        listener=listener,
        expiration=expiration,
        timer=ExpirationTimer(expiration, settings),
    )
