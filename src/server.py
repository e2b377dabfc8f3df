"""Notification worker runner for Deploy Hub.

Starts the job-queue consumer that delivers notifications and the
daily license-expiration timer, then runs until interrupted.

Usage:
    python src/server.py                    # Worker + expiration timer
    python src/server.py --queue redis      # Consume from Redis Streams
    python src/server.py --no-scheduler     # Worker only
"""

import argparse
import asyncio

import structlog

from notifications.config import get_settings
from notifications.context import build_context
from notifications.domain import notifications
from notifications.utils.logging import configure_logging

logger = structlog.get_logger(__name__)


async def run(queue_backend, scheduler):
    settings = get_settings()
    if queue_backend:
        settings = settings.model_copy(update={"queue_backend": queue_backend})

    configure_logging(settings.log_level, settings.log_json, env=settings.deployhub_env)
    notifications.init()

    with notifications.domain_context():
        context = build_context(settings)
        await context.start(scheduler=scheduler)
        try:
            await asyncio.Event().wait()
        finally:
            await context.stop()


def main():
    parser = argparse.ArgumentParser(description="Deploy Hub notification worker")
    parser.add_argument(
        "--queue",
        choices=["memory", "redis"],
        help="Job queue backend (default: QUEUE_BACKEND or memory)",
    )
    parser.add_argument(
        "--no-scheduler",
        action="store_true",
        help="Do not run the license expiration sweeps",
    )
    args = parser.parse_args()

    try:
        asyncio.run(run(args.queue, scheduler=not args.no_scheduler))
    except KeyboardInterrupt:
        logger.info("Worker interrupted, shutting down")


if __name__ == "__main__":
    main()
