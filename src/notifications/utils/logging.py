"""Logging configuration for the notification pipeline."""

import logging
import sys
from typing import Any

import structlog

_ENV_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}


def get_log_level(env: str = "development", override: str | None = None) -> str:
    """Resolve the log level, preferring an explicit override over the environment default."""
    return (override or _ENV_LEVELS.get(env.lower(), "INFO")).upper()


def setup_stdlib_logging(level: str) -> None:
    """Route stdlib logging to stdout and quiet chatty libraries."""
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    logging.getLogger("apscheduler").setLevel(logging.WARNING)
    logging.getLogger("redis").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def setup_structlog(json: bool = False) -> None:
    """Configure structlog for structured logging."""
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(level: str | None = None, json: bool | None = None, env: str = "development") -> None:
    """Configure all logging for the worker process.

    ``json`` defaults to on for production and staging.
    """
    resolved_level = get_log_level(env, level)
    if json is None:
        json = env.lower() in ("production", "staging")
    setup_stdlib_logging(resolved_level)
    setup_structlog(json=json)


def add_context(**kwargs: Any) -> None:
    """Add context variables that will be included in all subsequent log messages."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all context variables."""
    structlog.contextvars.clear_contextvars()
