"""Tests for settings, channel wiring and logging configuration."""

import logging

import structlog
from notifications.channel import build_channels, build_email_transport
from notifications.channel.smtp import SmtpEmailTransport
from notifications.config import Settings, get_settings, reset_settings_cache
from notifications.context import build_queue
from notifications.queue.memory import InMemoryJobQueue
from notifications.queue.redis_streams import RedisStreamJobQueue
from notifications.utils.logging import configure_logging, get_log_level


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("SMTP_HOST", "SMTP_PORT", "QUEUE_BACKEND", "SMTP_FROM_EMAIL"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.smtp_from_email == "noreply@deployhub.com"
        assert settings.queue_backend == "memory"
        assert settings.queue_attempts == 3
        assert settings.queue_backoff_ms == 1000
        assert settings.smtp_configured is False

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("SMTP_HOST", "smtp.example.com")
        monkeypatch.setenv("SMTP_PORT", "2525")
        monkeypatch.setenv("QUEUE_BACKEND", "redis")
        reset_settings_cache()

        settings = get_settings()

        assert settings.smtp_host == "smtp.example.com"
        assert settings.smtp_port == 2525
        assert settings.smtp_configured is True
        assert settings.queue_backend == "redis"

    def test_settings_are_cached(self):
        assert get_settings() is get_settings()


class TestWiring:
    def test_mock_email_without_smtp(self, settings):
        assert build_email_transport(settings) is None
        assert build_channels(settings).email.is_mock

    def test_smtp_transport_when_configured(self, settings):
        configured = settings.model_copy(update={"smtp_host": "smtp.example.com", "smtp_port": 465, "smtp_use_ssl": True})

        transport = build_email_transport(configured)

        assert isinstance(transport, SmtpEmailTransport)
        assert transport.port == 465
        assert transport.use_ssl is True

    def test_memory_queue_by_default(self, settings):
        queue = build_queue(settings)
        assert isinstance(queue, InMemoryJobQueue)
        assert queue.retry_policy.attempts == settings.queue_attempts

    def test_redis_queue_when_selected(self, settings):
        queue = build_queue(settings.model_copy(update={"queue_backend": "redis", "redis_url": "redis://cache:6379/1"}))
        assert isinstance(queue, RedisStreamJobQueue)
        assert queue.url == "redis://cache:6379/1"


class TestLogging:
    def test_level_per_environment(self):
        assert get_log_level("production") == "INFO"
        assert get_log_level("development") == "DEBUG"
        assert get_log_level("test") == "WARNING"
        assert get_log_level("unknown") == "INFO"

    def test_override_wins(self):
        assert get_log_level("production", "debug") == "DEBUG"

    def test_configure_logging_sets_root_level(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        try:
            configure_logging(env="production")
            assert logging.getLogger().level == logging.INFO
            assert structlog.is_configured()
        finally:
            structlog.reset_defaults()
            root.handlers = handlers
            root.setLevel(level)
