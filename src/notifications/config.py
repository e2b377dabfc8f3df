"""Runtime settings for the notification pipeline, read from the environment."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration values loaded from environment variables (or ``.env``)."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    deployhub_env: str = Field(default="development", description="development | test | staging | production")
    log_level: str | None = Field(default=None, description="Overrides the per-environment default level")
    log_json: bool | None = Field(default=None, description="Render logs as JSON; defaults on in production")

    # SMTP. Email runs in mock mode unless both host and port are set.
    smtp_host: str | None = None
    smtp_port: int | None = None
    smtp_user: str | None = None
    smtp_password: str | None = None
    smtp_from_email: str = "noreply@deployhub.com"
    smtp_use_ssl: bool = False

    user_dashboard_url: str = "https://app.deployhub.com"
    owner_dashboard_url: str = "https://owner.deployhub.com"

    # Job queue
    queue_backend: Literal["memory", "redis"] = "memory"
    redis_url: str = "redis://127.0.0.1:6379/0"
    queue_attempts: int = Field(default=3, ge=1)
    queue_backoff_ms: int = Field(default=1000, ge=0)
    queue_concurrency: int = Field(default=1, ge=1)

    # Expiration sweeps (hour of day, scheduler timezone)
    license_warning_hour: int = Field(default=9, ge=0, le=23)
    license_expiry_hour: int = Field(default=0, ge=0, le=23)
    scheduler_timezone: str = "UTC"

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_host and self.smtp_port)


@lru_cache
def get_settings() -> Settings:
    return Settings()


def reset_settings_cache() -> None:
    """Forget the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
