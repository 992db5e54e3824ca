"""
Application settings.

Values come from ``FORECAST_*`` environment variables or a ``.env`` file in
the working directory, e.g. ``FORECAST_API_KEY=...``.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from forecast_client.schemas import Lang, Units

DEFAULT_BASE_URL = "https://api.darksky.net/forecast"


class Settings(BaseSettings):
    """Client configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FORECAST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "forecast-client"
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    api_key: SecretStr | None = None
    base_url: str = DEFAULT_BASE_URL
    timeout: float = Field(default=30, gt=0)
    max_retries: int = Field(default=4, ge=0)
    backoff_factor: float = Field(default=2, ge=0)

    units: Units | None = None
    lang: Lang | None = None

    # Default location for the CLI (Portland, OR)
    lat: float = Field(default=45.5, ge=-90, le=90)
    lon: float = Field(default=-122.6, ge=-180, le=180)


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, read once."""
    return Settings()
