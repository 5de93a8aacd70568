"""
Platform API configuration for collection watches.

Values load from ``APOLLO_*`` environment variables (or a ``.env`` file) and
can be overridden with keyword arguments by whatever wiring builds a watch.
"""

from __future__ import annotations

from typing import Any

from pydantic import SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError

PLATFORM_API_URL = "https://graphql.api.apollographql.com/api/graphql"
DEFAULT_CLIENT_NAME = "opcollection-watch"

# Collections larger than this get one snapshot and no polling.
MAX_COLLECTION_SIZE_FOR_POLLING = 100


class PlatformApiConfig(BaseSettings):
    """Credentials and timing for talking to the platform API."""

    model_config = SettingsConfigDict(
        env_prefix="APOLLO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    key: SecretStr
    poll_interval_seconds: float = 30.0
    timeout_seconds: float = 30.0  # per request
    platform_api_url: str = PLATFORM_API_URL
    client_name: str = DEFAULT_CLIENT_NAME

    @field_validator("poll_interval_seconds", "timeout_seconds")
    @classmethod
    def _require_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("must be > 0")
        return value

    @field_validator("platform_api_url")
    @classmethod
    def _require_http_endpoint(cls, value: str) -> str:
        if not value.startswith(("https://", "http://")):
            raise ValueError("must be an http(s) URL")
        return value


def load_platform_api_config(**overrides: Any) -> PlatformApiConfig:
    """Build config from the environment plus overrides, raising ConfigError on bad input."""
    try:
        return PlatformApiConfig(**overrides)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        raise ConfigError(f"Invalid platform API configuration: {problems}") from exc
