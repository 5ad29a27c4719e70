"""
Client configuration using Pydantic settings.

Usage:
    from stream_client.config import get_settings
    settings = get_settings()
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Client settings loaded from environment variables and .env file.

    Required for authenticated calls:
        - STREAM_API_MASTER_KEY
        - STREAM_SITE_UUID (for any /sites/... endpoint)
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # App settings
    debug: bool = Field(default=False, validation_alias="DEBUG")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # Stream API
    api_url: str = Field(default="http://api.wp-stream.com", validation_alias="STREAM_API_URL")
    # Not part of request URLs until the API serves versioned paths.
    api_version: str = Field(default="v1", validation_alias="STREAM_API_VERSION")
    request_timeout: float = Field(default=30, validation_alias="STREAM_REQUEST_TIMEOUT")

    # Credentials
    api_key: Optional[str] = Field(default=None, validation_alias="STREAM_API_MASTER_KEY")
    site_uuid: Optional[str] = Field(default=None, validation_alias="STREAM_SITE_UUID")

    # Response cache
    cache_backend: Literal["memory", "redis"] = Field(
        default="memory", validation_alias="STREAM_CACHE_BACKEND"
    )
    cache_prefix: str = Field(default="wp_stream_", validation_alias="STREAM_CACHE_PREFIX")

    # Redis
    redis_host: str = Field(default="localhost", validation_alias="REDIS_HOST")
    redis_port: int = Field(default=6379, validation_alias="REDIS_PORT")
    redis_db: int = Field(default=0, validation_alias="REDIS_DB")
    redis_password: Optional[str] = Field(default=None, validation_alias="REDIS_PASSWORD")

    @property
    def redis_url(self) -> str:
        """Construct Redis URL from components."""
        auth = f":{self.redis_password}@" if self.redis_password else ""
        return f"redis://{auth}{self.redis_host}:{self.redis_port}/{self.redis_db}"

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("request_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"STREAM_REQUEST_TIMEOUT must be positive (got {v})")
        return v

    def validate_credentials(self) -> tuple[list[str], list[str]]:
        """
        Check which credentials are missing.

        Returns:
            Tuple of (errors, warnings) - errors disable every call, warnings
            disable the site-scoped endpoints only
        """
        errors = []
        warnings = []

        if not self.api_key:
            errors.append("STREAM_API_MASTER_KEY is required for authenticated requests")
        if not self.site_uuid:
            warnings.append("STREAM_SITE_UUID not set - record endpoints are disabled")

        return errors, warnings


@lru_cache
def get_settings() -> Settings:
    """Get cached client settings."""
    return Settings()


__all__ = ["Settings", "get_settings"]
