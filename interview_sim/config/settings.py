"""
Application settings and configuration management.

Uses pydantic-settings for environment variable loading.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "interview-sim"
    debug: bool = False
    log_level: str = "INFO"

    # Remote question service
    question_service_url: str = "http://localhost:8000/api"
    request_timeout_seconds: float = Field(
        default=120.0, gt=0,
        description="Ceiling for a single remote call, in seconds"
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
