"""Application settings and configuration management."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    DEFAULT_TIMESTAMP: str = Field(default="1970-01-01")
    INTERVIEW_ID_PREFIX: str = "INT-"
    PERFORMER_COUNT: int = Field(default=3, ge=0)

    UNKNOWN_METRIC_LABEL: str = "Unknown Metric"
    UNKNOWN_SOURCE_LABEL: str = "Interview"

    OPEN_TRIGGERED_RUN: bool = True

    model_config = SettingsConfigDict(env_file=".env", validate_assignment=True)


settings = Settings()
