"""
Configuration — typed, validated settings loaded from environment/.env.

Uses pydantic-settings to:
  - Load from environment variables prefixed with STEPWISE_
  - Fall back to a .env file in the working directory
  - Validate values when the settings object is built

Only logging is configurable: the DSL itself has no runtime knobs.

    settings = StepwiseSettings()
    configure_structlog(settings.log_level, json=settings.log_json)
"""

from __future__ import annotations

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StepwiseSettings(BaseSettings):
    """
    Library settings.

    Load order (highest priority first):
      1. Environment variables (STEPWISE_LOG_LEVEL, STEPWISE_LOG_JSON)
      2. .env file
      3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="STEPWISE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(default="WARNING", description="Minimum level of emitted events")
    log_json: bool = Field(default=False, description="Render events as JSON lines")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Reject names the logging module doesn't know."""
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level
