"""Environment-based configuration using pydantic-settings.

Provides type-safe, validated defaults for exposition and logging, read from
environment variables with the ``TOOLFOLD_`` prefix or a ``.env`` file.

Example:
    >>> from toolfold.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.exposition
    'flat'
    >>> settings.logging.level
    'INFO'

    # Or with environment variables:
    # TOOLFOLD_EXPOSITION=grouped
    # TOOLFOLD_ACTION_SEPARATOR=.
    # TOOLFOLD_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

Exposition = Literal["flat", "grouped"]
DescriptionMode = Literal["plain", "dense"]


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TOOLFOLD_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "text"] = "text"
    include_timestamps: bool = True

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class ToolfoldSettings(BaseSettings):
    """Root settings for toolfold.

    Example environment variables:
        TOOLFOLD_EXPOSITION=grouped
        TOOLFOLD_ACTION_SEPARATOR=_
        TOOLFOLD_DISCRIMINATOR=operation
        TOOLFOLD_DESCRIPTION_MODE=dense
        TOOLFOLD_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="TOOLFOLD_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    debug: bool = Field(default=False, description="Log at DEBUG unless a level is given explicitly")
    exposition: Exposition = Field(default="flat", description="Default exposition strategy for servers")
    action_separator: str = Field(default="_", min_length=1, description="Separator between tool and action in flat names")
    discriminator: str = Field(default="action", min_length=1, description="Default discriminator field for new builders")
    description_mode: DescriptionMode = Field(default="plain", description="Default tool description strategy")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("exposition", "description_mode", mode="before")
    @classmethod
    def _lowercase(cls, v: str) -> str:
        return v.lower() if isinstance(v, str) else v


@lru_cache(maxsize=1)
def get_settings() -> ToolfoldSettings:
    """Get the global settings instance (cached)."""
    return ToolfoldSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
