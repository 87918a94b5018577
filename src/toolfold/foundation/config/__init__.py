"""Configuration for toolfold."""

from .settings import (
    DescriptionMode,
    Exposition,
    LoggingSettings,
    ToolfoldSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "DescriptionMode",
    "Exposition",
    "LoggingSettings",
    "ToolfoldSettings",
    "clear_settings_cache",
    "get_settings",
]
