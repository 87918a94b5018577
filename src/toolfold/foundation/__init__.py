"""Foundation layer: configuration, errors and logging."""

from .config import ToolfoldSettings, clear_settings_cache, get_settings
from .errors import BuildError, Err, ErrorCode, Ok, Result, ToolCallError, ToolError
from .logging import configure_logging, get_logger

__all__ = [
    "ToolfoldSettings", "get_settings", "clear_settings_cache",
    "BuildError", "ErrorCode", "ToolCallError", "ToolError", "Result", "Ok", "Err",
    "configure_logging", "get_logger",
]
