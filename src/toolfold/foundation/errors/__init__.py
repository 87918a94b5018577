"""Unified error handling for toolfold.

- ErrorCode/ToolError: Caller-facing structured errors rendered for the model
- BuildError: Construction-time defects raised to the integrator
- ToolCallError: Transport-side carrier for error responses
- Result/Ok/Err: Railway-oriented pipeline steps
"""

from .errors import (
    BuildError,
    ErrorCode,
    Severity,
    ToolCallError,
    ToolError,
    escape_xml,
    escape_xml_attr,
)
from .result import Err, Ok, Result

__all__ = [
    "BuildError", "ErrorCode", "Severity", "ToolCallError", "ToolError",
    "escape_xml", "escape_xml_attr",
    "Result", "Ok", "Err",
]
