"""Standardized error handling for tools.

Two families of failures exist:

- Construction errors (`BuildError`) are integrator defects detected while a
  builder is configured or compiled. They are raised synchronously and never
  reach a caller of the tool.
- Caller errors (unknown tool, missing discriminator, bad arguments) are
  described by a `ToolError` and returned to the caller as a normal
  ``isError`` response so the model can correct itself.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Literal, Self
from xml.sax.saxutils import escape

from pydantic import BaseModel, ConfigDict, Field, computed_field


class ErrorCode(StrEnum):
    """Standard error codes for caller-facing failures."""
    MISSING_DISCRIMINATOR = "MISSING_DISCRIMINATOR"
    UNKNOWN_ACTION = "UNKNOWN_ACTION"
    UNKNOWN_TOOL = "UNKNOWN_TOOL"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    RATE_LIMITED = "RATE_LIMITED"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    TIMEOUT = "TIMEOUT"
    SERVER_BUSY = "SERVER_BUSY"
    DEPRECATED = "DEPRECATED"


Severity = Literal["warning", "error", "critical"]

_ATTR_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def escape_xml(text: str) -> str:
    """Escape text content for embedding inside an XML element."""
    return escape(text)


def escape_xml_attr(text: str) -> str:
    """Escape a value for embedding inside a double-quoted XML attribute."""
    return escape(text, _ATTR_ENTITIES)


class ToolError(BaseModel):
    """Structured, self-healing error description for a caller.

    Rendered as a compact XML block so a model can parse the code, read the
    recovery hint and pick a valid alternative on its next call.

    Attributes:
        code: Machine-readable error code (free-form codes are allowed)
        message: Human-readable error message
        suggestion: Recovery instruction for the caller
        available_actions: Valid names the caller can choose from
        severity: ``warning`` responses are not flagged as errors
        details: Extra key/value context
        retry_after: Seconds the caller should wait before retrying
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    code: ErrorCode | str = ErrorCode.INTERNAL_ERROR
    message: Annotated[str, Field(min_length=1)]
    suggestion: str | None = None
    available_actions: tuple[str, ...] = ()
    severity: Severity = "error"
    details: dict[str, str] = Field(default_factory=dict)
    retry_after: float | None = None

    @classmethod
    def create(
        cls,
        code: ErrorCode | str,
        message: str,
        *,
        suggestion: str | None = None,
        available_actions: list[str] | tuple[str, ...] = (),
        severity: Severity = "error",
        details: dict[str, str] | None = None,
        retry_after: float | None = None,
    ) -> Self:
        """Factory method for construction."""
        return cls(
            code=code,
            message=message,
            suggestion=suggestion,
            available_actions=tuple(available_actions),
            severity=severity,
            details=details or {},
            retry_after=retry_after,
        )

    @computed_field
    @property
    def is_error(self) -> bool:
        """Warnings are advisory and flow through the success path."""
        return self.severity != "warning"

    def render(self) -> str:
        """Format error for LLM consumption."""
        parts = [
            f'<tool_error code="{escape_xml_attr(str(self.code))}" severity="{self.severity}">',
            f"<message>{escape_xml(self.message)}</message>",
        ]
        if self.suggestion:
            parts.append(f"<recovery>{escape_xml(self.suggestion)}</recovery>")
        if self.available_actions:
            parts.append("<available_actions>")
            parts.extend(f"  <action>{escape_xml(a)}</action>" for a in self.available_actions)
            parts.append("</available_actions>")
        if self.details:
            parts.append("<details>")
            parts.extend(
                f'  <detail key="{escape_xml_attr(k)}">{escape_xml(v)}</detail>'
                for k, v in self.details.items()
            )
            parts.append("</details>")
        if self.retry_after is not None:
            parts.append(f"<retry_after>{self.retry_after:g} seconds</retry_after>")
        parts.append("</tool_error>")
        return "\n".join(parts)

    __str__ = render


class BuildError(ValueError):
    """Construction-time defect in a tool definition.

    Raised synchronously while configuring or compiling a builder: no actions,
    duplicate keys, dotted names, conflicting schemas, mutation after build.
    """

    __slots__ = ("tool_name",)

    def __init__(self, message: str, *, tool_name: str | None = None) -> None:
        self.tool_name = tool_name
        super().__init__(message)


class ToolCallError(Exception):
    """Raised by transport adapters to surface an error response.

    Carries the rendered text of an ``isError`` response so SDKs that flag
    raised exceptions as error results keep the structured message intact.
    """

    __slots__ = ("text",)

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(text)
