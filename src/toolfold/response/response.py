"""Wire response model and response helpers.

Every dispatch ends in a `ToolResponse`: content blocks plus an ``isError``
flag. Handlers usually return plain data and let the post-processor wrap it;
the helpers cover explicit success and error replies. Blocks other than text
(images, resources) and extra wire fields such as ``structuredContent`` are
carried through as given.

Example:
    >>> success({"id": "p1"}).text
    '{\\n  "id": "p1"\\n}'
    >>> error("Project not found").is_error
    True
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, Literal, Self

import orjson
from pydantic import BaseModel, ConfigDict, Field

from toolfold.foundation.errors import ErrorCode, Severity, ToolError, escape_xml, escape_xml_attr


class TextContent(BaseModel):
    """Single text block of a response."""

    model_config = ConfigDict(frozen=True, extra="allow")

    type: Literal["text"] = "text"
    text: str


# Text blocks parse into TextContent; any other block stays a plain mapping
ContentBlock = Annotated[TextContent | dict[str, Any], Field(union_mode="left_to_right")]


class ToolResponse(BaseModel):
    """Wire response: content blocks plus the error flag (``isError`` on the wire)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    content: tuple[ContentBlock, ...]
    is_error: bool = Field(default=False, alias="isError")
    structured_content: dict[str, Any] | None = Field(default=None, alias="structuredContent")
    meta: dict[str, Any] | None = Field(default=None, alias="_meta")

    @classmethod
    def of_text(cls, *texts: str, is_error: bool = False) -> Self:
        return cls(content=tuple(TextContent(text=t) for t in texts), is_error=is_error)

    @property
    def text_blocks(self) -> list[TextContent]:
        return [c for c in self.content if isinstance(c, TextContent)]

    @property
    def text(self) -> str:
        """All text blocks joined by newlines."""
        return "\n".join(c.text for c in self.text_blocks)

    def to_wire(self) -> dict[str, Any]:
        wire: dict[str, Any] = {
            "content": [c.model_dump() if isinstance(c, TextContent) else dict(c) for c in self.content]
        }
        if self.is_error:
            wire["isError"] = True
        if self.structured_content is not None:
            wire["structuredContent"] = self.structured_content
        if self.meta is not None:
            wire["_meta"] = self.meta
        wire.update(self.model_extra or {})
        return wire


def _default(obj: Any) -> Any:
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if isinstance(obj, (set, frozenset)):
        return list(obj)
    return str(obj)


def to_json_text(data: Any) -> str:
    """Pretty-print any value as JSON (two-space indent)."""
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json")
    return orjson.dumps(data, default=_default, option=orjson.OPT_INDENT_2 | orjson.OPT_NON_STR_KEYS).decode()


def success(data: Any) -> ToolResponse:
    """Success response. Strings verbatim (empty becomes ``OK``), anything else as JSON."""
    return ToolResponse.of_text((data or "OK") if isinstance(data, str) else to_json_text(data))


def error(message: str, code: ErrorCode | str | None = None) -> ToolResponse:
    """Plain error response."""
    code_attr = f' code="{escape_xml_attr(str(code))}"' if code is not None else ""
    return ToolResponse.of_text(
        f"<tool_error{code_attr}>\n<message>{escape_xml(message)}</message>\n</tool_error>", is_error=True
    )


def required(field: str) -> ToolResponse:
    """Error response for a missing required field."""
    return tool_error(
        ErrorCode.MISSING_REQUIRED_FIELD,
        f'Required field "{field}" is missing.',
        suggestion=f'Provide the "{field}" parameter and retry.',
    )


def tool_error(
    code: ErrorCode | str,
    message: str,
    *,
    suggestion: str | None = None,
    available_actions: list[str] | tuple[str, ...] = (),
    severity: Severity = "error",
    details: Mapping[str, str] | None = None,
    retry_after: float | None = None,
) -> ToolResponse:
    """Self-healing error response with recovery instructions.

    ``warning`` severity is advisory: the response is not flagged as an error.

        >>> tool_error("ProjectNotFound", "No project 'p9'", available_actions=["projects.list"]).is_error
        True
    """
    err = ToolError.create(
        code,
        message,
        suggestion=suggestion,
        available_actions=available_actions,
        severity=severity,
        details=dict(details or {}),
        retry_after=retry_after,
    )
    return from_tool_error(err)


def from_tool_error(err: ToolError) -> ToolResponse:
    return ToolResponse.of_text(err.render(), is_error=err.is_error)
