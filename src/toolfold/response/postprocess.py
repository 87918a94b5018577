"""Shape handler return values into wire responses."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .builder import ResponseBuilder
from .presenter import Presenter
from .response import ToolResponse, success


def is_tool_response(value: Any) -> bool:
    """A `ToolResponse`, or a mapping carrying a list ``content`` field."""
    return isinstance(value, ToolResponse) or (
        isinstance(value, Mapping) and isinstance(value.get("content"), list)
    )


def post_process_result(value: Any, presenter: Presenter | None = None, ctx: Any = None) -> ToolResponse:
    """Apply the fixed priority; the first match wins.

    1. Already a response: returned as is
    2. `ResponseBuilder`: built
    3. Action has a presenter: ``presenter.make(value, ctx).build()``
    4. Anything else: text (``OK`` for an empty string) or pretty JSON
    """
    if isinstance(value, ToolResponse):
        return value
    if is_tool_response(value):
        return ToolResponse.model_validate(value)
    if isinstance(value, ResponseBuilder):
        return value.build()
    if presenter is not None:
        return presenter.make(value, ctx).build()
    return success(value)
