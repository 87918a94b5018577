"""Wire responses and result shaping.

- ToolResponse/TextContent: Wire response model
- success/error/required/tool_error: Response helpers
- ResponseBuilder/response: Multi-block response composition
- Presenter: Validate-and-render collaborator attached to actions
- post_process_result: Handler value → ToolResponse
- apply_egress_guard: Byte budget for outgoing text
"""

from .builder import ActionSuggestion, ResponseBuilder, response
from .egress import MIN_PAYLOAD_BYTES, apply_egress_guard
from .postprocess import is_tool_response, post_process_result
from .presenter import Presenter, PresenterValidationError
from .response import (
    TextContent,
    ToolResponse,
    error,
    from_tool_error,
    required,
    success,
    to_json_text,
    tool_error,
)

__all__ = [
    "TextContent", "ToolResponse",
    "success", "error", "required", "tool_error", "from_tool_error", "to_json_text",
    "ActionSuggestion", "ResponseBuilder", "response",
    "Presenter", "PresenterValidationError",
    "is_tool_response", "post_process_result",
    "apply_egress_guard", "MIN_PAYLOAD_BYTES",
]
