"""Byte-level payload limit for responses leaving a tool.

The last line of defense against results too large for the model's context:
when the UTF-8 size of all text blocks exceeds the budget, text is cut at a
character boundary and a notice tells the model to page or filter instead.
Non-text blocks and extra wire fields are kept as they are.
"""

from __future__ import annotations

from .response import TextContent, ToolResponse

MIN_PAYLOAD_BYTES = 1024

_NOTICE = (
    "\n\n[SYSTEM INTERVENTION: Payload truncated at {limit} to prevent memory crash. "
    "You MUST use pagination (limit/offset) or filters to retrieve smaller result sets.]"
)


def payload_limit(max_bytes: int) -> int:
    """Effective limit: never below `MIN_PAYLOAD_BYTES`."""
    return max(MIN_PAYLOAD_BYTES, int(max_bytes))


def format_bytes(n: int) -> str:
    if n >= 1024 * 1024:
        return f"{n / (1024 * 1024):.1f}MB"
    if n >= 1024:
        return f"{n / 1024:.0f}KB"
    return f"{n}B"


def truncate_utf8(text: str, max_bytes: int) -> str:
    """Cut ``text`` to at most ``max_bytes`` encoded bytes without splitting a character."""
    encoded = text.encode()
    if len(encoded) <= max_bytes:
        return text
    return encoded[:max_bytes].decode(errors="ignore")


def apply_egress_guard(response: ToolResponse, max_bytes: int) -> ToolResponse:
    """Return ``response`` itself when within budget, else a truncated copy.

    Text blocks that fit are kept whole; the first one that does not is cut
    and carries the notice; later text blocks are dropped. The error flag is
    preserved.
    """
    limit = payload_limit(max_bytes)
    if sum(len(b.text.encode()) for b in response.text_blocks) <= limit:
        return response

    notice = _NOTICE.format(limit=format_bytes(limit))
    remaining = limit - len(notice.encode())
    content: list[TextContent | dict] = []
    truncated = False
    for block in response.content:
        if not isinstance(block, TextContent):
            content.append(block)
            continue
        if truncated:
            continue
        size = len(block.text.encode())
        if size <= remaining:
            content.append(block)
            remaining -= size
        else:
            content.append(block.model_copy(update={"text": truncate_utf8(block.text, remaining) + notice}))
            truncated = True
    return response.model_copy(update={"content": tuple(content)})
