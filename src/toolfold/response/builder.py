"""Multi-block response composition.

A `ResponseBuilder` assembles one response out of a data block followed by
optional extra text blocks, hints for the model, domain rules and next-action
suggestions. Handlers may return an unbuilt builder; the post-processor calls
`build()` for them.

Example:
    >>> (response({"total": 3})
    ...     .hint("Amounts are in cents.")
    ...     .rules(["Never show internal IDs."])
    ...     .build().content[1].text)
    '💡 Amounts are in cents.'
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Self

from .response import TextContent, ToolResponse, to_json_text

_UNSET: Any = object()


@dataclass(frozen=True, slots=True)
class ActionSuggestion:
    """Recommended follow-up tool for the model."""

    tool: str
    reason: str


@dataclass(slots=True)
class ResponseBuilder:
    """Fluent builder for a multi-block `ToolResponse`.

    Block order in the built response: data, raw text blocks, hints, rules,
    suggestions. Empty sections are skipped.
    """

    _data: str = "OK"
    _blocks: list[str] = field(default_factory=list)
    _hints: list[str] = field(default_factory=list)
    _rules: list[str] = field(default_factory=list)
    _suggestions: list[ActionSuggestion] = field(default_factory=list)

    def data(self, value: Any) -> Self:
        """Set the primary data block (strings verbatim, anything else JSON)."""
        self._data = (value or "OK") if isinstance(value, str) else to_json_text(value)
        return self

    def text(self, block: str) -> Self:
        """Append a raw text block."""
        self._blocks.append(block)
        return self

    def hint(self, hint: str) -> Self:
        self._hints.append(hint)
        return self

    def rules(self, rules: Iterable[str]) -> Self:
        """Append domain rules that travel with the data."""
        self._rules.extend(rules)
        return self

    def suggest(self, tool: str, reason: str) -> Self:
        self._suggestions.append(ActionSuggestion(tool, reason))
        return self

    def build(self) -> ToolResponse:
        texts = [self._data, *self._blocks]
        if self._hints:
            texts.append("\n".join(f"💡 {h}" for h in self._hints))
        if self._rules:
            texts.append("[DOMAIN RULES]:\n" + "\n".join(f"- {r}" for r in self._rules))
        if self._suggestions:
            texts.append(
                "[SYSTEM HINT]: Based on the current state, recommended next tools:\n"
                + "\n".join(f"  → {s.tool}: {s.reason}" for s in self._suggestions)
            )
        return ToolResponse(content=tuple(TextContent(text=t) for t in texts))


def response(data: Any = _UNSET) -> ResponseBuilder:
    """Start a `ResponseBuilder`, optionally with its data block."""
    builder = ResponseBuilder()
    return builder if data is _UNSET else builder.data(data)
