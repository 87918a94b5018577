"""Tag-based tool selection."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

from toolfold.builder import McpTool, ToolBuilder


class ToolFilter(BaseModel):
    """Select builders by their tags.

    Attributes:
        tags: Builder must carry every one of these
        any_tag: Builder must carry at least one of these
        exclude: Builder must carry none of these

    Example:
        >>> ToolFilter(tags=["admin"], exclude=["beta"]).matches(["admin", "billing"])
        True
    """

    model_config = ConfigDict(frozen=True)

    tags: frozenset[str] = frozenset()
    any_tag: frozenset[str] = frozenset()
    exclude: frozenset[str] = frozenset()

    def matches(self, tags: Iterable[str]) -> bool:
        have = set(tags)
        if self.tags and not self.tags <= have:
            return False
        if self.any_tag and not self.any_tag & have:
            return False
        return not (self.exclude and self.exclude & have)


def filter_builders(builders: Iterable[ToolBuilder], flt: ToolFilter | None) -> list[ToolBuilder]:
    return [b for b in builders if flt is None or flt.matches(b.get_tags())]


def filter_tools(builders: Iterable[ToolBuilder], flt: ToolFilter | None) -> list[McpTool]:
    """Grouped tool definitions of the builders that pass the filter."""
    return [b.build_tool_definition() for b in filter_builders(builders, flt)]
