"""Central registry of tool builders.

The registry provides:
- Builder registration and lookup by name
- Tag-based filtering of the grouped tool list
- Call routing by tool name, with a self-healing error for unknown names
- A revision counter so servers can cache their exposition
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from toolfold.builder import McpTool, ToolBuilder
from toolfold.foundation.errors import ErrorCode
from toolfold.foundation.logging import get_logger
from toolfold.response import ToolResponse, tool_error

from .filter import ToolFilter, filter_tools

log = get_logger("registry")


class ToolRegistry:
    """Registry for all tool builders of an application.

    Example:
        >>> registry = ToolRegistry()
        >>> registry.register(projects)
        >>> registry.get_tools(ToolFilter(tags=["core"]))
        >>> await registry.route_call(ctx, "projects", {"action": "list", "workspace_id": "w1"})
    """

    __slots__ = ("_builders", "_revision")

    def __init__(self) -> None:
        self._builders: dict[str, ToolBuilder] = {}
        self._revision = 0

    def register(self, builder: ToolBuilder) -> ToolBuilder:
        """Register a builder, compiling it immediately so defects surface here.

        Raises:
            ValueError: A builder with the same name is already registered
            BuildError: The builder does not compile
        """
        name = builder.get_name()
        if name in self._builders:
            raise ValueError(f"Tool '{name}' already registered. Use unregister() first.")
        builder.build_tool_definition()
        self._builders[name] = builder
        self._revision += 1
        log.info(f"Registered tool '{name}' ({len(builder.get_action_names())} actions)")
        return builder

    def register_all(self, *builders: ToolBuilder) -> None:
        for builder in builders:
            self.register(builder)

    def unregister(self, name: str) -> bool:
        """Remove a builder by name. Returns True if found."""
        if self._builders.pop(name, None) is None:
            return False
        self._revision += 1
        return True

    def clear(self) -> None:
        self._builders.clear()
        self._revision += 1

    def get(self, name: str) -> ToolBuilder | None:
        return self._builders.get(name)

    def has(self, name: str) -> bool:
        return name in self._builders

    def builders(self) -> list[ToolBuilder]:
        return list(self._builders.values())

    @property
    def names(self) -> list[str]:
        return list(self._builders)

    @property
    def revision(self) -> int:
        """Incremented on every registration change."""
        return self._revision

    def __getitem__(self, name: str) -> ToolBuilder:
        return self._builders[name]

    def __contains__(self, name: object) -> bool:
        return name in self._builders

    def __len__(self) -> int:
        return len(self._builders)

    def __iter__(self) -> Iterator[ToolBuilder]:
        return iter(self._builders.values())

    # ─────────────────────────────────────────────────────────────────
    # Tools & routing
    # ─────────────────────────────────────────────────────────────────

    def get_all_tools(self) -> list[McpTool]:
        return filter_tools(self._builders.values(), None)

    def get_tools(self, flt: ToolFilter | None = None) -> list[McpTool]:
        return filter_tools(self._builders.values(), flt)

    async def route_call(self, ctx: Any, name: str, args: Mapping[str, Any] | None) -> ToolResponse:
        """Dispatch a grouped call to the builder registered under ``name``."""
        if (builder := self._builders.get(name)) is None:
            log.warning(f"Unknown tool '{name}'")
            return unknown_tool(name, self.names)
        return await builder.execute(ctx, args or {})


def unknown_tool(name: str, available: list[str]) -> ToolResponse:
    return tool_error(
        ErrorCode.UNKNOWN_TOOL,
        f'The tool "{name}" does not exist.',
        suggestion=f"Available tools: {', '.join(available)}",
        available_actions=available,
    )
