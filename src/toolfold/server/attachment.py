"""Exposition boundary between a registry and a transport.

A `ToolServer` owns one exposition strategy for a registry: it lists the
exposed tools and turns ``(tool name, arguments)`` pairs into dispatches.
Transport adapters (`MCPServer`) subclass it and only add framing.

Example:
    >>> server = ToolServer("workspace", registry, exposition="flat")
    >>> [t.name for t in server.list_tools()]
    ['projects_list', 'projects_create']
    >>> await server.call_tool("projects_create", {"workspace_id": "w1", "name": "Apollo"})
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from toolfold.exposition import ExpositionResult, Strategy, compile_exposition
from toolfold.foundation.config import get_settings
from toolfold.foundation.logging import get_logger
from toolfold.middleware import Context
from toolfold.registry import ToolFilter, filter_builders, unknown_tool

if TYPE_CHECKING:
    from toolfold.builder import McpTool
    from toolfold.registry import ToolRegistry
    from toolfold.response import ToolResponse

log = get_logger("server")

ContextFactory = Callable[[Mapping[str, Any] | None], Any]


class ToolServer:
    """Serve a registry's tools under one exposition strategy.

    Args:
        name: Server name shown to clients
        registry: Builders to expose
        exposition: ``flat`` or ``grouped`` (default from settings)
        separator: Joins builder and action names in flat mode (default from settings)
        filter: Only expose builders whose tags pass
        context_factory: ``(extra) -> ctx`` (sync or async) building each call's context
    """

    __slots__ = ("_name", "_registry", "_exposition", "_separator", "_filter", "_context_factory", "_cache")

    def __init__(
        self,
        name: str,
        registry: ToolRegistry,
        *,
        exposition: Strategy | None = None,
        separator: str | None = None,
        filter: ToolFilter | None = None,  # noqa: A002
        context_factory: ContextFactory | None = None,
    ) -> None:
        settings = get_settings()
        self._name = name
        self._registry = registry
        self._exposition: Strategy = exposition or settings.exposition
        self._separator = separator or settings.action_separator
        self._filter = filter
        self._context_factory = context_factory
        self._cache: tuple[int, ExpositionResult, frozenset[str]] | None = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    @property
    def exposition(self) -> Strategy:
        return self._exposition

    def attach(self, registry: ToolRegistry) -> None:
        """Serve a different registry; the last attached one wins."""
        self._registry = registry
        self._cache = None

    def exposition_result(self) -> ExpositionResult:
        """Compiled exposition, recomputed only when the registry changes."""
        return self._exposed()[0]

    def _exposed(self) -> tuple[ExpositionResult, frozenset[str]]:
        revision = self._registry.revision
        if self._cache is None or self._cache[0] != revision:
            builders = filter_builders(self._registry, self._filter)
            result = compile_exposition(builders, self._exposition, self._separator)
            self._cache = (revision, result, frozenset(result.tool_names))
        return self._cache[1], self._cache[2]

    def list_tools(self) -> list[McpTool]:
        return list(self.exposition_result().tools)

    async def _make_context(self, extra: Mapping[str, Any] | None) -> Any:
        if self._context_factory is None:
            return Context(tool_name=self._name, extra=extra)
        ctx = self._context_factory(extra)
        return await ctx if inspect.isawaitable(ctx) else ctx

    async def call_tool(
        self, name: str, args: Mapping[str, Any] | None, extra: Mapping[str, Any] | None = None
    ) -> ToolResponse:
        """Dispatch one call by exposed tool name.

        Flat names go through their route; grouped names (and builders exposed
        grouped as a flat fallback) go to the registry. Anything else gets an
        ``UNKNOWN_TOOL`` error listing the exposed names.
        """
        result, names = self._exposed()
        if (route := result.routing_map.get(name)) is not None:
            return await route.dispatch(await self._make_context(extra), args)
        if name in names:
            return await self._registry.route_call(await self._make_context(extra), name, args)
        log.warning(f"Unknown tool '{name}' requested from server '{self._name}'")
        return unknown_tool(name, result.tool_names)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r}, exposition={self._exposition!r}, tools={len(self._registry)})"
