"""Exposition compiler: compiled builders → the tools a client sees.

Two topologies:

- ``grouped``: one tool per builder, exactly as `build_tool_definition()`
  returns it. The builder routes by the discriminator itself, so the routing
  map stays empty.
- ``flat``: one tool per action named ``<builder><sep><key>``, with that
  action's own strict schema (no discriminator), its own annotations and a
  flag-marked description. Each name maps to a `FlatRoute`; calling it injects
  the discriminator and goes through the same `execute()` as grouped calls.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Literal

from toolfold.builder import ActionDefinition, FlatExposable, McpTool, ToolBuilder
from toolfold.foundation.errors import BuildError
from toolfold.foundation.logging import get_logger
from toolfold.response import ToolResponse
from toolfold.schema import JsonSchema, aggregate_annotations

log = get_logger("exposition")

Strategy = Literal["flat", "grouped"]


@dataclass(frozen=True, slots=True)
class FlatRoute:
    """Wire name → the builder and action it stands for."""

    builder: ToolBuilder
    action_key: str
    discriminator: str

    async def dispatch(self, ctx: Any, args: Mapping[str, Any] | None) -> ToolResponse:
        return await self.builder.execute(ctx, {**(args or {}), self.discriminator: self.action_key})


@dataclass(frozen=True, slots=True)
class ExpositionResult:
    tools: tuple[McpTool, ...]
    routing_map: Mapping[str, FlatRoute]
    is_flat: bool

    @property
    def tool_names(self) -> list[str]:
        return [t.name for t in self.tools]


def compile_exposition(
    builders: Iterable[ToolBuilder],
    strategy: Strategy = "flat",
    separator: str = "_",
) -> ExpositionResult:
    """Project builders onto the wire.

    Raises:
        BuildError: Two flat tools end up with the same name
        ValueError: Unknown strategy
    """
    match strategy:
        case "grouped":
            tools = tuple(b.build_tool_definition() for b in builders)
            _check_unique(tools)
            return ExpositionResult(tools=tools, routing_map=MappingProxyType({}), is_flat=False)
        case "flat":
            return _compile_flat(builders, separator)
        case _:
            raise ValueError(f"Unknown exposition strategy: {strategy!r}. Use 'flat' or 'grouped'")


def _compile_flat(builders: Iterable[ToolBuilder], separator: str) -> ExpositionResult:
    tools: list[McpTool] = []
    routes: dict[str, FlatRoute] = {}

    for builder in builders:
        grouped = builder.build_tool_definition()
        if not isinstance(builder, FlatExposable) or not builder.get_actions():
            tools.append(grouped)
            continue
        name, discriminator = builder.get_name(), builder.get_discriminator()
        for action in builder.get_actions():
            schema = builder.get_validation_schema(action.key)
            wire_name = f"{name}{separator}{action.key}"
            tools.append(McpTool(
                name=wire_name,
                description=flat_description(action, name),
                input_schema=schema.to_json_schema() if schema is not None else _empty_schema(),
                annotations=aggregate_annotations([action]),
            ))
            routes[wire_name] = FlatRoute(builder, action.key, discriminator)

    _check_unique(tools)
    log.debug(f"Flat exposition: {len(tools)} tool(s), {len(routes)} route(s)")
    return ExpositionResult(tools=tuple(tools), routing_map=MappingProxyType(routes), is_flat=True)


def flat_description(action: ActionDefinition, tool_name: str) -> str:
    parts = [action.description or f"{tool_name} → {action.key}"]
    if action.destructive:
        parts.append("[DESTRUCTIVE]")
    if action.read_only:
        parts.append("[READ-ONLY]")
    return " ".join(parts)


def _empty_schema() -> JsonSchema:
    return {"type": "object", "properties": {}}


def _check_unique(tools: Iterable[McpTool]) -> None:
    seen: set[str] = set()
    for tool in tools:
        if tool.name in seen:
            raise BuildError(f"Duplicate exposed tool name '{tool.name}'", tool_name=tool.name)
        seen.add(tool.name)
