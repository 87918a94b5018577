"""Tests for flat and grouped exposition."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from toolfold import GroupedToolBuilder, McpTool, create_tool
from toolfold.builder import ActionMetadata
from toolfold.exposition import compile_exposition
from toolfold.foundation.errors import BuildError
from toolfold.response import ToolResponse, success


def noop(ctx: Any, args: dict[str, Any]) -> None:
    return None


class StaticBuilder:
    """Minimal builder that only satisfies the grouped capability interface."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.calls: list[Mapping[str, Any]] = []

    def get_name(self) -> str:
        return self.name

    def get_tags(self) -> tuple[str, ...]:
        return ()

    def get_discriminator(self) -> str:
        return "action"

    def get_action_names(self) -> list[str]:
        return ["run"]

    def get_action_metadata(self) -> list[ActionMetadata]:
        return []

    def build_tool_definition(self) -> McpTool:
        return McpTool(name=self.name, description="Static tool", input_schema={"type": "object", "properties": {}})

    async def execute(self, ctx: Any, args: Mapping[str, Any]) -> ToolResponse:
        self.calls.append(args)
        return success("static")


# ═════════════════════════════════════════════════════════════════════════════
# Flat
# ═════════════════════════════════════════════════════════════════════════════


def test_flat_names_and_schemas_have_no_discriminator(projects: GroupedToolBuilder) -> None:
    result = compile_exposition([projects], "flat", "_")

    assert result.is_flat
    assert result.tool_names == ["projects_list", "projects_create"]
    for tool in result.tools:
        assert "action" not in tool.input_schema["properties"]
        assert tool.input_schema["additionalProperties"] is False

    listing, create = result.tools
    assert listing.input_schema["required"] == ["workspace_id"]
    assert set(create.input_schema["required"]) == {"workspace_id", "name"}


def test_flat_annotations_and_descriptions_are_per_action() -> None:
    tool = (
        create_tool("files")
        .query("read", noop, description="Read a file")
        .mutation("delete", noop)
        .action("touch", noop, idempotent=True)
    )
    read, delete, touch = compile_exposition([tool]).tools

    assert read.description == "Read a file [READ-ONLY]"
    assert read.annotations == {"readOnlyHint": True, "destructiveHint": False, "idempotentHint": False}
    assert delete.description == "files → delete [DESTRUCTIVE]"
    assert delete.annotations is not None and delete.annotations["destructiveHint"] is True
    assert touch.annotations is not None and touch.annotations["idempotentHint"] is True


def test_flat_action_without_schema_gets_empty_object() -> None:
    result = compile_exposition([create_tool("health").action("ping", noop)])
    assert result.tools[0].input_schema == {"type": "object", "properties": {}}


def test_flat_custom_separator_and_group_keys() -> None:
    admin = create_tool("admin").group("users", lambda g: g.action("list", noop))
    assert compile_exposition([admin], "flat", ".").tool_names == ["admin.users.list"]


def test_flat_routes_point_at_builder(projects: GroupedToolBuilder) -> None:
    route = compile_exposition([projects]).routing_map["projects_create"]
    assert route.builder is projects
    assert route.action_key == "create"
    assert route.discriminator == "action"


def test_duplicate_flat_names_raise() -> None:
    first = create_tool("a").action("b_c", noop)
    second = create_tool("a_b").action("c", noop)
    with pytest.raises(BuildError, match="Duplicate exposed tool name 'a_b_c'"):
        compile_exposition([first, second], "flat", "_")


def test_builders_without_actions_fall_back_to_grouped_tool(projects: GroupedToolBuilder) -> None:
    result = compile_exposition([projects, StaticBuilder("legacy")], "flat")
    assert result.tool_names == ["projects_list", "projects_create", "legacy"]
    assert "legacy" not in result.routing_map


# ═════════════════════════════════════════════════════════════════════════════
# Grouped
# ═════════════════════════════════════════════════════════════════════════════


def test_grouped_tool_is_the_built_definition(projects: GroupedToolBuilder) -> None:
    result = compile_exposition([projects], "grouped")
    assert not result.is_flat
    assert result.tools[0] is projects.build_tool_definition()
    assert result.tools[0].to_wire() == projects.build_tool_definition().to_wire()
    assert dict(result.routing_map) == {}


def test_grouped_duplicate_names_raise() -> None:
    with pytest.raises(BuildError):
        compile_exposition([StaticBuilder("x"), StaticBuilder("x")], "grouped")


def test_unknown_strategy() -> None:
    with pytest.raises(ValueError, match="Unknown exposition strategy"):
        compile_exposition([], "nested")  # type: ignore[arg-type]


# ═════════════════════════════════════════════════════════════════════════════
# Dispatch equivalence
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "args",
    [
        {"workspace_id": "w1", "name": "Apollo"},
        {"name": "Apollo"},
        {"workspace_id": "w1", "name": "Apollo", "extra": True},
        {},
    ],
)
async def test_flat_and_grouped_dispatch_are_identical(projects: GroupedToolBuilder, args: dict[str, Any]) -> None:
    route = compile_exposition([projects]).routing_map["projects_create"]

    via_flat = await route.dispatch(None, args)
    via_grouped = await projects.execute(None, {**args, "action": "create"})

    assert via_flat == via_grouped


@pytest.mark.asyncio
async def test_flat_route_overrides_caller_discriminator(projects: GroupedToolBuilder) -> None:
    route = compile_exposition([projects]).routing_map["projects_list"]
    resp = await route.dispatch(None, {"workspace_id": "w1", "action": "create"})
    assert not resp.is_error
    assert '"workspace": "w1"' in resp.text
