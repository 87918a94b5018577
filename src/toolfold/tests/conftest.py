"""Shared fixtures: fresh settings per test and the ``projects`` example tool."""

from __future__ import annotations

import os
from typing import Any

import pytest

from toolfold import GroupedToolBuilder, ToolRegistry, create_tool
from toolfold.foundation.config import clear_settings_cache


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Any:
    """Isolate every test from TOOLFOLD_* variables and the settings cache."""
    for var in [v for v in os.environ if v.startswith("TOOLFOLD_")]:
        monkeypatch.delenv(var)
    clear_settings_cache()
    yield
    clear_settings_cache()


async def list_projects(ctx: Any, args: dict[str, Any]) -> list[dict[str, Any]]:
    return [{"id": "p1", "workspace": args["workspace_id"]}]


async def create_project(ctx: Any, args: dict[str, Any]) -> dict[str, Any]:
    return {"id": "p2", "name": args["name"], "workspace": args["workspace_id"]}


def make_projects() -> GroupedToolBuilder:
    return (
        create_tool("projects")
        .description("Manage workspace projects")
        .common_schema({"workspace_id": str})
        .action("list", list_projects, read_only=True, description="List projects")
        .action("create", create_project, schema={"name": str})
    )


@pytest.fixture
def projects() -> GroupedToolBuilder:
    return make_projects()


@pytest.fixture
def registry(projects: GroupedToolBuilder) -> ToolRegistry:
    reg = ToolRegistry()
    reg.register(projects)
    return reg
