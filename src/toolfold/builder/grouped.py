"""Fluent builder for one grouped tool.

A `GroupedToolBuilder` collects actions (flat, or namespaced in groups),
an optional common schema shared by every action, and middleware. The
first `build_tool_definition()` compiles everything, caches the result and
freezes the builder; `execute()` dispatches calls against the cached context.

Example:
    >>> projects = (
    ...     create_tool("projects")
    ...     .description("Manage workspace projects")
    ...     .common_schema({"workspace_id": str})
    ...     .action("list", list_projects, read_only=True)
    ...     .action("create", create_project, schema={"name": str})
    ... )
    >>> await projects.execute(ctx, {"action": "create", "workspace_id": "w1", "name": "Apollo"})
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Self

from toolfold.foundation.config import get_settings
from toolfold.foundation.errors import BuildError
from toolfold.foundation.logging import get_logger
from toolfold.execution import execute as dispatch
from toolfold.middleware import Handler, Middleware
from toolfold.response import ToolResponse, to_json_text
from toolfold.response.egress import payload_limit
from toolfold.schema import (
    ActionSchema,
    DescriptionStrategy,
    SchemaLike,
    generate_dense_description,
    generate_description,
)

from .action import ActionDefinition, ActionMetadata, check_name
from .compiler import CompilerInput, ExecutionContext, McpTool, compile_tool_definition
from .group import ActionGroupBuilder, GroupConfigurator, make_action

log = get_logger("builder")

_PREVIEW_WIDTH = 56


class GroupedToolBuilder:
    """Builder for one tool exposing many actions behind a discriminator."""

    __slots__ = (
        "_name", "_discriminator", "_description", "_annotations", "_tags", "_common_schema",
        "_strategy", "_middleware", "_actions", "_has_group", "_has_flat", "_frozen",
        "_cached_tool", "_context", "_max_payload_bytes",
    )

    def __init__(self, name: str, *, discriminator: str | None = None) -> None:
        if not name:
            raise BuildError("Tool name must not be empty")
        settings = get_settings()
        self._name = name
        self._discriminator = discriminator or settings.discriminator
        self._description: str | None = None
        self._annotations: dict[str, Any] | None = None
        self._tags: tuple[str, ...] = ()
        self._common_schema: ActionSchema | None = None
        self._strategy: DescriptionStrategy = (
            generate_dense_description if settings.description_mode == "dense" else generate_description
        )
        self._middleware: list[Middleware] = []
        self._actions: list[ActionDefinition] = []
        self._has_group = False
        self._has_flat = False
        self._frozen = False
        self._cached_tool: McpTool | None = None
        self._context: ExecutionContext | None = None
        self._max_payload_bytes: int | None = None

    # ─────────────────────────────────────────────────────────────────
    # Configuration
    # ─────────────────────────────────────────────────────────────────

    def _assert_not_frozen(self) -> None:
        if self._frozen:
            raise BuildError(
                f"Builder '{self._name}' is frozen after build_tool_definition(). Cannot modify a built tool.",
                tool_name=self._name,
            )

    def discriminator(self, field: str) -> Self:
        """Rename the field that selects the action (default ``action``)."""
        self._assert_not_frozen()
        if not field:
            raise BuildError("Discriminator must not be empty", tool_name=self._name)
        self._discriminator = field
        return self

    def description(self, text: str) -> Self:
        self._assert_not_frozen()
        self._description = text
        return self

    def annotations(self, annotations: Mapping[str, Any]) -> Self:
        """Explicit tool annotations; they override the aggregated hints."""
        self._assert_not_frozen()
        self._annotations = dict(annotations)
        return self

    def tags(self, *tags: str) -> Self:
        self._assert_not_frozen()
        self._tags = tuple(dict.fromkeys((*self._tags, *tags)))
        return self

    def common_schema(self, schema: SchemaLike) -> Self:
        """Fields every action accepts (unless it omits them)."""
        self._assert_not_frozen()
        self._common_schema = ActionSchema.coerce(schema, name=f"{self._name.title()}Common")
        return self

    def dense_description(self) -> Self:
        """Render the description as a compact table."""
        self._assert_not_frozen()
        self._strategy = generate_dense_description
        return self

    def description_strategy(self, strategy: DescriptionStrategy) -> Self:
        self._assert_not_frozen()
        self._strategy = strategy
        return self

    def max_payload_bytes(self, limit: int) -> Self:
        """Truncate handler responses whose text exceeds ``limit`` UTF-8 bytes.

        Limits below 1024 bytes are raised to 1024.
        """
        self._assert_not_frozen()
        self._max_payload_bytes = payload_limit(limit)
        return self

    def use(self, middleware: Middleware) -> Self:
        """Add builder-wide middleware (outermost, in declaration order)."""
        self._assert_not_frozen()
        self._middleware.append(middleware)
        return self

    def action(self, name: str, handler: Handler, **options: Any) -> Self:
        """Register a flat action.

        Args:
            name: Action key (no dots)
            handler: ``(ctx, args) -> value``, sync or async
            **options: ``description``, ``schema``, ``destructive``, ``idempotent``,
                ``read_only``, ``omit_common``, ``middleware``, ``presenter``
        """
        self._assert_not_frozen()
        if self._has_group:
            raise BuildError(
                f"Cannot use .action() and .group() on the same builder '{self._name}'. "
                "Use .action() for flat tools OR .group() for hierarchical tools.",
                tool_name=self._name,
            )
        check_name(name, "action", self._name)
        self._has_flat = True
        self._actions.append(make_action(name, name, handler, **options))
        return self

    def query(self, name: str, handler: Handler, **options: Any) -> Self:
        options.setdefault("read_only", True)
        return self.action(name, handler, **options)

    def mutation(self, name: str, handler: Handler, **options: Any) -> Self:
        options.setdefault("destructive", True)
        return self.action(name, handler, **options)

    def group(
        self,
        name: str,
        description_or_configure: str | GroupConfigurator | None = None,
        configure: GroupConfigurator | None = None,
    ) -> Self:
        """Register a group of ``<name>.<action>`` actions.

        Called as ``group(name, configure)`` or ``group(name, description, configure)``.
        """
        self._assert_not_frozen()
        description = description_or_configure if isinstance(description_or_configure, str) else None
        configure = configure if isinstance(description_or_configure, str) else description_or_configure or configure
        if configure is None:
            raise BuildError(f"Group '{name}' requires a configure callback.", tool_name=self._name)
        if self._has_flat:
            raise BuildError(
                f"Cannot use .group() and .action() on the same builder '{self._name}'. "
                "Use .action() for flat tools OR .group() for hierarchical tools.",
                tool_name=self._name,
            )
        group = ActionGroupBuilder(name, description, tool_name=self._name)
        configure(group)
        self._has_group = True
        self._actions.extend(group.actions)
        return self

    # ─────────────────────────────────────────────────────────────────
    # Build & execute
    # ─────────────────────────────────────────────────────────────────

    def build_tool_definition(self) -> McpTool:
        """Compile once, cache, and freeze the builder.

        Raises:
            BuildError: No actions, duplicate keys, or conflicting field schemas
        """
        if self._cached_tool is not None:
            return self._cached_tool
        output = compile_tool_definition(CompilerInput(
            name=self._name,
            actions=tuple(self._actions),
            discriminator=self._discriminator,
            middleware=tuple(self._middleware),
            common_schema=self._common_schema,
            annotations=self._annotations,
            has_group=self._has_group,
            description=self._description,
            description_strategy=self._strategy,
            max_payload_bytes=self._max_payload_bytes,
        ))
        self._context = output.context
        self._cached_tool = output.tool
        self._frozen = True
        return output.tool

    def get_execution_context(self) -> ExecutionContext:
        if self._context is None:
            self.build_tool_definition()
        return self._context  # type: ignore[return-value]

    async def execute(self, ctx: Any, args: Mapping[str, Any] | None) -> ToolResponse:
        """Dispatch one call (compiles on first use)."""
        return await dispatch(self.get_execution_context(), ctx, args)

    # ─────────────────────────────────────────────────────────────────
    # Introspection
    # ─────────────────────────────────────────────────────────────────

    def get_name(self) -> str:
        return self._name

    def get_tags(self) -> tuple[str, ...]:
        return self._tags

    def get_discriminator(self) -> str:
        return self._discriminator

    def get_action_names(self) -> list[str]:
        return [a.key for a in self._actions]

    def get_actions(self) -> tuple[ActionDefinition, ...]:
        return tuple(self._actions)

    def get_action_metadata(self) -> list[ActionMetadata]:
        return [ActionMetadata.of(a) for a in self._actions]

    def get_common_schema(self) -> ActionSchema | None:
        return self._common_schema

    def get_validation_schema(self, key: str) -> ActionSchema | None:
        """Strict per-action schema from the compiled cache."""
        return self.get_execution_context().validation_schema_cache.get(key)

    def preview_prompt(self) -> str:
        """Render exactly what a client receives for this tool, with its size."""
        tool = self.build_tool_definition()
        schema_json = to_json_text(tool.input_schema)
        annotations_json = to_json_text(tool.annotations) if tool.annotations else ""
        total = sum(len(p) for p in (tool.name, tool.description, schema_json, annotations_json))

        def section(title: str) -> str:
            head = f"├─── {title} "
            return head + "─" * max(_PREVIEW_WIDTH - len(head) + 1, 0) + "┤"

        def block(text: str) -> list[str]:
            return [f"│  {line}" for line in text.split("\n")]

        keys = self.get_action_names()
        lines = [
            f"┌{'─' * _PREVIEW_WIDTH}┐",
            f"│  Tool Preview: {self._name}",
            section("Summary"),
            f"│  Name: {tool.name}",
            f"│  Actions: {len(keys)} ({', '.join(keys)})",
        ]
        if self._tags:
            lines.append(f"│  Tags: {', '.join(self._tags)}")
        lines += [section("Description"), *block(tool.description or "(none)")]
        lines += [section("Input Schema"), *block(schema_json)]
        if annotations_json:
            lines += [section("Annotations"), *block(annotations_json)]
        lines += [section("Payload"), f"│  {total:,} chars (~{-(-total // 4)} tokens)", f"└{'─' * _PREVIEW_WIDTH}┘"]
        return "\n".join(lines)

    def __repr__(self) -> str:
        state = "built" if self._frozen else "open"
        return f"GroupedToolBuilder({self._name!r}, actions={len(self._actions)}, {state})"


def create_tool(name: str, *, discriminator: str | None = None) -> GroupedToolBuilder:
    """Start a new grouped tool."""
    return GroupedToolBuilder(name, discriminator=discriminator)
