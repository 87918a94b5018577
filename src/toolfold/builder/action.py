"""Action model and the builder capability protocol."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from toolfold.foundation.errors import BuildError

if TYPE_CHECKING:
    from toolfold.middleware import Handler, Middleware
    from toolfold.response import Presenter, ToolResponse
    from toolfold.schema import ActionSchema

    from .compiler import McpTool


@dataclass(frozen=True, slots=True)
class ActionDefinition:
    """One registered action of a builder.

    Attributes:
        key: Unique key within the builder (``group.action`` inside groups)
        handler: ``(ctx, args) -> value``, sync or async
        action_name: Name without the group prefix (defaults to ``key``)
        group_name: Owning group, if any
        schema: Action-specific schema, merged with the common schema
        omit_common_fields: Common-schema fields this action does not take
        destructive/idempotent/read_only: Behavioral flags
        middleware: Action-level middleware (innermost)
        group_middleware: Middleware inherited from the owning group
        presenter: Shapes raw handler results
    """

    key: str
    handler: Handler
    action_name: str = ""
    group_name: str | None = None
    group_description: str | None = None
    description: str | None = None
    schema: ActionSchema | None = None
    omit_common_fields: tuple[str, ...] = ()
    destructive: bool = False
    idempotent: bool = False
    read_only: bool = False
    middleware: tuple[Middleware, ...] = ()
    group_middleware: tuple[Middleware, ...] = ()
    presenter: Presenter | None = None

    def __post_init__(self) -> None:
        if not self.key:
            raise BuildError("Action key must not be empty")
        if not self.action_name:
            object.__setattr__(self, "action_name", self.key)


@dataclass(frozen=True, slots=True)
class ActionMetadata:
    """Read-only summary of an action for introspection and docs."""

    key: str
    action_name: str
    group_name: str | None
    description: str | None
    destructive: bool
    idempotent: bool
    read_only: bool
    required_fields: tuple[str, ...] = ()
    has_middleware: bool = False
    has_presenter: bool = False

    @classmethod
    def of(cls, action: ActionDefinition) -> ActionMetadata:
        return cls(
            key=action.key,
            action_name=action.action_name,
            group_name=action.group_name,
            description=action.description,
            destructive=action.destructive,
            idempotent=action.idempotent,
            read_only=action.read_only,
            required_fields=tuple(action.schema.required_fields()) if action.schema else (),
            has_middleware=bool(action.middleware or action.group_middleware),
            has_presenter=action.presenter is not None,
        )


@runtime_checkable
class ToolBuilder(Protocol):
    """Capability interface accepted by registries and the exposition compiler.

    Any object with these methods works; `GroupedToolBuilder` is the stock
    implementation. Builders that also provide ``get_actions()`` and
    ``get_validation_schema()`` can be exposed flat.
    """

    def get_name(self) -> str: ...
    def get_tags(self) -> tuple[str, ...]: ...
    def get_discriminator(self) -> str: ...
    def get_action_names(self) -> list[str]: ...
    def get_action_metadata(self) -> list[ActionMetadata]: ...
    def build_tool_definition(self) -> McpTool: ...
    async def execute(self, ctx: Any, args: Mapping[str, Any]) -> ToolResponse: ...


@runtime_checkable
class FlatExposable(Protocol):
    """Extra reflection needed to expose each action as its own tool."""

    def get_actions(self) -> Sequence[ActionDefinition]: ...
    def get_validation_schema(self, key: str) -> ActionSchema | None: ...


def check_unique_keys(actions: Sequence[ActionDefinition], tool_name: str) -> None:
    seen: set[str] = set()
    for action in actions:
        if action.key in seen:
            raise BuildError(f"Duplicate action key '{action.key}' in builder '{tool_name}'", tool_name=tool_name)
        seen.add(action.key)


def check_name(name: str, kind: str, tool_name: str) -> None:
    """Action and group names are joined with dots, so they may not contain one."""
    if not name:
        raise BuildError(f"{kind.capitalize()} name must not be empty in builder '{tool_name}'", tool_name=tool_name)
    if "." in name:
        raise BuildError(
            f"{kind.capitalize()} name '{name}' must not contain dots: the '.' joins group and action names",
            tool_name=tool_name,
        )
