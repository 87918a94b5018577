"""Declarative tool definition from plain dicts."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from toolfold.foundation.errors import BuildError
from toolfold.middleware import Middleware
from toolfold.schema import SchemaLike

from .group import ActionGroupBuilder
from .grouped import GroupedToolBuilder

ActionDef = Mapping[str, Any] | Callable[..., Any]

_ACTION_KEYS = frozenset({
    "handler", "description", "params", "read_only", "destructive", "idempotent",
    "omit_common", "middleware", "presenter",
})
_GROUP_KEYS = frozenset({"description", "omit_common", "middleware", "actions"})


def _action_options(tool: str, name: str, definition: ActionDef) -> tuple[Callable[..., Any], dict[str, Any]]:
    if callable(definition):
        return definition, {}
    if unknown := set(definition) - _ACTION_KEYS:
        raise BuildError(f"define_tool('{tool}'): unknown option(s) {sorted(unknown)} for action '{name}'", tool_name=tool)
    if "handler" not in definition:
        raise BuildError(f"define_tool('{tool}'): action '{name}' has no handler", tool_name=tool)
    options = {k: v for k, v in definition.items() if k not in ("handler", "params")}
    if definition.get("params") is not None:
        options["schema"] = definition["params"]
    return definition["handler"], options


def define_tool(
    name: str,
    *,
    description: str | None = None,
    tags: Iterable[str] = (),
    discriminator: str | None = None,
    dense: bool = False,
    shared: SchemaLike | None = None,
    middleware: Iterable[Middleware] = (),
    annotations: Mapping[str, Any] | None = None,
    max_payload_bytes: int | None = None,
    actions: Mapping[str, ActionDef] | None = None,
    groups: Mapping[str, Mapping[str, Any]] | None = None,
) -> GroupedToolBuilder:
    """Build a tool from a declarative config.

    Each action is either a handler or a dict with ``handler`` plus optional
    ``description``, ``params`` (schema), ``read_only``, ``destructive``,
    ``idempotent``, ``omit_common``, ``middleware`` and ``presenter``.

    Example:
        >>> billing = define_tool(
        ...     "billing",
        ...     shared={"account_id": str},
        ...     actions={
        ...         "balance": {"handler": get_balance, "read_only": True},
        ...         "refund": {"handler": refund, "params": {"amount": float}, "destructive": True},
        ...     },
        ... )

    Raises:
        BuildError: Both ``actions`` and ``groups`` given, or a malformed action
    """
    if actions and groups:
        raise BuildError(
            f"define_tool('{name}'): 'actions' and 'groups' are mutually exclusive. "
            "Use 'actions' for flat tools OR 'groups' for hierarchical tools, not both.",
            tool_name=name,
        )

    builder = GroupedToolBuilder(name, discriminator=discriminator)
    if description:
        builder.description(description)
    if tags := tuple(tags):
        builder.tags(*tags)
    if dense:
        builder.dense_description()
    if max_payload_bytes is not None:
        builder.max_payload_bytes(max_payload_bytes)
    if annotations:
        builder.annotations(annotations)
    if shared is not None:
        builder.common_schema(shared)
    for mw in middleware:
        builder.use(mw)

    for action_name, definition in (actions or {}).items():
        handler, options = _action_options(name, action_name, definition)
        builder.action(action_name, handler, **options)

    for group_name, group_def in (groups or {}).items():
        if unknown := set(group_def) - _GROUP_KEYS:
            raise BuildError(
                f"define_tool('{name}'): unknown option(s) {sorted(unknown)} for group '{group_name}'", tool_name=name
            )

        def configure(g: ActionGroupBuilder, group_def: Mapping[str, Any] = group_def) -> None:
            if omit := group_def.get("omit_common"):
                g.omit_common(*omit)
            for mw in group_def.get("middleware", ()):
                g.use(mw)
            for action_name, definition in group_def.get("actions", {}).items():
                handler, options = _action_options(name, action_name, definition)
                g.action(action_name, handler, **options)

        builder.group(group_name, group_def.get("description") or "", configure)

    return builder
