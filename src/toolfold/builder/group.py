"""Action groups: namespaced actions with shared middleware and omissions."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, Self

from toolfold.schema import ActionSchema, SchemaLike

from .action import ActionDefinition, check_name

if TYPE_CHECKING:
    from toolfold.middleware import Handler, Middleware
    from toolfold.response import Presenter


def make_action(
    key: str,
    name: str,
    handler: Handler,
    *,
    description: str | None = None,
    schema: SchemaLike | None = None,
    destructive: bool = False,
    idempotent: bool = False,
    read_only: bool = False,
    omit_common: Iterable[str] = (),
    middleware: Iterable[Middleware] = (),
    presenter: Presenter | None = None,
    group_name: str | None = None,
    group_description: str | None = None,
    group_middleware: Iterable[Middleware] = (),
) -> ActionDefinition:
    if not callable(handler):
        raise TypeError(f"Action '{key}' handler must be callable, got {handler!r}")
    return ActionDefinition(
        key=key,
        handler=handler,
        action_name=name,
        group_name=group_name,
        group_description=group_description,
        description=description,
        schema=ActionSchema.coerce(schema, name=_model_name(key)),
        omit_common_fields=tuple(dict.fromkeys(omit_common)),
        destructive=destructive,
        idempotent=idempotent,
        read_only=read_only,
        middleware=tuple(middleware),
        group_middleware=tuple(group_middleware),
        presenter=presenter,
    )


def _model_name(key: str) -> str:
    return "".join(part.title() for part in key.replace("-", "_").replace(".", "_").split("_")) + "Args"


class ActionGroupBuilder:
    """Collects the actions of one group inside a builder.

    Keys are ``<group>.<action>``. Group middleware runs after the builder's
    middleware and before action middleware. Group-level omissions are
    combined with each action's own.

    Example:
        >>> def configure(g: ActionGroupBuilder) -> None:
        ...     g.use(require_admin)
        ...     g.query("list", list_users)
        ...     g.mutation("ban", ban_user, schema={"user_id": str})
        >>> builder.group("users", "User management", configure)
    """

    __slots__ = ("name", "description", "tool_name", "_actions", "_middleware", "_omit_common")

    def __init__(self, name: str, description: str | None = None, *, tool_name: str = "") -> None:
        check_name(name, "group", tool_name)
        self.name = name
        self.description = description
        self.tool_name = tool_name
        self._actions: list[ActionDefinition] = []
        self._middleware: list[Middleware] = []
        self._omit_common: list[str] = []

    @property
    def actions(self) -> tuple[ActionDefinition, ...]:
        return tuple(self._actions)

    def use(self, middleware: Middleware) -> Self:
        """Add group-scoped middleware (applies to actions registered after it)."""
        self._middleware.append(middleware)
        return self

    def omit_common(self, *fields: str) -> Self:
        """Omit common-schema fields for every action registered after this call."""
        self._omit_common.extend(fields)
        return self

    def action(self, name: str, handler: Handler, **options: Any) -> Self:
        """Register ``<group>.<name>``. Options match `GroupedToolBuilder.action`."""
        check_name(name, "action", self.tool_name)
        omit = [*self._omit_common, *options.pop("omit_common", ())]
        self._actions.append(make_action(
            f"{self.name}.{name}",
            name,
            handler,
            omit_common=omit,
            group_name=self.name,
            group_description=self.description,
            group_middleware=self._middleware,
            **options,
        ))
        return self

    def query(self, name: str, handler: Handler, **options: Any) -> Self:
        """Read-only action shorthand."""
        options.setdefault("read_only", True)
        return self.action(name, handler, **options)

    def mutation(self, name: str, handler: Handler, **options: Any) -> Self:
        """Destructive action shorthand."""
        options.setdefault("destructive", True)
        return self.action(name, handler, **options)


GroupConfigurator = Callable[[ActionGroupBuilder], Any]
