"""Middleware types and chain composition.

Middleware follows continuation-passing style: each middleware receives the
caller context, the validated arguments and a zero-argument `next` that runs
the rest of the chain. Chains are composed once per action at compile time and
reused for every call.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Coroutine, Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, TypeAlias, runtime_checkable

if TYPE_CHECKING:
    from toolfold.builder.action import ActionDefinition


@dataclass(slots=True)
class Context:
    """Default per-call context handed to handlers and middleware.

    Carries request-scoped state between middleware. Any object can serve as
    context; this one is created by servers when no factory is configured.

    Example:
        >>> ctx = Context(tool_name="projects")
        >>> ctx["request_id"] = "abc123"
        >>> ctx.get("request_id")
        'abc123'
    """

    tool_name: str | None = None
    extra: Mapping[str, Any] | None = None
    data: dict[str, object] = field(default_factory=dict)

    def __getitem__(self, key: str) -> object:
        return self.data[key]

    def __setitem__(self, key: str, value: object) -> None:
        self.data[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self.data

    def get(self, key: str, default: object = None) -> object:
        return self.data.get(key, default)


Next: TypeAlias = Callable[[], Awaitable[Any]]
Handler: TypeAlias = Callable[[Any, dict[str, Any]], Any]
Chain: TypeAlias = Callable[[Any, dict[str, Any]], Coroutine[Any, Any, Any]]


@runtime_checkable
class Middleware(Protocol):
    """Protocol for action middleware.

    Return ``await next()`` to continue, or any value to short-circuit.
    Plain functions work too; sync middleware may return ``next()`` unawaited.

    Example:
        >>> async def timing(ctx, args, next):
        ...     start = time.perf_counter()
        ...     result = await next()
        ...     ctx["duration"] = time.perf_counter() - start
        ...     return result
    """

    def __call__(self, ctx: Any, args: dict[str, Any], next: Next) -> Any: ...


async def _resolve(value: Any) -> Any:
    return await value if inspect.isawaitable(value) else value


def wrap_chain(handler: Handler, middleware: Sequence[Middleware]) -> Chain:
    """Compose middleware around a handler (first = outermost).

    Returns:
        Async function ``(ctx, args) -> result``
    """
    async def base(ctx: Any, args: dict[str, Any]) -> Any:
        return await _resolve(handler(ctx, args))

    chain: Chain = base
    for mw in reversed(middleware):
        def make_wrapper(m: Middleware, nxt: Chain) -> Chain:
            async def wrapped(ctx: Any, args: dict[str, Any]) -> Any:
                return await _resolve(m(ctx, args, lambda: nxt(ctx, args)))
            return wrapped
        chain = make_wrapper(mw, chain)

    return chain


def compile_chains(actions: Sequence[ActionDefinition], global_middleware: Sequence[Middleware] = ()) -> dict[str, Chain]:
    """Pre-compose one chain per action: global, then group, then action middleware."""
    return {
        a.key: wrap_chain(a.handler, [*global_middleware, *a.group_middleware, *a.middleware])
        for a in actions
    }
