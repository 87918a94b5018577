"""Middleware system for action execution hooks.

Middleware wraps handlers for cross-cutting concerns (auth, logging, timing).
It can be attached to a builder (all actions), a group or a single action;
chains run global → group → action → handler.

Example:
    >>> from toolfold import create_tool
    >>> from toolfold.middleware import LoggingMiddleware
    >>> from toolfold.response import error
    >>>
    >>> async def require_user(ctx, args, next):
    ...     if not ctx.get("user"):
    ...         return error("Not signed in")
    ...     return await next()
    >>>
    >>> tool = create_tool("projects").use(LoggingMiddleware()).use(require_user)
"""

from .middleware import Chain, Context, Handler, Middleware, Next, compile_chains, wrap_chain
from .plugins import LoggingMiddleware

__all__ = [
    # Core
    "Middleware",
    "Next",
    "Chain",
    "Handler",
    "Context",
    "wrap_chain",
    "compile_chains",
    # Plugins
    "LoggingMiddleware",
]
