"""Logging middleware for action execution."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any

from toolfold.foundation.logging import get_logger
from toolfold.response import ToolResponse

from ..middleware import Context, Next

logger = get_logger("middleware")


@dataclass(slots=True)
class LoggingMiddleware:
    """Log action execution with timing and result status.

    Logs at INFO level for successful calls, WARNING for error responses.
    Exceptions are logged with traceback and re-raised. Duration is stored
    in the context as ``duration_ms`` when it is a `Context`.

    Args:
        log: Logger instance to use (defaults to toolfold.middleware)
        discriminator: Argument naming the action, used as the log label
        log_args: Whether to include arguments in the log (off for privacy)

    Example:
        >>> builder.use(LoggingMiddleware(log_args=True))
    """

    log: logging.Logger = field(default_factory=lambda: logger)
    discriminator: str = "action"
    log_args: bool = False

    async def __call__(self, ctx: Any, args: dict[str, Any], next: Next) -> Any:
        name = args.get(self.discriminator, "?")
        start = time.perf_counter()

        arg_str = f" args={args}" if self.log_args else ""
        self.log.info(f"[{name}] Starting{arg_str}")

        try:
            result = await next()
        except Exception as e:
            duration_ms = self._record(ctx, start)
            self.log.exception(f"[{name}] EXCEPTION ({duration_ms:.1f}ms): {e}")
            raise

        duration_ms = self._record(ctx, start)
        is_error = isinstance(result, ToolResponse) and result.is_error
        level = logging.WARNING if is_error else logging.INFO
        self.log.log(level, f"[{name}] {'ERROR' if is_error else 'OK'} ({duration_ms:.1f}ms)")
        return result

    @staticmethod
    def _record(ctx: Any, start: float) -> float:
        duration_ms = (time.perf_counter() - start) * 1000
        if isinstance(ctx, Context):
            ctx["duration_ms"] = duration_ms
        return duration_ms
