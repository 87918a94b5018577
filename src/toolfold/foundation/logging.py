"""Logging setup for toolfold.

Every module logs through a stdlib logger in the ``toolfold`` namespace.
`configure_logging` installs one handler on that namespace, rendering either
human-readable lines or JSON Lines for log aggregation.

Example:
    >>> from toolfold.foundation.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", format="json")
    >>> log = get_logger("registry")
    >>> log.info("registered tool", extra={"tool": "projects"})
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING, TextIO

import orjson

if TYPE_CHECKING:
    from .config import LoggingSettings

ROOT = "toolfold"

# LogRecord attributes that are not user-supplied ``extra`` context
_RESERVED = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def get_logger(name: str) -> logging.Logger:
    """Get a namespaced module logger (``toolfold.<name>``)."""
    return logging.getLogger(f"{ROOT}.{name}")


def _extra(record: logging.LogRecord) -> dict[str, object]:
    return {k: v for k, v in vars(record).items() if k not in _RESERVED and not k.startswith("_")}


class TextFormatter(logging.Formatter):
    """``timestamp [level] logger: message key=value ...``"""

    def __init__(self, *, timestamps: bool = True) -> None:
        super().__init__()
        self.timestamps = timestamps

    def format(self, record: logging.LogRecord) -> str:
        parts = [datetime.fromtimestamp(record.created, UTC).strftime("%Y-%m-%d %H:%M:%S")] if self.timestamps else []
        parts += [f"[{record.levelname.lower()}]", f"{record.name}:", record.getMessage()]
        parts += [f"{k}={v}" for k, v in sorted(_extra(record).items())]
        line = " ".join(parts)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class JsonFormatter(logging.Formatter):
    """JSON Lines output (one object per record)."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
            **_extra(record),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(payload, default=str, option=orjson.OPT_NON_STR_KEYS).decode()


def configure_logging(
    level: str | None = None,
    format: str | None = None,  # noqa: A002 - matches settings field
    *,
    output: TextIO | None = None,
    settings: LoggingSettings | None = None,
) -> logging.Logger:
    """Configure the ``toolfold`` logger namespace.

    Explicit arguments override values from settings; with ``TOOLFOLD_DEBUG``
    set, the default level is DEBUG. Calling again replaces the previously
    installed handler.
    """
    from .config import get_settings

    root_settings = get_settings()
    if settings is None:
        settings = root_settings.logging

    level = (level or ("DEBUG" if root_settings.debug else settings.level)).upper()
    fmt = format or settings.format
    match fmt:
        case "text": formatter: logging.Formatter = TextFormatter(timestamps=settings.include_timestamps)
        case "json": formatter = JsonFormatter()
        case _: raise ValueError(f"Unknown log format: {fmt}. Use 'text' or 'json'")

    root = logging.getLogger(ROOT)
    for handler in [h for h in root.handlers if getattr(h, "_toolfold", False)]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(output or sys.stderr)
    handler.setFormatter(formatter)
    handler._toolfold = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(getattr(logging, level, logging.INFO))
    return root
