"""Behavioral hints (readOnly / destructive / idempotent) for a tool."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from toolfold.builder.action import ActionDefinition


def aggregate_annotations(
    actions: Sequence[ActionDefinition],
    explicit: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Aggregate per-action flags into tool annotations.

    A tool is read-only or idempotent only when every action is; it is
    destructive as soon as one action is. Explicit annotations always win and
    extra explicit keys (``title``, ``openWorldHint``) pass through.

        >>> aggregate_annotations([])
        {'readOnlyHint': False, 'destructiveHint': False, 'idempotentHint': False}
    """
    explicit = dict(explicit or {})
    computed = {
        "readOnlyHint": bool(actions) and all(a.read_only for a in actions),
        "destructiveHint": any(a.destructive for a in actions),
        "idempotentHint": bool(actions) and all(a.idempotent for a in actions),
    }
    return {**computed, **explicit}
