"""Tool description strategies.

A strategy is a pure function ``(actions, name, description, has_group) -> str``.
Two are provided:

- `generate_description`: readable summary plus a ``Workflow:`` section listing
  each action's purpose, required fields and a destructive warning.
- `generate_dense_description`: summary line plus a compact pipe-delimited
  table, roughly a third shorter for builders with many actions.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from toolfold.builder.action import ActionDefinition


class DescriptionStrategy(Protocol):
    def __call__(
        self, actions: Sequence[ActionDefinition], name: str, description: str | None, has_group: bool, /
    ) -> str: ...


def required_fields(action: ActionDefinition) -> list[str]:
    """Required fields of the action's own schema (common fields excluded)."""
    return action.schema.required_fields() if action.schema is not None else []


def _groups(actions: Sequence[ActionDefinition]) -> dict[str, list[ActionDefinition]]:
    groups: dict[str, list[ActionDefinition]] = {}
    for action in actions:
        groups.setdefault(action.group_name or "_ungrouped", []).append(action)
    return groups


# ─────────────────────────────────────────────────────────────────────────────
# Plain
# ─────────────────────────────────────────────────────────────────────────────


def generate_description(
    actions: Sequence[ActionDefinition], name: str, description: str | None, has_group: bool
) -> str:
    if has_group:
        modules = " | ".join(
            f"{group} ({','.join(a.action_name for a in members)})"
            for group, members in _groups(actions).items()
        )
        lines = [f"{description or name}. Modules: {modules}"]
    else:
        lines = [f"{description or name}. Actions: {', '.join(a.key for a in actions)}"]

    workflow = [line for a in actions if (line := _workflow_line(a))]
    if workflow:
        lines += ["", "Workflow:", *workflow]
    return "\n".join(lines)


def _workflow_line(action: ActionDefinition) -> str | None:
    required = required_fields(action)
    if not (action.description or required or action.destructive):
        return None
    line = f"- '{action.key}': {action.description or ''}"
    if required:
        line += (". Requires: " if action.description else "Requires: ") + ", ".join(required)
    if action.destructive:
        line += " ⚠️ DESTRUCTIVE"
    return line


# ─────────────────────────────────────────────────────────────────────────────
# Dense
# ─────────────────────────────────────────────────────────────────────────────

_HEADER = "action|desc|required|destructive"


def generate_dense_description(
    actions: Sequence[ActionDefinition], name: str, description: str | None, has_group: bool
) -> str:
    lines = [description or name, ""]
    if has_group:
        for group, members in _groups(actions).items():
            lines.append(f"{group}[{len(members)}]:")
            lines.append(f"  {_HEADER}")
            lines += [f"  {_row(a.action_name, a)}" for a in members]
    else:
        lines.append(f"[{len(actions)}]{{{_HEADER}}}:")
        lines += [f"  {_row(a.key, a)}" for a in actions]
    return "\n".join(lines)


def _cell(text: str) -> str:
    return text.replace("|", "/").replace("\n", " ")


def _row(label: str, action: ActionDefinition) -> str:
    cells = [label, action.description or "", ",".join(required_fields(action)), "true" if action.destructive else ""]
    return "|".join(_cell(c) for c in cells)
