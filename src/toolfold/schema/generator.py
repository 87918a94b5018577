"""Grouped ``inputSchema`` generation.

One object schema covers every action of a builder:

- a discriminator property whose ``enum`` lists the action keys
- common fields still used by at least one action (after omissions)
- the union of every action's own fields
- a per-field note saying which actions use or require it

Fields shared across actions must agree on their JSON type (``integer`` is
accepted where ``number`` was declared and vice versa) and on their enum set;
a conflict is a construction error.
"""

from __future__ import annotations

import copy
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from toolfold.foundation.errors import BuildError

from .provider import ActionSchema, JsonSchema

if TYPE_CHECKING:
    from toolfold.builder.action import ActionDefinition


@dataclass(slots=True)
class _FieldUsage:
    keys: list[str] = field(default_factory=list)
    required_in: list[str] = field(default_factory=list)


def discriminator_property(discriminator: str, action_keys: Sequence[str], has_group: bool) -> dict[str, Any]:
    return {
        "type": "string",
        "enum": list(action_keys),
        "description": (
            f"Module and operation (module.{discriminator} format)" if has_group else "Which operation to perform"
        ),
    }


def generate_input_schema(
    actions: Sequence[ActionDefinition],
    discriminator: str,
    has_group: bool,
    common_schema: ActionSchema | None,
) -> JsonSchema:
    """Build the discriminated input schema for a grouped tool."""
    keys = [a.key for a in actions]
    properties: dict[str, Any] = {discriminator: discriminator_property(discriminator, keys, has_group)}
    required = [discriminator]
    usage: dict[str, _FieldUsage] = {}
    defs: dict[str, Any] = {}

    common_required: set[str] = set()
    if common_schema is not None:
        rendered = _render(common_schema, defs)
        common_required = set(rendered.get("required", ()))
        for name, prop in rendered["properties"].items():
            users = [a.key for a in actions if name not in a.omit_common_fields]
            if not users:
                continue
            properties[name] = prop
            if name in common_required and len(users) == len(keys):
                required.append(name)
            usage[name] = _FieldUsage(list(users), list(users) if name in common_required else [])

    for action in actions:
        if action.schema is None:
            continue
        rendered = _render(action.schema, defs)
        action_required = set(rendered.get("required", ()))
        for name, prop in rendered["properties"].items():
            if name in properties:
                assert_field_compatibility(properties[name], prop, name, action.key)
            else:
                properties[name] = prop
            entry = usage.setdefault(name, _FieldUsage())
            entry.keys.append(action.key)
            if name in action_required:
                entry.required_in.append(action.key)

    for name, entry in usage.items():
        _annotate(properties[name], _usage_note(name, entry, common_required, len(keys)))

    schema: JsonSchema = {"type": "object", "properties": properties, "required": required}
    if defs:
        schema["$defs"] = defs
    return schema


def assert_field_compatibility(existing: dict[str, Any], incoming: dict[str, Any], name: str, action_key: str) -> None:
    """Raise BuildError when two declarations of one field disagree.

    Checked in order: base type, enum presence, enum values.
    """
    ex_type, in_type = existing.get("type"), incoming.get("type")
    if ex_type is not None and in_type is not None and _norm(ex_type) != _norm(in_type):
        raise _conflict(name, action_key, f'type "{in_type}" conflicts with previously declared type "{ex_type}"')

    ex_enum, in_enum = existing.get("enum"), incoming.get("enum")
    if (ex_enum is None) != (in_enum is None):
        kind = lambda e: "non-enum" if e is None else "enum"  # noqa: E731
        raise _conflict(name, action_key, f"{kind(in_enum)} declaration conflicts with previously declared {kind(ex_enum)}")
    if ex_enum is not None and list(ex_enum) != list(in_enum):  # type: ignore[arg-type]
        raise _conflict(name, action_key, f"enum values {in_enum} conflict with previously declared enum values {ex_enum}")


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────


def _render(schema: ActionSchema, defs: dict[str, Any]) -> JsonSchema:
    # Copy so annotating descriptions never mutates a shared rendering
    rendered = copy.deepcopy(schema.to_json_schema())
    defs.update(rendered.pop("$defs", {}))
    return rendered


def _norm(t: Any) -> Any:
    return "number" if t == "integer" else t


def _conflict(name: str, action_key: str, detail: str) -> BuildError:
    return BuildError(
        f'Schema conflict for field "{name}" in action "{action_key}": {detail}. '
        "All actions sharing a field name must use the same type."
    )


def _usage_note(name: str, entry: _FieldUsage, common_required: set[str], total: int) -> str:
    if name in common_required and len(entry.keys) == total:
        return "(always required)"
    if entry.required_in and len(entry.required_in) == len(entry.keys):
        return f"Required for: {', '.join(entry.required_in)}"
    if entry.required_in:
        optional = [k for k in entry.keys if k not in entry.required_in]
        note = f"Required for: {', '.join(entry.required_in)}"
        return f"{note}. For: {', '.join(optional)}" if optional else note
    return f"For: {', '.join(entry.keys)}"


def _annotate(prop: dict[str, Any], note: str) -> None:
    existing = prop.get("description")
    prop["description"] = f"{existing}. {note}" if existing else note
