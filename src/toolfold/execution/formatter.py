"""Validation issues → a correction prompt the model can act on.

Instead of a bare "validation failed", the caller gets one line per bad field
with what it sent and what is expected:

    ⚠️ VALIDATION FAILED — USERS/CREATE
      • workspace_id — (missing). Field required.
      • age — You sent: 10. Input should be greater than or equal to 18. Must be >= 18.
    💡 Fix the fields above and call the action again. Do not explain the error.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

import orjson

from toolfold.schema import Issue

_MISSING: Any = object()
_MAX_REPR = 50
_FOOTER = "💡 Fix the fields above and call the action again. Do not explain the error."
_QUOTED = re.compile(r"'([^']*)'")
_UNION_MESSAGE = "Value didn't match any of the expected formats."

_JSON_TYPES = {
    "string": "string",
    "int": "integer",
    "float": "number",
    "decimal": "number",
    "bool": "boolean",
    "list": "array",
    "tuple": "array",
    "set": "array",
    "dict": "object",
    "model": "object",
}

_FORMAT_HINTS = {
    "email": "Expected: a valid email address (e.g. user@example.com).",
    "url": "Expected: a valid URL (e.g. https://example.com).",
    "uuid": "Expected: a valid UUID (e.g. 123e4567-e89b-12d3-a456-426614174000).",
    "datetime": "Expected: an ISO 8601 datetime (e.g. 2024-01-15T10:30:00Z).",
    "date": "Expected: an ISO 8601 date (e.g. 2024-01-15).",
}


def format_validation_error(issues: Sequence[Issue], action_path: str, sent: Mapping[str, Any]) -> str:
    """Render issues in validator order under a banner naming the action.

    Issues raised by the branches of one union field share a single line.
    """
    lines = [f"⚠️ VALIDATION FAILED — {action_path.upper()}"]
    for path, group in group_issues(issues, sent):
        value = resolve_value(sent, path)
        if len(group) == 1:
            message, hint = _sentence(group[0].message), build_hint(group[0])
        else:
            message, hint = _UNION_MESSAGE, _union_hint(group)
        parts = ["(missing)" if value is _MISSING else f"You sent: {format_sent_value(value)}", message]
        if hint:
            parts.append(hint)
        location = ".".join(str(p) for p in path) if path else "(root)"
        lines.append(f"  • {location} — {'. '.join(p.rstrip('.') for p in parts)}.")
    lines.append(_FOOTER)
    return "\n".join(lines)


def split_branch_path(issue: Issue, sent: Mapping[str, Any]) -> tuple[tuple[str | int, ...], bool]:
    """Cut union branch tags (``int``, model names) off an issue path.

    Returns the path of the field the caller sent and whether a tag was cut.
    The first key is always a field of the action schema; deeper keys absent
    from the sent value count as fields only when trailing a ``missing`` issue.
    """
    current: Any = sent
    last = len(issue.path) - 1
    for i, key in enumerate(issue.path):
        if i == 0 or isinstance(current, Mapping) and (key in current or (i == last and issue.kind == "missing")):
            current = current.get(key) if isinstance(current, Mapping) else None
        elif isinstance(current, (list, tuple)) and isinstance(key, int) and -len(current) <= key < len(current):
            current = current[key]
        else:
            return issue.path[:i], True
    return issue.path, False


def group_issues(
    issues: Sequence[Issue], sent: Mapping[str, Any]
) -> list[tuple[tuple[str | int, ...], list[Issue]]]:
    """Pair each field path with its issues, merging union branches, in first-seen order."""
    groups: dict[Any, tuple[tuple[str | int, ...], list[Issue]]] = {}
    for n, issue in enumerate(issues):
        path, branch = split_branch_path(issue, sent)
        groups.setdefault(path if branch else n, (path, []))[1].append(issue)
    return list(groups.values())


def resolve_value(sent: Any, path: Sequence[str | int]) -> Any:
    """Walk ``path`` into the sent arguments; `_MISSING` when absent."""
    if not path:
        return _MISSING
    current = sent
    for key in path:
        if isinstance(current, Mapping) and key in current:
            current = current[key]
        elif isinstance(current, (list, tuple)) and isinstance(key, int) and -len(current) <= key < len(current):
            current = current[key]
        else:
            return _MISSING
    return current


def format_sent_value(value: Any) -> str:
    match value:
        case None:
            return "null"
        case bool():
            return "true" if value else "false"
        case int() | float():
            return str(value)
        case str():
            return f"'{value[:_MAX_REPR - 3]}...'" if len(value) > _MAX_REPR else f"'{value}'"
        case list() | tuple():
            return f"array({len(value)})"
    try:
        return orjson.dumps(value).decode()[:_MAX_REPR]
    except TypeError:
        return str(value)[:_MAX_REPR]


def build_hint(issue: Issue) -> str | None:
    """Targeted correction hint for one pydantic issue kind."""
    kind, ctx = issue.kind, issue.ctx
    match kind:
        case "missing":
            return None
        case "greater_than_equal":
            return f"Must be >= {ctx.get('ge')}."
        case "greater_than":
            return f"Must be > {ctx.get('gt')}."
        case "less_than_equal":
            return f"Must be <= {ctx.get('le')}."
        case "less_than":
            return f"Must be < {ctx.get('lt')}."
        case "string_too_short":
            return f"Minimum length: {_plural(ctx.get('min_length'), 'character')}."
        case "string_too_long":
            return f"Maximum length: {_plural(ctx.get('max_length'), 'character')}."
        case "too_short":
            return f"Minimum {_plural(ctx.get('min_length'), 'item')}."
        case "too_long":
            return f"Maximum {_plural(ctx.get('max_length'), 'item')}."
        case "literal_error" | "enum":
            expected = str(ctx.get("expected", ""))
            options = _QUOTED.findall(expected)
            return f"Valid options: {', '.join(repr(o) for o in options) if options else expected}."
        case "string_pattern_mismatch":
            return "Value does not match the required pattern."
        case "extra_forbidden":
            return "Remove or correct unrecognized field. Check for typos."
        case "value_error" if "email" in issue.message.lower():
            return _FORMAT_HINTS["email"]

    for prefix in ("url", "uuid", "datetime", "date"):
        if kind.startswith(f"{prefix}_"):
            return _FORMAT_HINTS[prefix]
    if expected := _expected_type(kind):
        return f"Expected type: {expected}."
    return None


def _expected_type(kind: str) -> str | None:
    base = kind.split("_", 1)[0]
    if kind.endswith(("_type", "_parsing")) or kind == "int_from_float":
        return _JSON_TYPES.get(base)
    return None


def _union_hint(group: Sequence[Issue]) -> str | None:
    expected = [t for t in dict.fromkeys(_expected_type(i.kind) for i in group) if t]
    return f"Expected type: {' or '.join(expected)}." if expected else None


def _plural(n: Any, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


def _sentence(text: str) -> str:
    return text[:1].upper() + text[1:] if text else text
