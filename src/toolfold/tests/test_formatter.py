"""Tests for the validation error formatter.

Issues come from real pydantic validation so the hints track the validator's
actual error kinds and context.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

import pytest
from pydantic import BaseModel, ConfigDict, Field, HttpUrl

from toolfold.execution import format_sent_value, format_validation_error
from toolfold.execution.formatter import _MISSING, resolve_value
from toolfold.schema import ActionSchema

FOOTER = "💡 Fix the fields above and call the action again. Do not explain the error."


class CreateUser(BaseModel):
    model_config = ConfigDict(extra="forbid")

    workspace_id: str
    name: str = Field(default="Ada", min_length=2, max_length=5)
    age: int = Field(default=30, ge=18)
    role: Literal["admin", "member"] = "member"
    tags: list[str] = Field(default_factory=list, max_length=2)
    active: bool = True
    slug: str = Field(default="ada", pattern=r"^[a-z]+$")


class Links(BaseModel):
    homepage: HttpUrl | None = None
    request_id: UUID | None = None
    due: datetime | None = None


class Measure(BaseModel):
    x: int | float
    y: str = "y"


class Cat(BaseModel):
    meows: int


class Dog(BaseModel):
    barks: int


class Adoption(BaseModel):
    pet: Cat | Dog


class Address(BaseModel):
    city: str


class Shipment(BaseModel):
    address: Address


def render(model: type[BaseModel], sent: dict[str, Any], path: str = "users/create") -> list[str]:
    issues = ActionSchema(model).safe_validate(sent).unwrap_err()
    return format_validation_error(issues, path, sent).split("\n")


def field_line(model: type[BaseModel], sent: dict[str, Any]) -> str:
    lines = render(model, sent)
    assert len(lines) == 3, lines
    return lines[1]


# ═════════════════════════════════════════════════════════════════════════════
# Layout
# ═════════════════════════════════════════════════════════════════════════════


def test_banner_lines_and_footer_in_issue_order() -> None:
    lines = render(CreateUser, {"age": 10, "name": "Bo"})
    assert lines == [
        "⚠️ VALIDATION FAILED — USERS/CREATE",
        "  • workspace_id — (missing). Field required.",
        "  • age — You sent: 10. Input should be greater than or equal to 18. Must be >= 18.",
        FOOTER,
    ]


def test_missing_field_is_marked_and_others_show_sent_value() -> None:
    lines = render(CreateUser, {"name": "X"})
    assert "  • workspace_id — (missing). Field required." in lines
    assert any(line.startswith("  • name — You sent: 'X'.") for line in lines)


# ═════════════════════════════════════════════════════════════════════════════
# Hints
# ═════════════════════════════════════════════════════════════════════════════


def test_type_hint() -> None:
    line = field_line(CreateUser, {"workspace_id": "w1", "age": "abc"})
    assert line.startswith("  • age — You sent: 'abc'.")
    assert line.endswith("Expected type: integer.")


def test_float_for_int_hint() -> None:
    assert field_line(CreateUser, {"workspace_id": "w1", "age": 18.5}).endswith("Expected type: integer.")


def test_bool_hint() -> None:
    assert field_line(CreateUser, {"workspace_id": "w1", "active": "maybe"}).endswith("Expected type: boolean.")


def test_string_length_hints() -> None:
    assert field_line(CreateUser, {"workspace_id": "w1", "name": "A"}).endswith("Minimum length: 2 characters.")
    assert field_line(CreateUser, {"workspace_id": "w1", "name": "Alexandra"}).endswith("Maximum length: 5 characters.")


def test_list_length_hint_and_array_repr() -> None:
    line = field_line(CreateUser, {"workspace_id": "w1", "tags": ["a", "b", "c"]})
    assert line.startswith("  • tags — You sent: array(3).")
    assert line.endswith("Maximum 2 items.")


def test_literal_hint_lists_options() -> None:
    line = field_line(CreateUser, {"workspace_id": "w1", "role": "owner"})
    assert line.endswith("Valid options: 'admin', 'member'.")


def test_pattern_hint() -> None:
    line = field_line(CreateUser, {"workspace_id": "w1", "slug": "ADA"})
    assert line.endswith("Value does not match the required pattern.")


def test_unknown_field_hint() -> None:
    line = field_line(CreateUser, {"workspace_id": "w1", "nmae": "Ada"})
    assert line == (
        "  • nmae — You sent: 'Ada'. Extra inputs are not permitted. "
        "Remove or correct unrecognized field. Check for typos."
    )


def test_format_hints() -> None:
    assert "a valid URL" in field_line(Links, {"homepage": "not a url"})
    assert "a valid UUID" in field_line(Links, {"request_id": "xyz"})
    assert "ISO 8601 datetime" in field_line(Links, {"due": "someday"})


def test_email_hint() -> None:
    pytest.importorskip("email_validator")
    from pydantic import EmailStr

    invite = ActionSchema.from_fields({"email": EmailStr}).model
    assert field_line(invite, {"email": "nobody"}).endswith("Expected: a valid email address (e.g. user@example.com).")


# ═════════════════════════════════════════════════════════════════════════════
# Unions
# ═════════════════════════════════════════════════════════════════════════════


def test_union_branches_share_one_line_with_sent_value() -> None:
    assert field_line(Measure, {"x": "abc"}) == (
        "  • x — You sent: 'abc'. Value didn't match any of the expected formats. Expected type: integer or number."
    )


def test_union_of_models_reports_the_field_not_the_branch() -> None:
    line = field_line(Adoption, {"pet": {"meows": "loud"}})
    assert line.startswith('  • pet — You sent: {"meows":"loud"}. Value didn\'t match any of the expected formats.')
    assert "Cat" not in line and "Dog" not in line


def test_nested_missing_field_keeps_its_path() -> None:
    assert field_line(Shipment, {"address": {}}) == "  • address.city — (missing). Field required."


# ═════════════════════════════════════════════════════════════════════════════
# Sent values
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, "null"),
        (True, "true"),
        (False, "false"),
        (10, "10"),
        (2.5, "2.5"),
        ("abc", "'abc'"),
        ([1, 2], "array(2)"),
        ((1,), "array(1)"),
        ({"a": 1}, '{"a":1}'),
    ],
)
def test_format_sent_value(value: Any, expected: str) -> None:
    assert format_sent_value(value) == expected


def test_long_strings_are_truncated() -> None:
    rendered = format_sent_value("x" * 80)
    assert rendered == "'" + "x" * 47 + "...'"


def test_resolve_value_walks_nested_paths() -> None:
    sent = {"items": [{"name": 5}]}
    assert resolve_value(sent, ("items", 0, "name")) == 5
    assert resolve_value({"items": ({"name": 5},)}, ("items", 0, "name")) == 5
    assert resolve_value(sent, ("items", 3, "name")) is _MISSING
    assert resolve_value(sent, ()) is _MISSING
