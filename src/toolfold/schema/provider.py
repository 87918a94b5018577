"""Schema handles backed by pydantic models.

An `ActionSchema` wraps a pydantic model class and exposes the handful of
operations the compiler needs: JSON Schema rendering, field omission, merging,
strict mode (reject unknown fields) and non-raising validation that yields
normalized `Issue` records.

Schemas can be declared as a model class or as a plain field map:

    >>> from pydantic import BaseModel, Field
    >>> class CreateArgs(BaseModel):
    ...     name: str
    >>> ActionSchema.coerce(CreateArgs).field_names
    ('name',)
    >>> ActionSchema.coerce({"age": (int, Field(ge=18)), "nick": (str | None, None)}).required_fields()
    ['age']

Field constraints survive every operation. Model-level validators survive
`merge` and `strict` (both subclass), but not `omit`, which rebuilds the
model from the remaining fields.
"""

from __future__ import annotations

import types
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, ValidationError, create_model
from pydantic.fields import FieldInfo
from pydantic.json_schema import GenerateJsonSchema

from toolfold.foundation.errors import Err, Ok, Result

FieldSpec: TypeAlias = "type | tuple[Any, Any]"
SchemaLike: TypeAlias = "ActionSchema | type[BaseModel] | Mapping[str, FieldSpec]"
JsonSchema: TypeAlias = dict[str, Any]


class _UntitledSchema(GenerateJsonSchema):
    """Skip the auto-generated per-property ``title`` keys."""

    def field_title_should_be_set(self, schema: Any) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class Issue:
    """One validator complaint, normalized from a pydantic error record.

    Attributes:
        path: Location of the offending value (field names and list indexes)
        kind: Pydantic error type (``missing``, ``int_parsing``, ...)
        message: Validator message
        ctx: Error context (bounds, expected values, patterns)
    """

    path: tuple[str | int, ...]
    kind: str
    message: str
    ctx: Mapping[str, Any] = field(default_factory=dict)

    @property
    def location(self) -> str:
        return ".".join(str(p) for p in self.path) if self.path else "(root)"

    @classmethod
    def from_pydantic(cls, error: Mapping[str, Any]) -> Issue:
        return cls(
            path=tuple(error.get("loc", ())),
            kind=error.get("type", "value_error"),
            message=error.get("msg", "Invalid value"),
            ctx=dict(error.get("ctx") or {}),
        )


class ActionSchema:
    """Immutable schema handle over a pydantic model class."""

    __slots__ = ("model",)

    def __init__(self, model: type[BaseModel]) -> None:
        if not (isinstance(model, type) and issubclass(model, BaseModel)):
            raise TypeError(f"ActionSchema requires a pydantic model class, got {model!r}")
        self.model = model

    # ─────────────────────────────────────────────────────────────────
    # Construction
    # ─────────────────────────────────────────────────────────────────

    @classmethod
    def from_model(cls, model: type[BaseModel]) -> ActionSchema:
        return cls(model)

    @classmethod
    def from_fields(cls, fields: Mapping[str, FieldSpec], *, name: str = "Args") -> ActionSchema:
        """Build from a field map; bare types are required fields."""
        definitions = {k: v if isinstance(v, tuple) else (v, ...) for k, v in fields.items()}
        return cls(create_model(name, **definitions))  # type: ignore[call-overload]

    @classmethod
    def coerce(cls, value: SchemaLike | None, *, name: str = "Args") -> ActionSchema | None:
        """Normalize any accepted schema declaration (or None)."""
        if value is None or isinstance(value, ActionSchema):
            return value
        if isinstance(value, type) and issubclass(value, BaseModel):
            return cls.from_model(value)
        if isinstance(value, Mapping):
            return cls.from_fields(value, name=name)
        raise TypeError(f"Unsupported schema declaration: {value!r}")

    # ─────────────────────────────────────────────────────────────────
    # Inspection
    # ─────────────────────────────────────────────────────────────────

    @property
    def fields(self) -> Mapping[str, FieldInfo]:
        return self.model.model_fields

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(self.model.model_fields)

    @property
    def is_strict(self) -> bool:
        return self.model.model_config.get("extra") == "forbid"

    def required_fields(self) -> list[str]:
        return [k for k, f in self.model.model_fields.items() if f.is_required()]

    def to_json_schema(self) -> JsonSchema:
        """Render as an object JSON Schema (nested models under ``$defs``)."""
        schema = self.model.model_json_schema(schema_generator=_UntitledSchema)
        schema.pop("title", None)
        schema.setdefault("properties", {})
        return schema

    # ─────────────────────────────────────────────────────────────────
    # Derivation
    # ─────────────────────────────────────────────────────────────────

    def omit(self, names: Iterable[str]) -> ActionSchema | None:
        """Drop fields by name. Returns None when nothing remains."""
        drop = set(names) & set(self.model.model_fields)
        if not drop:
            return self
        kept = {k: (f.annotation, f) for k, f in self.model.model_fields.items() if k not in drop}
        if not kept:
            return None
        config = ConfigDict(extra="forbid") if self.is_strict else None
        return ActionSchema(create_model(self.model.__name__, __config__=config, **kept))  # type: ignore[call-overload]

    def merge(self, other: ActionSchema) -> ActionSchema:
        """Combine fields; ``other`` wins on name collisions."""
        return ActionSchema(_subclass(f"{other.model.__name__}With{self.model.__name__}", (other.model, self.model)))

    def strict(self) -> ActionSchema:
        """Reject unknown fields."""
        if self.is_strict:
            return self
        return ActionSchema(_subclass(self.model.__name__, (self.model,), ConfigDict(extra="forbid")))

    # ─────────────────────────────────────────────────────────────────
    # Validation
    # ─────────────────────────────────────────────────────────────────

    def safe_validate(self, value: object) -> Result[dict[str, Any], list[Issue]]:
        """Validate without raising: Ok(clean dict) or Err(issues)."""
        try:
            instance = self.model.model_validate(value)
        except ValidationError as exc:
            return Err([Issue.from_pydantic(e) for e in exc.errors(include_url=False)])
        return Ok(instance.model_dump())

    def __repr__(self) -> str:
        return f"ActionSchema({self.model.__name__}, fields={list(self.field_names)})"


def _subclass(name: str, bases: tuple[type[BaseModel], ...], config: ConfigDict | None = None) -> type[BaseModel]:
    def body(ns: dict[str, Any]) -> None:
        ns["__module__"] = __name__
        if config is not None:
            ns["model_config"] = config

    return types.new_class(name, bases, exec_body=body)
