"""Presenters: per-action response shaping.

A presenter validates what a handler returned against a view schema
(unknown fields are stripped), then renders it through a `ResponseBuilder`
with rules and hints attached. Actions declare one with ``presenter=``; the
post-processor applies it to raw handler results.

Example:
    >>> from pydantic import BaseModel
    >>> class ProjectView(BaseModel):
    ...     id: str
    ...     name: str
    >>> projects = Presenter("Project", ProjectView, rules=["Show names, not IDs."])
    >>> projects.make({"id": "p1", "name": "Apollo", "secret": "x"}).build().content[0].text
    '{\\n  "id": "p1",\\n  "name": "Apollo"\\n}'
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Any

from toolfold.schema import ActionSchema, Issue, SchemaLike

from .builder import ResponseBuilder

RuleSource = Sequence[str] | Callable[[Any, Any], Iterable[str | None]]


class PresenterValidationError(Exception):
    """Handler output does not match the presenter's view schema.

    This is a server-side defect (the handler returned bad data), so it
    propagates instead of becoming a caller-facing error response.
    """

    __slots__ = ("presenter", "issues")

    def __init__(self, presenter: str, issues: list[Issue]) -> None:
        self.presenter = presenter
        self.issues = issues
        detail = "; ".join(f"{i.location}: {i.message}" for i in issues)
        super().__init__(f"Presenter '{presenter}' rejected handler output: {detail}")


class Presenter:
    """Validate-and-render collaborator for handler results.

    Args:
        name: Presenter name (used in errors)
        schema: View schema; each item (or the single value) is validated and stripped
        rules: Static rule strings, or ``(data, ctx) -> rules`` (None entries dropped)
        hints: Static hints appended to every response
    """

    __slots__ = ("name", "schema", "_rules", "_hints")

    def __init__(
        self,
        name: str,
        schema: SchemaLike | None = None,
        *,
        rules: RuleSource = (),
        hints: Sequence[str] = (),
    ) -> None:
        self.name = name
        self.schema = ActionSchema.coerce(schema, name=f"{name}View")
        self._rules = rules
        self._hints = tuple(hints)

    def _validate(self, item: Any) -> Any:
        if self.schema is None:
            return item
        result = self.schema.safe_validate(item)
        if result.is_err():
            raise PresenterValidationError(self.name, result.unwrap_err())
        return result.unwrap()

    def _compile_rules(self, data: Any, ctx: Any) -> list[str]:
        if callable(self._rules):
            return [r for r in self._rules(data, ctx) if r is not None]
        return list(self._rules)

    def make(self, data: Any, ctx: Any = None) -> ResponseBuilder:
        """Validate ``data`` and return a builder carrying it plus rules and hints."""
        shaped = [self._validate(i) for i in data] if isinstance(data, (list, tuple)) else self._validate(data)
        builder = ResponseBuilder().data(shaped)
        for hint in self._hints:
            builder.hint(hint)
        if rules := self._compile_rules(shaped, ctx):
            builder.rules(rules)
        return builder

    def __repr__(self) -> str:
        return f"Presenter({self.name!r})"
