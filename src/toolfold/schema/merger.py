"""Per-action validation schema: common fields (minus omissions) + own fields."""

from __future__ import annotations

from collections.abc import Iterable

from .provider import ActionSchema


def apply_common_omit(common: ActionSchema | None, omit_fields: Iterable[str] = ()) -> ActionSchema | None:
    """Strip omitted fields from the common schema.

    Names missing from the common schema are ignored. When every field is
    omitted the common contribution disappears (None).
    """
    if common is None:
        return None
    omit = tuple(omit_fields)
    return common.omit(omit) if omit else common


def merge_validation_schema(
    common: ActionSchema | None,
    omit_fields: Iterable[str],
    specific: ActionSchema | None,
) -> ActionSchema | None:
    """Build the strict schema one action validates against.

    Returns None when neither side contributes, meaning arguments pass
    through unvalidated. Action-specific fields override common fields of the
    same name.
    """
    base = apply_common_omit(common, omit_fields)
    if base is None and specific is None:
        return None
    if base is None:
        return specific.strict()  # type: ignore[union-attr]
    if specific is None:
        return base.strict()
    return base.merge(specific).strict()
