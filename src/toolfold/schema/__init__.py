"""Schema handling: pydantic-backed schema handles, merging, JSON Schema generation.

- ActionSchema/Issue: Schema handle and normalized validation issue
- merge_validation_schema: Per-action strict validation schema
- aggregate_annotations: Tool behavior hints
- generate_input_schema: Grouped, discriminated input schema
- generate_description/generate_dense_description: Description strategies
"""

from .annotations import aggregate_annotations
from .descriptions import DescriptionStrategy, generate_dense_description, generate_description
from .generator import assert_field_compatibility, generate_input_schema
from .merger import apply_common_omit, merge_validation_schema
from .provider import ActionSchema, FieldSpec, Issue, JsonSchema, SchemaLike

__all__ = [
    "ActionSchema", "FieldSpec", "Issue", "JsonSchema", "SchemaLike",
    "apply_common_omit", "merge_validation_schema",
    "aggregate_annotations",
    "assert_field_compatibility", "generate_input_schema",
    "DescriptionStrategy", "generate_description", "generate_dense_description",
]
