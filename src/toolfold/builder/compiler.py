"""Action compiler: declarative action model → wire tool + execution context.

Compilation runs once per builder. It produces:

- the `McpTool` a grouped server lists (description, discriminated input
  schema, aggregated annotations)
- an immutable `ExecutionContext` used by every call: action map, compiled
  middleware chains, per-action strict validation schemas and a pre-joined
  list of action keys for error messages, plus the optional payload byte limit
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from toolfold.foundation.errors import BuildError
from toolfold.foundation.logging import get_logger
from toolfold.middleware import Chain, Middleware, compile_chains
from toolfold.schema import (
    ActionSchema,
    DescriptionStrategy,
    aggregate_annotations,
    generate_description,
    generate_input_schema,
    merge_validation_schema,
)

from .action import ActionDefinition, check_unique_keys

if TYPE_CHECKING:
    from toolfold.schema import JsonSchema

log = get_logger("compiler")


class McpTool(BaseModel):
    """Compiled wire tool: ``{name, description, inputSchema, annotations?}``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: str
    input_schema: dict[str, Any] = Field(alias="inputSchema")
    annotations: dict[str, Any] | None = None

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


@dataclass(frozen=True, slots=True)
class ExecutionContext:
    """Per-builder dispatch state. Built once; never mutated afterwards."""

    action_map: Mapping[str, ActionDefinition]
    compiled_chain: Mapping[str, Chain]
    validation_schema_cache: Mapping[str, ActionSchema | None]
    discriminator: str
    tool_name: str
    action_keys_string: str
    max_payload_bytes: int | None = None


@dataclass(frozen=True, slots=True)
class CompilerInput:
    name: str
    actions: Sequence[ActionDefinition]
    discriminator: str = "action"
    middleware: Sequence[Middleware] = ()
    common_schema: ActionSchema | None = None
    annotations: Mapping[str, Any] | None = None
    has_group: bool = False
    description: str | None = None
    description_strategy: DescriptionStrategy = generate_description
    max_payload_bytes: int | None = None


@dataclass(frozen=True, slots=True)
class CompilerOutput:
    tool: McpTool
    context: ExecutionContext


def compile_tool_definition(inp: CompilerInput) -> CompilerOutput:
    """Compile a builder's actions.

    Raises:
        BuildError: No actions, duplicate keys, or conflicting field schemas
    """
    actions = tuple(inp.actions)
    if not actions:
        raise BuildError(f"Builder '{inp.name}' has no actions registered.", tool_name=inp.name)
    check_unique_keys(actions, inp.name)

    description = inp.description_strategy(actions, inp.name, inp.description, inp.has_group)
    input_schema: JsonSchema = generate_input_schema(actions, inp.discriminator, inp.has_group, inp.common_schema)
    annotations = aggregate_annotations(actions, inp.annotations)
    tool = McpTool(name=inp.name, description=description, input_schema=input_schema, annotations=annotations)

    validation = {a.key: merge_validation_schema(inp.common_schema, a.omit_common_fields, a.schema) for a in actions}
    chains = compile_chains(actions, inp.middleware)
    context = ExecutionContext(
        action_map=MappingProxyType({a.key: a for a in actions}),
        compiled_chain=MappingProxyType(chains),
        validation_schema_cache=MappingProxyType(validation),
        discriminator=inp.discriminator,
        tool_name=inp.name,
        action_keys_string=", ".join(a.key for a in actions),
        max_payload_bytes=inp.max_payload_bytes,
    )
    log.debug(f"Compiled tool '{inp.name}' with {len(actions)} action(s)")
    return CompilerOutput(tool=tool, context=context)
