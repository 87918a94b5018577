"""Dispatch steps for a single call.

Each step returns ``Ok(next_input)`` or ``Err(ToolResponse)``; the builder
chains them with `Result.flat_map` so caller mistakes short-circuit into an
error response without raising. Only the final step can raise: handler and
middleware exceptions propagate to the transport.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from toolfold.foundation.errors import Err, ErrorCode, Ok, Result
from toolfold.foundation.logging import get_logger
from toolfold.response import ToolResponse, apply_egress_guard, post_process_result, tool_error

from .formatter import format_validation_error

if TYPE_CHECKING:
    from toolfold.builder.action import ActionDefinition
    from toolfold.builder.compiler import ExecutionContext

log = get_logger("execution")


@dataclass(frozen=True, slots=True)
class ResolvedCall:
    """A call whose action is known and whose arguments are validated."""

    action: ActionDefinition
    args: dict[str, Any]


def parse_discriminator(ec: ExecutionContext, args: Mapping[str, Any]) -> Result[str, ToolResponse]:
    value = args.get(ec.discriminator)
    if isinstance(value, str) and value:
        return Ok(value)
    log.debug(f"[{ec.tool_name}] missing discriminator '{ec.discriminator}'")
    return Err(tool_error(
        ErrorCode.MISSING_DISCRIMINATOR,
        f'The required field "{ec.discriminator}" is missing.',
        suggestion=f'Set "{ec.discriminator}" to one of: {ec.action_keys_string}',
        available_actions=list(ec.action_map),
    ))


def resolve_action(ec: ExecutionContext, key: str) -> Result[ActionDefinition, ToolResponse]:
    if (action := ec.action_map.get(key)) is not None:
        return Ok(action)
    log.debug(f"[{ec.tool_name}] unknown action '{key}'")
    return Err(tool_error(
        ErrorCode.UNKNOWN_ACTION,
        f'The action "{key}" does not exist.',
        suggestion=f"Available actions: {ec.action_keys_string}",
        available_actions=list(ec.action_map),
    ))


def validate_args(
    ec: ExecutionContext, action: ActionDefinition, args: Mapping[str, Any]
) -> Result[ResolvedCall, ToolResponse]:
    """Validate everything except the discriminator, then put it back."""
    schema = ec.validation_schema_cache.get(action.key)
    if schema is None:
        return Ok(ResolvedCall(action, dict(args)))

    payload = {k: v for k, v in args.items() if k != ec.discriminator}
    result = schema.safe_validate(payload)
    if result.is_err():
        issues = result.unwrap_err()
        log.debug(f"[{ec.tool_name}/{action.key}] validation failed with {len(issues)} issue(s)")
        message = format_validation_error(issues, f"{ec.tool_name}/{action.key}", payload)
        return Err(ToolResponse.of_text(message, is_error=True))
    return Ok(ResolvedCall(action, {**result.unwrap(), ec.discriminator: action.key}))


async def run_chain(ec: ExecutionContext, ctx: Any, call: ResolvedCall) -> ToolResponse:
    chain = ec.compiled_chain[call.action.key]
    value = await chain(ctx, call.args)
    response = post_process_result(value, call.action.presenter, ctx)
    if ec.max_payload_bytes is not None:
        return apply_egress_guard(response, ec.max_payload_bytes)
    return response


async def execute(ec: ExecutionContext, ctx: Any, args: Mapping[str, Any] | None) -> ToolResponse:
    """Resolve, validate, run and shape one call."""
    args = args or {}
    resolved = (
        parse_discriminator(ec, args)
        .flat_map(lambda key: resolve_action(ec, key))
        .flat_map(lambda action: validate_args(ec, action, args))
    )
    if resolved.is_err():
        return resolved.unwrap_err()
    return await run_chain(ec, ctx, resolved.unwrap())
