"""Call dispatch: discriminator resolution, validation, chain execution.

- execute: Full dispatch for one call against a compiled builder
- parse_discriminator/resolve_action/validate_args/run_chain: Individual steps
- format_validation_error: Issues → correction prompt
"""

from .formatter import format_sent_value, format_validation_error
from .pipeline import ResolvedCall, execute, parse_discriminator, resolve_action, run_chain, validate_args

__all__ = [
    "execute", "parse_discriminator", "resolve_action", "validate_args", "run_chain", "ResolvedCall",
    "format_validation_error", "format_sent_value",
]
