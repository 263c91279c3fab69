"""
Rater outputs for panelscore.

- RaterOutput / TokenUsage: immutable per-round rater contributions
- parse_rater_output: pydantic-validated boundary parser for JSON payloads
"""

from .rater_output import RaterOutput, TokenUsage
from .payload import (
    RaterPayload,
    TokenUsagePayload,
    coerce_value,
    parse_rater_output,
    parse_rater_outputs,
)

__all__ = [
    "RaterOutput",
    "TokenUsage",
    "RaterPayload",
    "TokenUsagePayload",
    "coerce_value",
    "parse_rater_output",
    "parse_rater_outputs",
]
