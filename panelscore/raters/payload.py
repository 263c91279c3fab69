"""
Rater payload parsing for panelscore.

Turns the JSON-shaped output of the rater-invocation layer into a
RaterOutput. This is the system boundary: rater names and dimension names
are canonicalized here, and nowhere else.

Value handling:
- numbers and numeric strings become floats
- None, booleans, NaN and markers like "unknown" / "n/a" become None (abstain)

Range validation is not done here; values outside the
expected scale are accepted as-is.
"""

import logging
import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..dimensions import canonical_dimension_name, is_known_dimension
from ..errors import RaterPayloadError
from ..weights import WeightRegistry, get_weight_registry
from .rater_output import RaterOutput, TokenUsage

logger = logging.getLogger(__name__)

ABSTAIN_MARKERS = frozenset({"", "null", "none", "unknown", "n/a", "na", "abstain", "-"})


class TokenUsagePayload(BaseModel):
    """Token usage as reported by the rater-invocation layer."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")
    
    input_tokens: int = Field(default=0, ge=0, alias="inputTokens")
    output_tokens: int = Field(default=0, ge=0, alias="outputTokens")


class RaterPayload(BaseModel):
    """Structured rater payload (camelCase or snake_case keys)."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")
    
    agent_name: Optional[str] = Field(default=None, alias="agentName")
    agent_role: Optional[str] = Field(default=None, alias="agentRole")
    metrics: Dict[str, Any] = Field(default_factory=dict)
    summary: str = ""
    details: str = ""
    concerns: List[str] = Field(default_factory=list)
    round: Optional[int] = Field(default=None, ge=1)
    token_usage: Optional[TokenUsagePayload] = Field(default=None, alias="tokenUsage")


def coerce_value(raw: Any) -> Optional[float]:
    """
    Coerce one reported value into a float or None (abstain).
    
    Args:
        raw: Value as found in the payload
    
    Returns:
        Float value, or None when the rater abstained or the value is not numeric
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
        return None if math.isnan(value) else value
    if isinstance(raw, str):
        text = raw.strip()
        if text.lower() in ABSTAIN_MARKERS:
            return None
        try:
            value = float(text)
        except ValueError:
            logger.warning(f"[RATERS] Non-numeric value '{raw}' treated as abstention")
            return None
        return None if math.isnan(value) else value
    
    logger.warning(f"[RATERS] Unsupported value type {type(raw).__name__} treated as abstention")
    return None


def parse_rater_output(
    payload: Dict[str, Any],
    round_number: Optional[int] = None,
    registry: Optional[WeightRegistry] = None,
) -> RaterOutput:
    """
    Parse a rater payload into a RaterOutput.
    
    Args:
        payload: JSON-shaped dict from the rater-invocation layer
        round_number: Explicit round, overrides any round in the payload
        registry: Registry used for rater canonicalization (global if None)
    
    Returns:
        Immutable RaterOutput with canonical rater and dimension names
    
    Raises:
        RaterPayloadError: If the payload fails validation or names no rater
    """
    try:
        parsed = RaterPayload.model_validate(payload)
    except ValidationError as e:
        raise RaterPayloadError(f"Invalid rater payload: {e}", cause=e) from e
    
    registry = registry or get_weight_registry()
    
    # The role is the technical key; the name is for display
    raw_name = parsed.agent_role or parsed.agent_name
    if not raw_name:
        raise RaterPayloadError("Rater payload names no agentRole or agentName")
    rater = registry.canonicalize(raw_name)
    
    values: Dict[str, Optional[float]] = {}
    for name, raw in parsed.metrics.items():
        dimension = canonical_dimension_name(name)
        if not is_known_dimension(dimension):
            logger.debug(f"[RATERS] Ignoring unknown dimension '{name}' from {rater}")
            continue
        values[dimension] = coerce_value(raw)
    
    token_usage = None
    if parsed.token_usage is not None:
        token_usage = TokenUsage(
            input_tokens=parsed.token_usage.input_tokens,
            output_tokens=parsed.token_usage.output_tokens,
        )
    
    rationale = parsed.summary
    if parsed.details:
        rationale = f"{rationale}\n\n{parsed.details}" if rationale else parsed.details
    
    return RaterOutput(
        rater=rater,
        values=values,
        rationale=rationale,
        concerns=tuple(parsed.concerns),
        round=round_number if round_number is not None else parsed.round,
        display_name=parsed.agent_name or registry.display_name(rater),
        token_usage=token_usage,
    )


def parse_rater_outputs(
    payloads: List[Dict[str, Any]],
    registry: Optional[WeightRegistry] = None,
) -> List[RaterOutput]:
    """Parse a time-ordered list of rater payloads, preserving order."""
    return [parse_rater_output(p, registry=registry) for p in payloads]
