"""
Rater outputs for panelscore.

A RaterOutput is one rater's contribution at one point of the evaluation
sequence. It is produced by the rater-invocation layer, never mutated
afterwards, and consumed by the evolution tracker and the consensus
calculator.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class TokenUsage:
    """Tokens consumed by one rater call."""
    input_tokens: int = 0
    output_tokens: int = 0
    
    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens
    
    def to_dict(self) -> Dict[str, int]:
        return {
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
            "total_tokens": self.total_tokens,
        }


@dataclass(frozen=True)
class RaterOutput:
    """
    One rater's scores for one round.
    
    Attributes:
        rater: Canonical rater key
        values: dimension -> value, None meaning the rater abstained
        rationale: Free-text summary/rationale (opaque to the core)
        concerns: Concerns raised by the rater (opaque to the core)
        round: Explicit round number (1-based), None when it must be inferred
        display_name: Name shown in reports, if different from the key
        token_usage: Tokens consumed producing this output
    """
    rater: str
    values: Dict[str, Optional[float]] = field(default_factory=dict)
    rationale: str = ""
    concerns: Tuple[str, ...] = ()
    round: Optional[int] = None
    display_name: Optional[str] = None
    token_usage: Optional[TokenUsage] = None
    
    def __post_init__(self):
        if self.round is not None and self.round < 1:
            raise ValueError(f"Round must be >= 1, got {self.round}")
        # values and concerns never alias the caller's containers
        object.__setattr__(self, "values", dict(self.values))
        object.__setattr__(self, "concerns", tuple(self.concerns))
    
    def value(self, dimension: str) -> Optional[float]:
        """Value for a dimension; None when abstained or not reported."""
        return self.values.get(dimension)
    
    def abstained(self, dimension: str) -> bool:
        return self.values.get(dimension) is None
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "rater": self.rater,
            "display_name": self.display_name,
            "round": self.round,
            "values": dict(self.values),
            "rationale": self.rationale,
            "concerns": list(self.concerns),
            "token_usage": self.token_usage.to_dict() if self.token_usage else None,
        }
