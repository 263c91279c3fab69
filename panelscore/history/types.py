"""
History types for panelscore.

The persisted format is additive: every field read by from_dict() has a
default, so documents written before a field existed stay readable.
Keys are read in snake_case or camelCase.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional

from ..dimensions import canonical_dimension_name
from ..raters import RaterOutput

logger = logging.getLogger(__name__)


def _get(data: Dict[str, Any], snake: str, camel: str, default: Any) -> Any:
    if snake in data:
        return data[snake]
    return data.get(camel, default)


@dataclass(frozen=True)
class TokenSnapshot:
    """
    Token volume and estimated cost of one evaluation.
    
    Attributes:
        input_tokens: Prompt tokens across all rater calls
        output_tokens: Completion tokens across all rater calls
        total_tokens: input_tokens + output_tokens
        total_cost: Estimated USD cost, rounded to 4 decimals
    """
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    total_cost: float = 0.0
    
    @classmethod
    def from_outputs(
        cls,
        outputs: Iterable[RaterOutput],
        input_price_per_million: float = 3.0,
        output_price_per_million: float = 15.0,
    ) -> "TokenSnapshot":
        """
        Sum token usage over rater outputs and estimate the cost.
        
        Outputs without token usage count as zero.
        """
        input_tokens = 0
        output_tokens = 0
        for output in outputs:
            if output.token_usage:
                input_tokens += output.token_usage.input_tokens
                output_tokens += output.token_usage.output_tokens
        
        cost = (
            input_tokens / 1_000_000 * input_price_per_million
            + output_tokens / 1_000_000 * output_price_per_million
        )
        return cls(
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            total_tokens=input_tokens + output_tokens,
            total_cost=round(cost, 4),
        )
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
            "total_tokens": self.total_tokens,
            "total_cost": self.total_cost,
        }
    
    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "TokenSnapshot":
        data = data or {}
        input_tokens = int(_get(data, "input_tokens", "inputTokens", 0) or 0)
        output_tokens = int(_get(data, "output_tokens", "outputTokens", 0) or 0)
        return cls(
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            total_tokens=int(
                _get(data, "total_tokens", "totalTokens", input_tokens + output_tokens) or 0
            ),
            total_cost=float(_get(data, "total_cost", "totalCost", 0.0) or 0.0),
        )


@dataclass
class EvaluationSnapshot:
    """
    What a caller hands to the ledger for one evaluation.
    
    Attributes:
        metrics: dimension -> consensus value (None kept as None)
        tokens: Token/cost snapshot
        convergence_score: Final-round convergence score
        derived: derived name -> value
        source: Label of what triggered the evaluation
        timestamp: Evaluation time (now if None)
    """
    metrics: Dict[str, Optional[float]] = field(default_factory=dict)
    tokens: TokenSnapshot = field(default_factory=TokenSnapshot)
    convergence_score: float = 0.0
    derived: Dict[str, Optional[float]] = field(default_factory=dict)
    source: str = "unknown"
    timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class HistoryEntry:
    """
    One persisted evaluation of a subject.
    
    Attributes:
        timestamp: ISO-8601 evaluation time
        source: Label of what triggered the evaluation
        evaluation_number: 1-based position in the subject's history
        metrics: dimension -> presented consensus value (None when all abstained)
        tokens: Token/cost snapshot
        convergence_score: Final-round convergence score
        derived: derived name -> value
    """
    timestamp: str
    source: str
    evaluation_number: int
    metrics: Dict[str, Optional[float]] = field(default_factory=dict)
    tokens: TokenSnapshot = field(default_factory=TokenSnapshot)
    convergence_score: float = 0.0
    derived: Dict[str, Optional[float]] = field(default_factory=dict)
    
    @property
    def timestamp_dt(self) -> Optional[datetime]:
        """Parsed timestamp, None if it cannot be parsed."""
        text = self.timestamp
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return None
    
    @classmethod
    def from_snapshot(cls, snapshot: EvaluationSnapshot, evaluation_number: int) -> "HistoryEntry":
        timestamp = snapshot.timestamp or datetime.now(timezone.utc)
        return cls(
            timestamp=timestamp.isoformat(),
            source=snapshot.source or "unknown",
            evaluation_number=evaluation_number,
            metrics=dict(snapshot.metrics),
            tokens=snapshot.tokens,
            convergence_score=snapshot.convergence_score,
            derived=dict(snapshot.derived),
        )
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "source": self.source,
            "evaluation_number": self.evaluation_number,
            "metrics": dict(self.metrics),
            "tokens": self.tokens.to_dict(),
            "convergence_score": self.convergence_score,
            "derived": dict(self.derived),
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any], position: int = 0) -> "HistoryEntry":
        """
        Create from a stored dictionary.
        
        Args:
            data: Stored entry
            position: 1-based position in the document, used when the entry
                carries no evaluation number
        """
        metrics = {
            canonical_dimension_name(k): v
            for k, v in (data.get("metrics") or {}).items()
        }
        derived = {
            canonical_dimension_name(k): v
            for k, v in (data.get("derived") or {}).items()
        }
        return cls(
            timestamp=str(data.get("timestamp", "")),
            source=str(data.get("source", "unknown")),
            evaluation_number=int(
                _get(data, "evaluation_number", "evaluationNumber", position) or position
            ),
            metrics=metrics,
            tokens=TokenSnapshot.from_dict(data.get("tokens")),
            convergence_score=float(
                _get(data, "convergence_score", "convergenceScore", 0.0) or 0.0
            ),
            derived=derived,
        )
