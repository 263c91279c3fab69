"""
Derived Metric Composer for panelscore.

Computes composite values from consensus values (after aggregation,
never from per-rater derived values):

- Net values: positive - negative, e.g. debt introduced minus debt removed.
  A null operand counts as zero and the net value itself is never null.
- Commit score: a 1-10 composite of quality, complexity and estimation
  accuracy. Null when any input is null.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from ..dimensions import (
    ACTUAL_TIME_HOURS,
    CODE_COMPLEXITY,
    CODE_QUALITY,
    DEBT_REDUCTION_HOURS,
    IDEAL_TIME_HOURS,
    TECHNICAL_DEBT_HOURS,
)

logger = logging.getLogger(__name__)

NET_DEBT_HOURS = "net_debt_hours"
COMMIT_SCORE = "commit_score"


@dataclass(frozen=True)
class NetMetric:
    """A derived dimension defined as positive - negative."""
    name: str
    positive: str
    negative: str


DEFAULT_NET_METRICS: List[NetMetric] = [
    NetMetric(name=NET_DEBT_HOURS, positive=TECHNICAL_DEBT_HOURS, negative=DEBT_REDUCTION_HOURS),
]


def net_value(positive: Optional[float], negative: Optional[float]) -> float:
    """
    Difference of two consensus values.
    
    Null operands are treated as 0; the result is never None.
    """
    return (positive or 0.0) - (negative or 0.0)


def commit_score(
    quality: Optional[float],
    complexity: Optional[float],
    actual_hours: Optional[float],
    ideal_hours: Optional[float],
) -> Optional[float]:
    """
    Composite 1-10 score for a change.
        
        score = quality*0.4 - complexity*0.3 + estimation*0.3 + 3 - penalty
    
    estimation rewards actual effort close to the ideal estimate; penalty
    punishes high complexity or low quality on quick changes.
    
    Returns:
        Score clamped to [1, 10], or None when any input is None
    """
    if quality is None or complexity is None or actual_hours is None or ideal_hours is None:
        return None
    
    if ideal_hours > 0:
        estimation = max(0.0, 10 - abs(actual_hours - ideal_hours) / ideal_hours * 10)
    else:
        estimation = 5.0
    
    time_factor = 1 / (1 + actual_hours ** 2)
    complexity_penalty = (complexity / 10) ** 2 * time_factor * 4
    quality_penalty = ((10 - quality) / 10) ** 2 * time_factor * 4
    penalty = min(4.0, max(complexity_penalty, quality_penalty))
    
    score = quality * 0.4 - complexity * 0.3 + estimation * 0.3 + 3 - penalty
    return max(1.0, min(10.0, score))


class DerivedMetricComposer:
    """
    Builds derived values from a dimension -> consensus value mapping.
    
    Usage:
        composer = DerivedMetricComposer()
        derived = composer.compose({"technical_debt_hours": 6.0, "debt_reduction_hours": None})
        derived["net_debt_hours"]  # 6.0
    """
    
    def __init__(self, net_metrics: Optional[List[NetMetric]] = None):
        self.net_metrics = list(DEFAULT_NET_METRICS if net_metrics is None else net_metrics)
    
    def compose(self, consensus_values: Mapping[str, Optional[float]]) -> Dict[str, Optional[float]]:
        """
        Compute all derived values.
        
        Args:
            consensus_values: dimension -> consensus value (None allowed)
        
        Returns:
            Dictionary mapping derived name -> value
        """
        derived: Dict[str, Optional[float]] = {}
        
        for metric in self.net_metrics:
            positive = consensus_values.get(metric.positive)
            negative = consensus_values.get(metric.negative)
            if positive is None or negative is None:
                logger.debug(
                    f"[DERIVED] '{metric.name}' computed with null operand treated as 0 "
                    f"({metric.positive}={positive}, {metric.negative}={negative})"
                )
            derived[metric.name] = net_value(positive, negative)
        
        derived[COMMIT_SCORE] = commit_score(
            consensus_values.get(CODE_QUALITY),
            consensus_values.get(CODE_COMPLEXITY),
            consensus_values.get(ACTUAL_TIME_HOURS),
            consensus_values.get(IDEAL_TIME_HOURS),
        )
        
        return derived
