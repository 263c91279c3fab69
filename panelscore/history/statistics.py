"""
History statistics for panelscore.

Per-dimension statistics over a subject's evaluation history, plus the
convergence score and token cost across evaluations.

Entries written before a dimension existed have no key for it. They are
brought to the current shape by fill_missing_dimensions() (missing -> 0.0)
before any statistic is computed. A stored None is an abstention and is
excluded from the statistics.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from ..config import get_panel_config
from ..dimensions import Polarity, dimension_names, get_dimension, is_known_dimension
from .types import HistoryEntry

logger = logging.getLogger(__name__)

INCREASING = "increasing"
DECREASING = "decreasing"
STABLE = "stable"


def fill_missing_dimensions(
    metrics: Dict[str, Optional[float]],
    dimensions: Sequence[str],
    default: float = 0.0,
) -> Dict[str, Optional[float]]:
    """
    Return a copy of metrics with every dimension present.
    
    Missing keys get the default; keys holding None keep None.
    """
    filled = dict(metrics)
    for dimension in dimensions:
        if dimension not in filled:
            filled[dimension] = default
    return filled


def trend_direction(trend: float, threshold: float) -> str:
    if trend > threshold:
        return INCREASING
    if trend < -threshold:
        return DECREASING
    return STABLE


@dataclass(frozen=True)
class DimensionStatistics:
    """
    Statistics of one dimension across a history.
    
    Attributes:
        dimension: Dimension name
        values: Non-null values in evaluation order
        average: Mean value
        median: Median value
        std_dev: Population standard deviation
        minimum: Smallest value
        maximum: Largest value
        range: maximum - minimum
        trend: last value - first value
        direction: "increasing", "decreasing" or "stable"
        improving: Whether the direction is favourable for the dimension's
            polarity (None for neutral dimensions)
    """
    dimension: str
    values: List[float] = field(default_factory=list)
    average: Optional[float] = None
    median: Optional[float] = None
    std_dev: Optional[float] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    range: Optional[float] = None
    trend: Optional[float] = None
    direction: str = STABLE
    improving: Optional[bool] = None
    
    @property
    def count(self) -> int:
        return len(self.values)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "dimension": self.dimension,
            "count": self.count,
            "values": list(self.values),
            "average": self.average,
            "median": self.median,
            "std_dev": self.std_dev,
            "min": self.minimum,
            "max": self.maximum,
            "range": self.range,
            "trend": self.trend,
            "direction": self.direction,
            "improving": self.improving,
        }


def _polarity_of(dimension: str) -> Polarity:
    if not is_known_dimension(dimension):
        return Polarity.NEUTRAL
    return get_dimension(dimension).polarity


def _improving(polarity: Polarity, direction: str) -> Optional[bool]:
    if polarity == Polarity.HIGHER_IS_BETTER:
        return direction == INCREASING
    if polarity == Polarity.LOWER_IS_BETTER:
        return direction == DECREASING
    return None


def dimension_statistics(
    dimension: str,
    values: Sequence[float],
    trend_threshold: float,
    polarity: Optional[Polarity] = None,
) -> DimensionStatistics:
    """
    Statistics for one series from its non-null values.
    
    The polarity decides ``improving``; it is looked up in the catalogue
    when not given.
    """
    values = [float(v) for v in values]
    if not values:
        return DimensionStatistics(dimension=dimension)
    
    arr = np.array(values, dtype=float)
    minimum = float(np.min(arr))
    maximum = float(np.max(arr))
    trend = values[-1] - values[0]
    direction = trend_direction(trend, trend_threshold)
    
    return DimensionStatistics(
        dimension=dimension,
        values=values,
        average=float(np.mean(arr)),
        median=float(np.median(arr)),
        std_dev=float(np.std(arr)),
        minimum=minimum,
        maximum=maximum,
        range=maximum - minimum,
        trend=trend,
        direction=direction,
        improving=_improving(polarity or _polarity_of(dimension), direction),
    )


def compute_history_statistics(
    entries: Sequence[HistoryEntry],
    dimensions: Optional[Sequence[str]] = None,
    trend_threshold: Optional[float] = None,
) -> Dict[str, DimensionStatistics]:
    """
    Compute per-dimension statistics over a history.
    
    Args:
        entries: HistoryEntries in evaluation order
        dimensions: Dimensions to summarize (catalogue if None)
        trend_threshold: Minimum |trend| for a non-stable direction (config if None)
    
    Returns:
        dimension -> DimensionStatistics (empty if there are no entries)
    """
    if not entries:
        return {}
    
    dimensions = list(dimensions) if dimensions is not None else dimension_names()
    if trend_threshold is None:
        trend_threshold = get_panel_config().trend_threshold
    
    filled = [fill_missing_dimensions(e.metrics, dimensions) for e in entries]
    
    stats = {}
    for dimension in dimensions:
        values = [m[dimension] for m in filled if m[dimension] is not None]
        stats[dimension] = dimension_statistics(dimension, values, trend_threshold)
    
    logger.debug(
        f"[HISTORY] Statistics over {len(entries)} evaluations for {len(dimensions)} dimensions"
    )
    return stats


CONVERGENCE_SCORE = "convergence_score"
TOTAL_COST = "total_cost"


def convergence_statistics(
    entries: Sequence[HistoryEntry],
    trend_threshold: Optional[float] = None,
) -> DimensionStatistics:
    """
    Statistics of the convergence score across a history.
    
    Higher convergence is better; an empty history gives empty statistics.
    """
    if trend_threshold is None:
        trend_threshold = get_panel_config().trend_threshold
    return dimension_statistics(
        CONVERGENCE_SCORE,
        [e.convergence_score for e in entries],
        trend_threshold,
        polarity=Polarity.HIGHER_IS_BETTER,
    )


@dataclass(frozen=True)
class TokenStatistics:
    """
    Token and cost totals across a history.
    
    Attributes:
        evaluations: Number of entries summed
        input_tokens: Input tokens over all evaluations
        output_tokens: Output tokens over all evaluations
        total_tokens: All tokens over all evaluations
        total_cost: Summed cost in USD, rounded to 4 decimals
        cost: Statistics of the per-evaluation cost
    """
    evaluations: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    total_cost: float = 0.0
    cost: DimensionStatistics = field(
        default_factory=lambda: DimensionStatistics(dimension=TOTAL_COST)
    )
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "evaluations": self.evaluations,
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
            "total_tokens": self.total_tokens,
            "total_cost": self.total_cost,
            "cost": self.cost.to_dict(),
        }


def token_statistics(
    entries: Sequence[HistoryEntry],
    trend_threshold: Optional[float] = None,
) -> TokenStatistics:
    """Sum token usage and cost over a history."""
    if trend_threshold is None:
        trend_threshold = get_panel_config().trend_threshold
    
    costs = [e.tokens.total_cost for e in entries]
    return TokenStatistics(
        evaluations=len(entries),
        input_tokens=sum(e.tokens.input_tokens for e in entries),
        output_tokens=sum(e.tokens.output_tokens for e in entries),
        total_tokens=sum(e.tokens.total_tokens for e in entries),
        total_cost=round(sum(costs), 4),
        cost=dimension_statistics(
            TOTAL_COST, costs, trend_threshold, polarity=Polarity.LOWER_IS_BETTER
        ),
    )
