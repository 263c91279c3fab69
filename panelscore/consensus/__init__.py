"""
Consensus Engine for panelscore.

Reduces rater values into consensus numbers:
- WeightedConsensusCalculator: per-dimension weighted average with abstentions
- ConvergenceEstimator: final-round agreement score
- DerivedMetricComposer: net values and the commit score
"""

from .calculator import (
    Contributor,
    ConsensusEntry,
    WeightedConsensusCalculator,
)
from .convergence import ConvergenceEstimator, ConvergenceScore
from .derived import (
    COMMIT_SCORE,
    NET_DEBT_HOURS,
    DEFAULT_NET_METRICS,
    DerivedMetricComposer,
    NetMetric,
    commit_score,
    net_value,
)

__all__ = [
    # Calculator
    "Contributor",
    "ConsensusEntry",
    "WeightedConsensusCalculator",
    # Convergence
    "ConvergenceEstimator",
    "ConvergenceScore",
    # Derived
    "COMMIT_SCORE",
    "NET_DEBT_HOURS",
    "DEFAULT_NET_METRICS",
    "DerivedMetricComposer",
    "NetMetric",
    "commit_score",
    "net_value",
]
