"""
Round/Evolution Tracker for panelscore.

- assign_rounds / RoundMatrix: rater x round matrix from time-ordered outputs
- EvolutionTracker: per-dimension consensus across rounds
"""

from .rounds import (
    RoundAssignment,
    RoundMatrix,
    assign_rounds,
    infer_rounds_by_occurrence,
)
from .tracker import (
    EvolutionReport,
    EvolutionTracker,
    MetricEvolutionSeries,
    has_changed,
)

__all__ = [
    "RoundAssignment",
    "RoundMatrix",
    "assign_rounds",
    "infer_rounds_by_occurrence",
    "EvolutionReport",
    "EvolutionTracker",
    "MetricEvolutionSeries",
    "has_changed",
]
