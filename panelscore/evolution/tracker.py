"""
Evolution Tracker for panelscore.

For every dimension, computes the consensus value at every round and
whether the value moved between the first and the latest round.

Each round's consensus only uses the outputs assigned to that round. A
rater that delivered nothing in a round is an absent contribution, not an
error; a round where nobody scored a dimension yields a null entry.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from ..config import get_panel_config
from ..consensus import ConsensusEntry, WeightedConsensusCalculator
from ..dimensions import dimension_names
from ..raters import RaterOutput
from ..weights import WeightRegistry
from .rounds import RoundMatrix

logger = logging.getLogger(__name__)


def has_changed(first: Optional[float], latest: Optional[float], threshold: float) -> bool:
    """
    Compare the first and latest consensus values of a series.
    
    Both null -> unchanged; exactly one null -> changed; otherwise changed
    when the absolute difference exceeds the threshold.
    """
    if first is None and latest is None:
        return False
    if first is None or latest is None:
        return True
    return abs(latest - first) > threshold


@dataclass
class MetricEvolutionSeries:
    """
    Consensus values of one dimension across rounds.
    
    Attributes:
        dimension: Dimension name
        entries: round -> ConsensusEntry, in ascending round order
        changed: Whether the latest round differs from the first
    """
    dimension: str
    entries: Dict[int, ConsensusEntry] = field(default_factory=dict)
    changed: bool = False
    
    @property
    def values(self) -> Dict[int, Optional[float]]:
        return {r: e.value for r, e in self.entries.items()}
    
    @property
    def first_round(self) -> Optional[int]:
        return min(self.entries) if self.entries else None
    
    @property
    def latest_round(self) -> Optional[int]:
        return max(self.entries) if self.entries else None
    
    @property
    def first_value(self) -> Optional[float]:
        first = self.first_round
        return self.entries[first].value if first is not None else None
    
    @property
    def latest_value(self) -> Optional[float]:
        latest = self.latest_round
        return self.entries[latest].value if latest is not None else None
    
    @property
    def latest_entry(self) -> Optional[ConsensusEntry]:
        latest = self.latest_round
        return self.entries[latest] if latest is not None else None
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "dimension": self.dimension,
            "rounds": {str(r): e.value for r, e in self.entries.items()},
            "presented": {str(r): e.presented_value for r, e in self.entries.items()},
            "changed": self.changed,
        }


@dataclass
class EvolutionReport:
    """Evolution series for every dimension plus the matrix they came from."""
    matrix: RoundMatrix
    series: Dict[str, MetricEvolutionSeries] = field(default_factory=dict)
    
    @property
    def rounds(self) -> List[int]:
        return self.matrix.rounds
    
    def latest_consensus(self) -> Dict[str, ConsensusEntry]:
        """ConsensusEntry of the final round for each dimension."""
        return {
            dimension: s.latest_entry
            for dimension, s in self.series.items()
            if s.latest_entry is not None
        }
    
    def latest_values(self) -> Dict[str, Optional[float]]:
        return {dimension: s.latest_value for dimension, s in self.series.items()}
    
    def changed_dimensions(self) -> List[str]:
        return [dimension for dimension, s in self.series.items() if s.changed]
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "rounds": self.rounds,
            "matrix": self.matrix.to_dict(),
            "series": {d: s.to_dict() for d, s in self.series.items()},
        }


class EvolutionTracker:
    """
    Builds per-dimension evolution series from time-ordered rater outputs.
    
    Usage:
        tracker = EvolutionTracker()
        report = tracker.track(outputs)
        report.series["code_quality"].values  # {1: 7.2, 2: 7.6}
    """
    
    def __init__(
        self,
        registry: Optional[WeightRegistry] = None,
        dimensions: Optional[List[str]] = None,
        changed_threshold: Optional[float] = None,
    ):
        """
        Initialize the tracker.
        
        Args:
            registry: WeightRegistry for the calculator (global if None)
            dimensions: Dimensions to track (catalogue if None)
            changed_threshold: Threshold for the changed flag (config if None)
        """
        self.calculator = WeightedConsensusCalculator(registry)
        self.dimensions = list(dimensions) if dimensions is not None else dimension_names()
        self.changed_threshold = (
            changed_threshold
            if changed_threshold is not None
            else get_panel_config().changed_threshold
        )
    
    def track(self, outputs: Iterable[RaterOutput]) -> EvolutionReport:
        """
        Compute evolution series for all tracked dimensions.
        
        Args:
            outputs: Time-ordered RaterOutputs
        
        Returns:
            EvolutionReport
        """
        matrix = RoundMatrix.from_outputs(outputs)
        return self.track_matrix(matrix)
    
    def track_matrix(self, matrix: RoundMatrix) -> EvolutionReport:
        missing = matrix.missing_cells()
        if missing:
            logger.info(f"[EVOLUTION] Absent round contributions: {missing}")
        
        report = EvolutionReport(matrix=matrix)
        for dimension in self.dimensions:
            report.series[dimension] = self.build_series(matrix, dimension)
        
        logger.debug(
            f"[EVOLUTION] Tracked {len(self.dimensions)} dimensions over rounds "
            f"{matrix.rounds}; changed: {report.changed_dimensions()}"
        )
        return report
    
    def build_series(self, matrix: RoundMatrix, dimension: str) -> MetricEvolutionSeries:
        """Consensus per round for one dimension."""
        series = MetricEvolutionSeries(dimension=dimension)
        for round_number in matrix.rounds:
            pairs = [
                (output.rater, output.value(dimension))
                for output in matrix.outputs_for_round(round_number)
            ]
            series.entries[round_number] = self.calculator.calculate(
                dimension, pairs, round_number=round_number
            )
        
        series.changed = has_changed(
            series.first_value, series.latest_value, self.changed_threshold
        )
        return series
