"""
Convergence Estimator for panelscore.

Measures how tightly the final round's raters agree on a reference
dimension (code quality by default):

    convergence = max(0, 1 - sigma / 2)

where sigma is the population standard deviation of the final-round
values. sigma = 0 gives 1.0; sigma >= 2 (on a 1-10 scale) gives 0.

This is a heuristic proxy for consensus, not a statistical guarantee.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

import numpy as np

from ..config import get_panel_config
from ..raters import RaterOutput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConvergenceScore:
    """
    Agreement among final-round raters.
    
    Attributes:
        value: Score in [0, 1], rounded to two decimals
        reference_dimension: Dimension the score was computed on
        sample_size: Number of non-null final-round values used
        std_dev: Population standard deviation (None when not computed)
    """
    value: float
    reference_dimension: str
    sample_size: int = 0
    std_dev: Optional[float] = None
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "reference_dimension": self.reference_dimension,
            "sample_size": self.sample_size,
            "std_dev": self.std_dev,
        }


class ConvergenceEstimator:
    """
    Scores final-round agreement on one reference dimension.
    
    Degenerate inputs (panel too small, fewer than two non-null values)
    return a defined score of 0 instead of failing.
    """
    
    MIN_VALUES = 2
    
    def __init__(
        self,
        reference_dimension: Optional[str] = None,
        min_panel_size: Optional[int] = None,
    ):
        """
        Initialize the estimator.
        
        Args:
            reference_dimension: Dimension to measure (config default if None)
            min_panel_size: Minimum raters in the evaluation (config default if None)
        """
        config = get_panel_config()
        self.reference_dimension = reference_dimension or config.convergence_dimension
        self.min_panel_size = (
            min_panel_size if min_panel_size is not None else config.convergence_min_panel_size
        )
    
    def estimate(
        self,
        final_round_outputs: Iterable[RaterOutput],
        panel_size: Optional[int] = None,
    ) -> ConvergenceScore:
        """
        Compute the convergence score.
        
        Args:
            final_round_outputs: RaterOutputs of the final round
            panel_size: Number of distinct raters in the whole evaluation
                (defaults to the number of final-round outputs)
        
        Returns:
            ConvergenceScore in [0, 1]
        """
        outputs = list(final_round_outputs)
        if panel_size is None:
            panel_size = len({o.rater for o in outputs})
        
        values = []
        for output in outputs:
            value = output.value(self.reference_dimension)
            # NaN counts as an abstention
            if value is None or (isinstance(value, float) and math.isnan(value)):
                continue
            values.append(value)
        
        if panel_size < self.min_panel_size:
            logger.debug(
                f"[CONVERGENCE] Panel of {panel_size} is below minimum "
                f"{self.min_panel_size}, score is 0"
            )
            return ConvergenceScore(0.0, self.reference_dimension, sample_size=len(values))
        
        if len(values) < self.MIN_VALUES:
            logger.debug(
                f"[CONVERGENCE] Only {len(values)} non-null '{self.reference_dimension}' "
                f"values in final round, score is 0"
            )
            return ConvergenceScore(0.0, self.reference_dimension, sample_size=len(values))
        
        std_dev = float(np.std(values))
        score = round(max(0.0, 1.0 - std_dev / 2.0), 2)
        
        return ConvergenceScore(
            value=score,
            reference_dimension=self.reference_dimension,
            sample_size=len(values),
            std_dev=std_dev,
        )
