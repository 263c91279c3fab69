"""
Weighted Consensus Calculator for panelscore.

Reduces the (rater, value) pairs reported for one dimension in one round
into a single consensus value:

    consensus = sum(value * weight) / sum(weight)

over the raters that did not abstain. Weights come from the WeightRegistry.

Edge cases:
- every rater abstained -> None (never coerced to zero)
- exactly one rater contributed -> that rater's value, whatever its weight
- all contributing weights are zero -> unweighted mean, with a warning

No rounding happens here; see round_for_presentation().
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..dimensions import round_for_presentation
from ..weights import Weight, WeightRegistry, get_weight_registry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Contributor:
    """A rater that contributed a value to a consensus entry."""
    rater: str
    value: float
    weight: Weight
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "rater": self.rater,
            "value": self.value,
            "weight": self.weight.value,
            "weight_source": self.weight.source,
        }


@dataclass(frozen=True)
class ConsensusEntry:
    """
    Consensus for one dimension in one round.
    
    Attributes:
        dimension: Dimension name
        round: Round number (None when computed outside a round context)
        value: Weighted consensus, None when every rater abstained
        contributors: Raters that contributed, with their effective weights
        abstained: Raters that reported no value
        unweighted_fallback: True when the zero-weight fallback was used
    """
    dimension: str
    round: Optional[int]
    value: Optional[float]
    contributors: Tuple[Contributor, ...] = ()
    abstained: Tuple[str, ...] = ()
    unweighted_fallback: bool = False
    
    @property
    def presented_value(self) -> Optional[float]:
        """Value rounded for presentation (1 decimal for scores, 2 for hours)."""
        return round_for_presentation(self.dimension, self.value)
    
    @property
    def used_fallback_weights(self) -> bool:
        """True when at least one contributor's weight was an equal-share fallback."""
        return any(c.weight.is_fallback for c in self.contributors)
    
    @property
    def total_weight(self) -> float:
        return sum(c.weight.value for c in self.contributors)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "dimension": self.dimension,
            "round": self.round,
            "value": self.value,
            "presented_value": self.presented_value,
            "contributors": [c.to_dict() for c in self.contributors],
            "abstained": list(self.abstained),
            "unweighted_fallback": self.unweighted_fallback,
        }


class WeightedConsensusCalculator:
    """
    Weighted-average consensus over rater values.
    
    Pure and synchronous; holds only a reference to a read-only registry.
    
    Usage:
        calculator = WeightedConsensusCalculator()
        entry = calculator.calculate(
            "code_quality",
            [("senior-architect", 8.0), ("sdet", None)],
        )
        entry.value  # 8.0
    """
    
    def __init__(self, registry: Optional[WeightRegistry] = None):
        """
        Initialize the calculator.
        
        Args:
            registry: WeightRegistry (uses global if None)
        """
        self.registry = registry or get_weight_registry()
    
    def calculate(
        self,
        dimension: str,
        pairs: Iterable[Tuple[str, Optional[float]]],
        round_number: Optional[int] = None,
    ) -> ConsensusEntry:
        """
        Compute the consensus entry for one dimension.
        
        Args:
            dimension: Dimension name
            pairs: (canonical rater key, value or None) pairs
            round_number: Round the pairs belong to
        
        Returns:
            ConsensusEntry with value and contributor details
        """
        contributors: List[Contributor] = []
        abstained: List[str] = []
        
        for rater, value in pairs:
            if value is None or (isinstance(value, float) and math.isnan(value)):
                abstained.append(rater)
                continue
            weight = self.registry.weight_of(rater, dimension)
            contributors.append(Contributor(rater=rater, value=float(value), weight=weight))
        
        if not contributors:
            logger.warning(
                f"[CONSENSUS] All raters abstained for '{dimension}'"
                f"{self._round_suffix(round_number)}, consensus is null"
            )
            return ConsensusEntry(
                dimension=dimension,
                round=round_number,
                value=None,
                abstained=tuple(abstained),
            )
        
        weighted_sum = sum(c.value * c.weight.value for c in contributors)
        total_weight = sum(c.weight.value for c in contributors)
        
        if total_weight == 0:
            logger.warning(
                f"[CONSENSUS] Total weight is 0 for '{dimension}'"
                f"{self._round_suffix(round_number)}, using unweighted mean"
            )
            value = sum(c.value for c in contributors) / len(contributors)
            unweighted = True
        else:
            value = weighted_sum / total_weight
            unweighted = False
        
        # Float rounding must not push the average outside the contributed range
        lowest = min(c.value for c in contributors)
        highest = max(c.value for c in contributors)
        value = min(max(value, lowest), highest)
        
        fallback_raters = [c.rater for c in contributors if c.weight.is_fallback]
        if fallback_raters:
            logger.info(
                f"[CONSENSUS] '{dimension}'{self._round_suffix(round_number)} "
                f"blends fallback weights for {fallback_raters}"
            )
        
        return ConsensusEntry(
            dimension=dimension,
            round=round_number,
            value=value,
            contributors=tuple(contributors),
            abstained=tuple(abstained),
            unweighted_fallback=unweighted,
        )
    
    def weighted_average(
        self,
        dimension: str,
        pairs: Iterable[Tuple[str, Optional[float]]],
    ) -> Optional[float]:
        """Consensus value only; None when every rater abstained."""
        return self.calculate(dimension, pairs).value
    
    def calculate_many(
        self,
        values_by_rater: Dict[str, Dict[str, Optional[float]]],
        dimensions: Iterable[str],
        round_number: Optional[int] = None,
    ) -> Dict[str, ConsensusEntry]:
        """
        Compute consensus for several dimensions at once.
        
        Args:
            values_by_rater: rater -> {dimension -> value}
            dimensions: Dimensions to compute
            round_number: Round the values belong to
        
        Returns:
            Dictionary mapping dimension -> ConsensusEntry
        """
        return {
            dimension: self.calculate(
                dimension,
                [(rater, values.get(dimension)) for rater, values in values_by_rater.items()],
                round_number=round_number,
            )
            for dimension in dimensions
        }
    
    @staticmethod
    def _round_suffix(round_number: Optional[int]) -> str:
        return f" in round {round_number}" if round_number is not None else ""
