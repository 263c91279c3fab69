"""
Weight Registry for panelscore.

Maps every rater to a per-dimension weight vector and answers weight
lookups for the consensus calculator.

Lookups return a tagged Weight:
- KnownWeight: the rater and dimension are in the table
- FallbackWeight: equal share (1/N raters) used for an unknown rater or
  a dimension missing from the rater's vector

Fallbacks never fail an evaluation; they are logged and carried through
to the consensus entry so diagnostics can tell them apart.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set

from ..config import get_panel_config
from ..dimensions import dimension_names
from .expertise import DEFAULT_DISPLAY_NAMES, DEFAULT_EXPERTISE_WEIGHTS, RATER_ALIASES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Weight:
    """A rater's effective weight for one dimension."""
    value: float
    
    @property
    def is_fallback(self) -> bool:
        return False
    
    @property
    def source(self) -> str:
        return "known"


@dataclass(frozen=True)
class KnownWeight(Weight):
    """Weight taken from the registry table."""
    pass


@dataclass(frozen=True)
class FallbackWeight(Weight):
    """Equal-share weight used when the table has no entry."""
    
    @property
    def is_fallback(self) -> bool:
        return True
    
    @property
    def source(self) -> str:
        return "fallback"


@dataclass(frozen=True)
class WeightViolation:
    """A dimension whose weights do not sum to 1.0."""
    dimension: str
    observed_sum: float
    
    @property
    def deviation(self) -> float:
        return self.observed_sum - 1.0
    
    def __str__(self) -> str:
        return f"{self.dimension}: weights sum to {self.observed_sum:.3f} (expected 1.0)"


def canonicalize_rater(name: str, aliases: Optional[Dict[str, str]] = None) -> str:
    """
    Map any accepted display name or identifier to the canonical rater key.
    
    Applied once at the system boundary; internal code only sees canonical
    keys. Unknown names come back lower-cased and stripped.
    
    Args:
        name: Display name or identifier ("Senior Architect", "sdet", ...)
        aliases: Alias table (defaults to RATER_ALIASES)
    
    Returns:
        Canonical rater key
    """
    table = RATER_ALIASES if aliases is None else aliases
    normalized = (name or "").strip().lower()
    return table.get(normalized, normalized)


class WeightRegistry:
    """
    Static mapping of rater -> per-dimension weight.
    
    Read-only after construction. Safe to share across threads.
    
    Usage:
        registry = WeightRegistry()
        registry.weight_of("senior-architect", "code_complexity").value  # 0.417
        
        violations = registry.validate()
        for v in violations:
            print(v)
    """
    
    def __init__(
        self,
        weights: Optional[Dict[str, Dict[str, float]]] = None,
        display_names: Optional[Dict[str, str]] = None,
        aliases: Optional[Dict[str, str]] = None,
        dimensions: Optional[List[str]] = None,
    ):
        """
        Initialize the registry.
        
        Args:
            weights: rater -> {dimension -> weight}; defaults to the expertise table
            display_names: rater -> display name
            aliases: accepted spelling -> canonical rater key
            dimensions: dimensions covered by validation (defaults to the catalogue)
        """
        source = DEFAULT_EXPERTISE_WEIGHTS if weights is None else weights
        self._weights: Dict[str, Dict[str, float]] = {
            rater: {dim: float(w) for dim, w in vector.items()}
            for rater, vector in source.items()
        }
        self._display_names = dict(
            DEFAULT_DISPLAY_NAMES if display_names is None else display_names
        )
        self._aliases = dict(RATER_ALIASES if aliases is None else aliases)
        self._dimensions = list(dimensions) if dimensions is not None else dimension_names()
        self._warned: Set[str] = set()
    
    @property
    def raters(self) -> List[str]:
        """Canonical keys of all registered raters."""
        return list(self._weights.keys())
    
    @property
    def dimensions(self) -> List[str]:
        return list(self._dimensions)
    
    @property
    def fallback_value(self) -> float:
        """Equal share of the weight across all registered raters."""
        if not self._weights:
            return 1.0
        return 1.0 / len(self._weights)
    
    def canonicalize(self, name: str) -> str:
        """Canonicalize a rater name using this registry's aliases."""
        return canonicalize_rater(name, self._aliases)
    
    def is_known(self, rater: str) -> bool:
        return rater in self._weights
    
    def display_name(self, rater: str) -> str:
        return self._display_names.get(rater, rater)
    
    def weight_of(self, rater: str, dimension: str) -> Weight:
        """
        Get a rater's weight for a dimension.
        
        Args:
            rater: Canonical rater key
            dimension: Canonical dimension name
        
        Returns:
            KnownWeight from the table, or FallbackWeight (1/N) when the
            rater or dimension is not in the table
        """
        vector = self._weights.get(rater)
        if vector is None:
            self._warn_once(
                rater,
                f"[WEIGHTS] Unknown rater '{rater}', using equal-share weight "
                f"{self.fallback_value:.3f}",
            )
            return FallbackWeight(self.fallback_value)
        
        if dimension not in vector:
            self._warn_once(
                f"{rater}/{dimension}",
                f"[WEIGHTS] Rater '{rater}' has no weight for '{dimension}', "
                f"using equal-share weight {self.fallback_value:.3f}",
            )
            return FallbackWeight(self.fallback_value)
        
        return KnownWeight(vector[dimension])
    
    def dimension_weights(self, dimension: str) -> Dict[str, float]:
        """Get all raters' weights for one dimension."""
        return {
            rater: vector[dimension]
            for rater, vector in self._weights.items()
            if dimension in vector
        }
    
    def validate(self, tolerance: Optional[float] = None) -> List[WeightViolation]:
        """
        Check that every dimension's weights sum to 1.0.
        
        Design-time self-check; not invoked during evaluation.
        
        Args:
            tolerance: Allowed absolute deviation (defaults to config)
        
        Returns:
            List of violations, empty when the table is consistent
        """
        if tolerance is None:
            tolerance = get_panel_config().weight_tolerance
        
        violations = []
        for dimension in self._dimensions:
            total = sum(vector.get(dimension, 0.0) for vector in self._weights.values())
            # Float noise of three-decimal sums stays below 1e-9
            if round(abs(total - 1.0), 9) > tolerance:
                violations.append(WeightViolation(dimension=dimension, observed_sum=total))
        
        for violation in violations:
            logger.warning(f"[WEIGHTS] {violation}")
        return violations
    
    def _warn_once(self, key: str, message: str) -> None:
        if key in self._warned:
            logger.debug(message)
            return
        self._warned.add(key)
        logger.warning(message)
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "weights": {rater: dict(vector) for rater, vector in self._weights.items()},
            "display_names": dict(self._display_names),
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WeightRegistry":
        """
        Create from dictionary.
        
        Accepts either {"weights": {...}, "display_names": {...}} or a bare
        rater -> vector mapping. Rater keys are canonicalized.
        """
        raw = data.get("weights", data)
        weights = {
            canonicalize_rater(rater): {dim: float(w) for dim, w in vector.items()}
            for rater, vector in raw.items()
        }
        display_names = data.get("display_names")
        return cls(weights=weights, display_names=display_names)
    
    @classmethod
    def load(cls, path: str) -> "WeightRegistry":
        """
        Load a weight table from a JSON file.
        
        Args:
            path: Path to JSON file
        
        Returns:
            WeightRegistry instance (default table if the file is missing or unreadable)
        """
        try:
            if os.path.exists(path):
                with open(path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                return cls.from_dict(data)
            logger.warning(f"[WEIGHTS] Weight file {path} not found, using defaults")
        except Exception as e:
            logger.warning(f"[WEIGHTS] Failed to load weights from {path}: {e}")
        
        return cls()
    
    def save(self, path: str) -> bool:
        """
        Save the weight table to a JSON file.
        
        Args:
            path: Path to JSON file
        
        Returns:
            True if saved successfully
        """
        try:
            directory = os.path.dirname(path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(self.to_dict(), f, indent=2)
            return True
        except Exception as e:
            logger.warning(f"[WEIGHTS] Failed to save weights to {path}: {e}")
            return False


# Global registry instance
_registry: Optional[WeightRegistry] = None


def get_weight_registry(force_reload: bool = False) -> WeightRegistry:
    """
    Get the process-wide weight registry.
    
    Built from PanelConfig.weights_path when set, otherwise from the
    default expertise table.
    """
    global _registry
    if _registry is None or force_reload:
        path = get_panel_config().weights_path
        _registry = WeightRegistry.load(path) if path else WeightRegistry()
    return _registry


def reset_weight_registry() -> None:
    """Reset global registry (mainly for testing)."""
    global _registry
    _registry = None
