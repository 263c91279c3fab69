"""
Weight Registry for panelscore.

Per-dimension rater weights, rater-name canonicalization and the
design-time validation of the weight table.
"""

from .expertise import (
    BUSINESS_ANALYST,
    SDET,
    DEVELOPER_AUTHOR,
    SENIOR_ARCHITECT,
    DEVELOPER_REVIEWER,
    DEFAULT_EXPERTISE_WEIGHTS,
    RATER_ALIASES,
)
from .registry import (
    Weight,
    KnownWeight,
    FallbackWeight,
    WeightViolation,
    WeightRegistry,
    canonicalize_rater,
    get_weight_registry,
    reset_weight_registry,
)

__all__ = [
    # Default panel
    "BUSINESS_ANALYST",
    "SDET",
    "DEVELOPER_AUTHOR",
    "SENIOR_ARCHITECT",
    "DEVELOPER_REVIEWER",
    "DEFAULT_EXPERTISE_WEIGHTS",
    "RATER_ALIASES",
    # Registry
    "Weight",
    "KnownWeight",
    "FallbackWeight",
    "WeightViolation",
    "WeightRegistry",
    "canonicalize_rater",
    "get_weight_registry",
    "reset_weight_registry",
]
