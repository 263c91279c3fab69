"""
Dimension catalogue for panelscore.

Defines the scored dimensions, their polarity, nullability and
presentation precision.
"""

from .definitions import (
    Dimension,
    Polarity,
    ValueKind,
    DEFAULT_DIMENSIONS,
    FUNCTIONAL_IMPACT,
    IDEAL_TIME_HOURS,
    TEST_COVERAGE,
    CODE_QUALITY,
    CODE_COMPLEXITY,
    ACTUAL_TIME_HOURS,
    TECHNICAL_DEBT_HOURS,
    DEBT_REDUCTION_HOURS,
    canonical_dimension_name,
    dimension_names,
    get_dimension,
    is_known_dimension,
    required_dimensions,
    round_for_presentation,
)

__all__ = [
    "Dimension",
    "Polarity",
    "ValueKind",
    "DEFAULT_DIMENSIONS",
    "FUNCTIONAL_IMPACT",
    "IDEAL_TIME_HOURS",
    "TEST_COVERAGE",
    "CODE_QUALITY",
    "CODE_COMPLEXITY",
    "ACTUAL_TIME_HOURS",
    "TECHNICAL_DEBT_HOURS",
    "DEBT_REDUCTION_HOURS",
    "canonical_dimension_name",
    "dimension_names",
    "get_dimension",
    "is_known_dimension",
    "required_dimensions",
    "round_for_presentation",
]
