"""
Dimension Definitions for panelscore.

The catalogue of scored dimensions ("pillars") every rater reports on.
The set is fixed at configuration time; aggregation is only meaningful when
all raters and rounds use the same catalogue.

Two value kinds exist:
- SCORE: 1-10 scale, presented with one decimal
- HOURS: time/effort estimates, presented with two decimals
"""

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


class Polarity(str, Enum):
    """Direction in which a dimension improves."""
    HIGHER_IS_BETTER = "higher_is_better"
    LOWER_IS_BETTER = "lower_is_better"
    NEUTRAL = "neutral"  # Estimates, e.g. ideal effort


class ValueKind(str, Enum):
    """Kind of value a dimension carries; controls presentation rounding."""
    SCORE = "score"
    HOURS = "hours"


# Decimal places used at presentation boundaries
PRESENTATION_DECIMALS: Dict[ValueKind, int] = {
    ValueKind.SCORE: 1,
    ValueKind.HOURS: 2,
}


@dataclass(frozen=True)
class Dimension:
    """
    A named, independently scored aspect of the evaluated subject.
    
    Attributes:
        name: Canonical snake_case key
        display_name: Human-readable name
        polarity: Whether higher or lower values are better
        nullable: Whether raters may abstain on this dimension
        kind: SCORE or HOURS, decides presentation rounding
        description: Short description of what is measured
    """
    name: str
    display_name: str
    polarity: Polarity = Polarity.HIGHER_IS_BETTER
    nullable: bool = True
    kind: ValueKind = ValueKind.SCORE
    description: str = ""
    
    @property
    def decimals(self) -> int:
        return PRESENTATION_DECIMALS[self.kind]


FUNCTIONAL_IMPACT = "functional_impact"
IDEAL_TIME_HOURS = "ideal_time_hours"
TEST_COVERAGE = "test_coverage"
CODE_QUALITY = "code_quality"
CODE_COMPLEXITY = "code_complexity"
ACTUAL_TIME_HOURS = "actual_time_hours"
TECHNICAL_DEBT_HOURS = "technical_debt_hours"
DEBT_REDUCTION_HOURS = "debt_reduction_hours"


DEFAULT_DIMENSIONS: List[Dimension] = [
    Dimension(
        name=FUNCTIONAL_IMPACT,
        display_name="Functional Impact",
        description="User-facing impact and business value of the implementation",
    ),
    Dimension(
        name=IDEAL_TIME_HOURS,
        display_name="Ideal Time Hours",
        polarity=Polarity.NEUTRAL,
        kind=ValueKind.HOURS,
        description="Effort the change should have taken under ideal conditions",
    ),
    Dimension(
        name=TEST_COVERAGE,
        display_name="Test Coverage",
        description="Quality and extent of test automation",
    ),
    Dimension(
        name=CODE_QUALITY,
        display_name="Code Quality",
        nullable=False,
        description="Cleanliness, maintainability and readability",
    ),
    Dimension(
        name=CODE_COMPLEXITY,
        display_name="Code Complexity",
        polarity=Polarity.LOWER_IS_BETTER,
        nullable=False,
        description="Cognitive and architectural complexity (1 = simple)",
    ),
    Dimension(
        name=ACTUAL_TIME_HOURS,
        display_name="Actual Time Hours",
        polarity=Polarity.NEUTRAL,
        kind=ValueKind.HOURS,
        description="Effort actually spent, inferred from scope and metadata",
    ),
    Dimension(
        name=TECHNICAL_DEBT_HOURS,
        display_name="Technical Debt Hours",
        polarity=Polarity.LOWER_IS_BETTER,
        kind=ValueKind.HOURS,
        description="Future maintenance hours introduced by the change",
    ),
    Dimension(
        name=DEBT_REDUCTION_HOURS,
        display_name="Debt Reduction Hours",
        kind=ValueKind.HOURS,
        description="Future maintenance hours removed by the change",
    ),
]

_CATALOGUE: Dict[str, Dimension] = {d.name: d for d in DEFAULT_DIMENSIONS}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def dimension_names() -> List[str]:
    """Names of all catalogue dimensions, in catalogue order."""
    return [d.name for d in DEFAULT_DIMENSIONS]


def get_dimension(name: str) -> Optional[Dimension]:
    """Look up a dimension by canonical or camelCase name."""
    return _CATALOGUE.get(canonical_dimension_name(name))


def is_known_dimension(name: str) -> bool:
    return canonical_dimension_name(name) in _CATALOGUE


def required_dimensions() -> List[str]:
    """Dimensions that raters must always score (non-nullable)."""
    return [d.name for d in DEFAULT_DIMENSIONS if not d.nullable]


def canonical_dimension_name(name: str) -> str:
    """
    Map a dimension name to its canonical snake_case key.
    
    Rater payloads use camelCase ("codeQuality"); history and consensus
    use snake_case ("code_quality").
    """
    name = name.strip()
    return _CAMEL_BOUNDARY.sub("_", name).replace("-", "_").replace(" ", "_").lower()


def round_for_presentation(dimension: str, value: Optional[float]) -> Optional[float]:
    """
    Round a consensus value for presentation.
    
    Only applied at output boundaries, never before aggregation.
    Unknown dimensions use SCORE precision.
    """
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    dim = get_dimension(dimension)
    decimals = dim.decimals if dim else PRESENTATION_DECIMALS[ValueKind.SCORE]
    return round(float(value), decimals)
