"""
Rater Expertise Weights for panelscore.

Each rater scores every dimension, with a confidence that depends on its
role. Weights are normalized per dimension: summed across all raters they
give 1.0.

Primary expertise (~40-45%): the rater's specialized area
Secondary expertise (~15-21%): related areas where the rater has insight
Tertiary expertise (~8-14%): limited but still useful perspective
"""

from typing import Dict

from ..dimensions import (
    FUNCTIONAL_IMPACT,
    IDEAL_TIME_HOURS,
    TEST_COVERAGE,
    CODE_QUALITY,
    CODE_COMPLEXITY,
    ACTUAL_TIME_HOURS,
    TECHNICAL_DEBT_HOURS,
    DEBT_REDUCTION_HOURS,
)

BUSINESS_ANALYST = "business-analyst"
SDET = "sdet"
DEVELOPER_AUTHOR = "developer-author"
SENIOR_ARCHITECT = "senior-architect"
DEVELOPER_REVIEWER = "developer-reviewer"


DEFAULT_EXPERTISE_WEIGHTS: Dict[str, Dict[str, float]] = {
    BUSINESS_ANALYST: {
        FUNCTIONAL_IMPACT: 0.435,  # PRIMARY
        IDEAL_TIME_HOURS: 0.417,  # PRIMARY
        TEST_COVERAGE: 0.12,
        CODE_QUALITY: 0.083,
        CODE_COMPLEXITY: 0.083,
        ACTUAL_TIME_HOURS: 0.136,
        TECHNICAL_DEBT_HOURS: 0.13,
        DEBT_REDUCTION_HOURS: 0.13,
    },
    SDET: {
        FUNCTIONAL_IMPACT: 0.13,
        IDEAL_TIME_HOURS: 0.083,
        TEST_COVERAGE: 0.4,  # PRIMARY
        CODE_QUALITY: 0.167,  # SECONDARY
        CODE_COMPLEXITY: 0.125,
        ACTUAL_TIME_HOURS: 0.091,
        TECHNICAL_DEBT_HOURS: 0.13,
        DEBT_REDUCTION_HOURS: 0.13,
    },
    DEVELOPER_AUTHOR: {
        FUNCTIONAL_IMPACT: 0.13,
        IDEAL_TIME_HOURS: 0.167,  # SECONDARY
        TEST_COVERAGE: 0.12,
        CODE_QUALITY: 0.125,
        CODE_COMPLEXITY: 0.167,  # SECONDARY
        ACTUAL_TIME_HOURS: 0.455,  # PRIMARY
        TECHNICAL_DEBT_HOURS: 0.13,
        DEBT_REDUCTION_HOURS: 0.13,
    },
    SENIOR_ARCHITECT: {
        FUNCTIONAL_IMPACT: 0.174,  # SECONDARY
        IDEAL_TIME_HOURS: 0.208,  # SECONDARY
        TEST_COVERAGE: 0.16,  # SECONDARY
        CODE_QUALITY: 0.208,  # SECONDARY
        CODE_COMPLEXITY: 0.417,  # PRIMARY
        ACTUAL_TIME_HOURS: 0.182,  # SECONDARY
        TECHNICAL_DEBT_HOURS: 0.435,  # PRIMARY
        DEBT_REDUCTION_HOURS: 0.435,  # PRIMARY
    },
    DEVELOPER_REVIEWER: {
        FUNCTIONAL_IMPACT: 0.13,
        IDEAL_TIME_HOURS: 0.125,
        TEST_COVERAGE: 0.2,  # SECONDARY
        CODE_QUALITY: 0.417,  # PRIMARY
        CODE_COMPLEXITY: 0.208,  # SECONDARY
        ACTUAL_TIME_HOURS: 0.136,
        TECHNICAL_DEBT_HOURS: 0.174,  # SECONDARY
        DEBT_REDUCTION_HOURS: 0.174,  # SECONDARY
    },
}


DEFAULT_DISPLAY_NAMES: Dict[str, str] = {
    BUSINESS_ANALYST: "Business Analyst",
    SDET: "SDET (Test Automation Engineer)",
    DEVELOPER_AUTHOR: "Developer (Author)",
    SENIOR_ARCHITECT: "Senior Architect",
    DEVELOPER_REVIEWER: "Developer (Reviewer)",
}


# Accepted display names and spellings -> canonical rater key.
# Keys are lower-cased and stripped before lookup.
RATER_ALIASES: Dict[str, str] = {
    "business analyst": BUSINESS_ANALYST,
    "business_analyst": BUSINESS_ANALYST,
    "sdet": SDET,
    "sdet (test automation engineer)": SDET,
    "test automation engineer": SDET,
    "developer (author)": DEVELOPER_AUTHOR,
    "developer author": DEVELOPER_AUTHOR,
    "developer_author": DEVELOPER_AUTHOR,
    "senior architect": SENIOR_ARCHITECT,
    "senior_architect": SENIOR_ARCHITECT,
    "developer reviewer": DEVELOPER_REVIEWER,
    "developer (reviewer)": DEVELOPER_REVIEWER,
    "developer_reviewer": DEVELOPER_REVIEWER,
}
