"""
Match Scoring

Interest alignment, points ratio, eligibility classification and the final
0-100 match score for a student/program pair.
All logic is deterministic - no AI/ML components.
"""

import math
from typing import List

from .constants import (
    EligibilityStatus,
    STATUS_BASE_SCORE,
    INTEREST_WEIGHT,
    POINTS_RATIO_WEIGHT,
    MAX_MATCH_SCORE,
    MIN_MATCH_SCORE,
    BORDERLINE_MAX_MISSING,
    BORDERLINE_MIN_POINTS_RATIO,
)


def calculate_interest_alignment(interests: List[str], categories: List[str]) -> float:
    """
    Percentage of student interests found in any program category.

    An interest counts when it is a case-insensitive substring of a category.
    Returns 0.0 when either list is empty.
    """
    if not interests or not categories:
        return 0.0

    lowered = [c.lower() for c in categories]
    common = [i for i in interests if any(i.lower() in c for c in lowered)]
    return len(common) / len(interests) * 100


def points_ratio(total_points: int, min_points: int) -> float:
    """total / min; programs without a minimum count as fully met."""
    if min_points <= 0:
        return 1.0
    return total_points / min_points


def classify(eligible: bool, general_ok: bool, missing: List[str], ratio: float) -> EligibilityStatus:
    """
    Classify a student/program pair.

    Args:
        eligible: Program subject and points requirements met
        general_ok: Institution-level admission met
        missing: Missing requirement descriptions
        ratio: Points ratio

    Returns:
        ELIGIBLE, BORDERLINE or NOT_ELIGIBLE
    """
    if eligible and general_ok:
        return EligibilityStatus.ELIGIBLE
    if len(missing) <= BORDERLINE_MAX_MISSING and ratio > BORDERLINE_MIN_POINTS_RATIO:
        return EligibilityStatus.BORDERLINE
    return EligibilityStatus.NOT_ELIGIBLE


def calculate_match_score(status: str, alignment: float, ratio: float) -> int:
    """
    base(status) + alignment share of INTEREST_WEIGHT + capped ratio bonus.

    Always in [MIN_MATCH_SCORE, MAX_MATCH_SCORE].
    """
    status = EligibilityStatus(status).value
    base = STATUS_BASE_SCORE[status]

    alignment = min(max(alignment, 0.0), 100.0)
    interest_score = alignment / 100 * INTEREST_WEIGHT
    ratio_bonus = min(max(ratio, 0.0) * POINTS_RATIO_WEIGHT, POINTS_RATIO_WEIGHT)

    # Half-up rounding, so 87.5 scores 88
    score = math.floor(base + interest_score + ratio_bonus + 0.5)
    return max(MIN_MATCH_SCORE, min(MAX_MATCH_SCORE, score))
