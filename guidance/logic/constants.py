"""
Matching Rule Constants

Single source of truth for grade alphabets, grade-to-points tables, the
education level hierarchy, institution admission thresholds and the
match score weights used by the matching engine.
All values are deterministic with no AI/ML components.
"""

from enum import Enum
from typing import Dict, List

# =============================================================================
# EDUCATION LEVELS
# =============================================================================

class EducationLevel(str, Enum):
    """Secondary qualification tracks accepted by Namibian universities."""
    NSSCO = "NSSCO"      # Namibia Senior Secondary Certificate Ordinary
    NSSCAS = "NSSCAS"    # NSSC Advanced Subsidiary
    NSSCH = "NSSCH"      # NSSC Higher
    HIGCSE = "HIGCSE"    # Higher International GCSE
    IGCSE = "IGCSE"      # International GCSE


# Higher rank = more advanced qualification
LEVEL_HIERARCHY: Dict[str, int] = {
    EducationLevel.NSSCAS.value: 3,
    EducationLevel.NSSCH.value: 2,
    EducationLevel.HIGCSE.value: 2,
    EducationLevel.NSSCO.value: 1,
    EducationLevel.IGCSE.value: 1,
}

ORDINARY_RANK = 1

# =============================================================================
# GRADE TABLES
# =============================================================================

_LETTER_GRADES = ["A*", "A", "B", "C", "D", "E", "F"]
_NUMERIC_GRADES = ["1", "2", "3", "4"]

# Best grade first
GRADE_ORDER: Dict[str, List[str]] = {
    EducationLevel.NSSCO.value: _LETTER_GRADES,
    EducationLevel.IGCSE.value: _LETTER_GRADES,
    EducationLevel.NSSCAS.value: ["A", "B", "C", "D", "E"],
    EducationLevel.NSSCH.value: _NUMERIC_GRADES,
    EducationLevel.HIGCSE.value: _NUMERIC_GRADES,
}

_LETTER_POINTS = {"A*": 8, "A": 7, "B": 6, "C": 5, "D": 4, "E": 3, "F": 2}
_NUMERIC_POINTS = {"1": 9, "2": 8, "3": 7, "4": 6}

GRADE_TO_POINTS: Dict[str, Dict[str, int]] = {
    EducationLevel.NSSCO.value: _LETTER_POINTS,
    EducationLevel.IGCSE.value: _LETTER_POINTS,
    EducationLevel.NSSCAS.value: {"A": 9, "B": 8, "C": 7, "D": 6, "E": 5},
    EducationLevel.NSSCH.value: _NUMERIC_POINTS,
    EducationLevel.HIGCSE.value: _NUMERIC_POINTS,
}

# Total points = best N subjects
BEST_SUBJECT_COUNT = 5

# =============================================================================
# INSTITUTIONS & GENERAL ADMISSION
# =============================================================================

class Institution(str, Enum):
    UNAM = "UNAM"    # University of Namibia
    NUST = "NUST"    # Namibia University of Science and Technology
    IUM = "IUM"      # International University of Management


INSTITUTIONS: List[str] = [i.value for i in Institution]

# Degree admission: minimum total points and minimum English points
GENERAL_REQUIREMENTS: Dict[str, Dict[str, int]] = {
    Institution.UNAM.value: {"min_points": 25, "min_english_points": 5},  # NSSCO C
    Institution.NUST.value: {"min_points": 25, "min_english_points": 3},  # NSSCO E
    Institution.IUM.value: {"min_points": 25, "min_english_points": 4},   # NSSCO D
}

# UNAM subject-mix options (any one must hold on top of the base thresholds)
UNAM_SUBJECT_MIX_OPTIONS: List[Dict[str, int]] = [
    # 2 higher-level subjects at 6+ points, 3 ordinary subjects at C (5) or better
    {"higher_count": 2, "higher_min_points": 6, "ordinary_count": 3, "ordinary_min_points": 5},
    # 3 higher-level subjects at 6+ points, 2 ordinary subjects at D (4) or better
    {"higher_count": 3, "higher_min_points": 6, "ordinary_count": 2, "ordinary_min_points": 4},
]
UNAM_ORDINARY_ONLY_SUBJECTS = 5
UNAM_ORDINARY_ONLY_CREDITS = 3
UNAM_ORDINARY_ONLY_MIN_POINTS = 5

# Diploma admission (only UNAM publishes one)
DIPLOMA_REQUIREMENTS: Dict[str, Dict[str, int]] = {
    Institution.UNAM.value: {"min_points": 24, "min_english_points": 4},  # NSSCO D
}

ENGLISH_SUBJECT_PREFIX = "english"

# =============================================================================
# MATCH SCORING
# =============================================================================

class EligibilityStatus(str, Enum):
    """Eligibility tri-state for a student/program pair."""
    ELIGIBLE = "eligible"
    BORDERLINE = "borderline"
    NOT_ELIGIBLE = "not-eligible"


STATUS_BASE_SCORE: Dict[str, int] = {
    EligibilityStatus.ELIGIBLE.value: 70,
    EligibilityStatus.BORDERLINE.value: 40,
    EligibilityStatus.NOT_ELIGIBLE.value: 10,
}

INTEREST_WEIGHT = 25      # max points from interest alignment
POINTS_RATIO_WEIGHT = 5   # max points from points ratio

MAX_MATCH_SCORE = 100
MIN_MATCH_SCORE = 0

# Borderline: few missing requirements and close on points
BORDERLINE_MAX_MISSING = 2
BORDERLINE_MIN_POINTS_RATIO = 0.8

# Recommendation reason thresholds (interest alignment %)
STRONG_ALIGNMENT = 70
PARTIAL_ALIGNMENT = 40

# =============================================================================
# RECOMMENDATION CONFIGURATION
# =============================================================================

MAX_TOP_MATCHES = 5
MAX_ALTERNATIVE_OPTIONS = 3
MAX_IMPROVEMENT_SUGGESTIONS = 3

# Below this total the student is nudged to retake subjects
RETAKE_POINTS_THRESHOLD = 25
