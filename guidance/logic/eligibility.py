"""
Eligibility Rules

The single authoritative implementation of institution-level admission
rules and per-program subject requirements.
All logic is deterministic - no AI/ML components.
"""

import logging
from collections import OrderedDict
from typing import Dict, List, Optional, Tuple

from .contracts import StudentProfile, Subject, UniversityProgram, AdmissionRequirement
from .constants import (
    INSTITUTIONS,
    GENERAL_REQUIREMENTS,
    DIPLOMA_REQUIREMENTS,
    UNAM_SUBJECT_MIX_OPTIONS,
    UNAM_ORDINARY_ONLY_SUBJECTS,
    UNAM_ORDINARY_ONLY_CREDITS,
    UNAM_ORDINARY_ONLY_MIN_POINTS,
    ENGLISH_SUBJECT_PREFIX,
    ORDINARY_RANK,
    Institution,
)
from .grading import calculate_total_points, grade_meets_requirement, level_rank

logger = logging.getLogger(__name__)


# =============================================================================
# HELPERS
# =============================================================================

def english_points(subjects: List[Subject]) -> Optional[int]:
    """
    Best points among English subjects ("English", "English Second Language", ...).

    Returns:
        Points, or None when the student has no English subject
    """
    points = [
        s.points for s in subjects
        if s.subject.strip().lower().startswith(ENGLISH_SUBJECT_PREFIX)
    ]
    return max(points) if points else None


def _split_by_rank(subjects: List[Subject]) -> Tuple[List[Subject], List[Subject]]:
    """Split into (higher, ordinary) subjects by level rank."""
    higher = [s for s in subjects if level_rank(s.level) > ORDINARY_RANK]
    ordinary = [s for s in subjects if level_rank(s.level) == ORDINARY_RANK]
    return higher, ordinary


def _meets_unam_subject_mix(subjects: List[Subject]) -> bool:
    higher, ordinary = _split_by_rank(subjects)

    for option in UNAM_SUBJECT_MIX_OPTIONS:
        strong_higher = [s for s in higher if s.points >= option["higher_min_points"]]
        strong_ordinary = [s for s in ordinary if s.points >= option["ordinary_min_points"]]
        if (len(strong_higher) >= option["higher_count"]
                and len(strong_ordinary) >= option["ordinary_count"]):
            return True

    # Ordinary-only route: five subjects, three of them credits
    credits = [s for s in ordinary if s.points >= UNAM_ORDINARY_ONLY_MIN_POINTS]
    return (len(ordinary) >= UNAM_ORDINARY_ONLY_SUBJECTS
            and len(credits) >= UNAM_ORDINARY_ONLY_CREDITS)


# =============================================================================
# INSTITUTION RULES
# =============================================================================

def check_general_eligibility(profile: StudentProfile, institution: str) -> bool:
    """
    Check degree admission for one institution.

    Args:
        profile: Student profile (totalPoints already recomputed)
        institution: "UNAM", "NUST" or "IUM"

    Returns:
        True when the base thresholds (and for UNAM a subject mix) are met
    """
    rules = GENERAL_REQUIREMENTS.get(institution)
    if rules is None:
        return False

    english = english_points(profile.subjects)
    if english is None:
        return False

    total = calculate_total_points(profile.subjects)
    if total < rules["min_points"] or english < rules["min_english_points"]:
        return False

    if institution == Institution.UNAM.value:
        return _meets_unam_subject_mix(profile.subjects)

    return True


def check_diploma_eligibility(profile: StudentProfile, institution: str) -> Optional[bool]:
    """
    Check diploma admission. Returns None for institutions without diploma rules.
    """
    rules = DIPLOMA_REQUIREMENTS.get(institution)
    if rules is None:
        return None

    english = english_points(profile.subjects)
    if english is None:
        return False

    total = calculate_total_points(profile.subjects)
    return total >= rules["min_points"] and english >= rules["min_english_points"]


def general_eligibility_map(profile: StudentProfile) -> Dict[str, bool]:
    return {code: check_general_eligibility(profile, code) for code in INSTITUTIONS}


def diploma_eligibility_map(profile: StudentProfile) -> Dict[str, bool]:
    result: Dict[str, bool] = {}
    for code in INSTITUTIONS:
        verdict = check_diploma_eligibility(profile, code)
        if verdict is not None:
            result[code] = verdict
    return result


# =============================================================================
# PROGRAM REQUIREMENTS
# =============================================================================

def _group_requirements(
    requirements: List[AdmissionRequirement],
) -> List[List[AdmissionRequirement]]:
    """Group OR-alternatives together, preserving order; ungrouped stand alone."""
    groups: "OrderedDict[str, List[AdmissionRequirement]]" = OrderedDict()
    for index, requirement in enumerate(requirements):
        key = f"group:{requirement.group}" if requirement.group else f"single:{index}"
        groups.setdefault(key, []).append(requirement)
    return list(groups.values())


def _describe_missing(
    requirement: AdmissionRequirement,
    student_subject: Optional[Subject],
) -> str:
    if student_subject is None:
        return (f"{requirement.subject} at {requirement.level} level "
                f"({requirement.min_grade} or better)")
    return (f"{requirement.subject}: Need {requirement.min_grade} or better "
            f"(you have {student_subject.grade or 'no grade'})")


def check_program_requirements(
    profile: StudentProfile,
    program: UniversityProgram,
) -> Tuple[bool, List[str]]:
    """
    Check a student's subjects against one program's requirements.

    Returns:
        (eligible, missing) where missing lists human-readable shortfalls
    """
    missing: List[str] = []

    total = calculate_total_points(profile.subjects)
    if total < program.min_points:
        missing.append(f"Need {program.min_points - total} more points")

    # A subject may be taken at more than one level
    subjects_by_name: Dict[str, List[Subject]] = {}
    for subject in profile.subjects:
        subjects_by_name.setdefault(subject.subject.strip().lower(), []).append(subject)

    for alternatives in _group_requirements(program.admission_requirements):
        descriptions: List[str] = []
        satisfied = False
        for requirement in alternatives:
            taken = subjects_by_name.get(requirement.subject.strip().lower(), [])
            if any(
                grade_meets_requirement(s.level, s.grade, requirement.level, requirement.min_grade)
                for s in taken
            ):
                satisfied = True
                break
            # Only subjects at or above the required level can ever satisfy it
            comparable = [s for s in taken if level_rank(s.level) >= level_rank(requirement.level)]
            best = max(comparable, key=lambda s: s.points) if comparable else None
            descriptions.append(_describe_missing(requirement, best))

        if not satisfied:
            missing.append(" or ".join(descriptions))

    return len(missing) == 0, missing
