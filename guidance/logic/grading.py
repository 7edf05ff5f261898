"""
Grade Conversion and Comparison

Converts secondary school grades into admission points and decides whether a
student's grade satisfies a program requirement, including comparisons
across education levels (e.g. an NSSCH grade against an NSSCO requirement).
All logic is deterministic - no AI/ML components.
"""

from typing import Iterable, Optional

from .constants import (
    GRADE_ORDER,
    GRADE_TO_POINTS,
    LEVEL_HIERARCHY,
    BEST_SUBJECT_COUNT,
)


# Spellings seen on certificates and OCR output
_LEVEL_ALIASES = {
    "NSSC-O": "NSSCO",
    "NSSC O": "NSSCO",
    "NSSC ORDINARY": "NSSCO",
    "NSSC-AS": "NSSCAS",
    "NSSC AS": "NSSCAS",
    "NSSC-H": "NSSCH",
    "NSSC H": "NSSCH",
    "NSSC HIGHER": "NSSCH",
}


def normalize_level(raw: Optional[str]) -> Optional[str]:
    """
    Normalize a raw education level label.

    Returns:
        Canonical level (e.g. "NSSCO") or None if the level is not recognised
    """
    if not raw:
        return None
    text = " ".join(str(raw).upper().split())
    text = _LEVEL_ALIASES.get(text, text)
    return text if text in LEVEL_HIERARCHY else None


def normalize_grade(level: Optional[str], raw: Optional[str]) -> str:
    """Upper-case a grade token and strip whitespace ("a *" -> "A*")."""
    if raw is None:
        return ""
    grade = "".join(str(raw).split()).upper()
    if level in ("NSSCH", "HIGCSE") and grade.startswith("GRADE"):
        grade = grade[len("GRADE"):]
    return grade


def level_rank(level: Optional[str]) -> int:
    """Hierarchy rank of a level, 0 when unknown."""
    return LEVEL_HIERARCHY.get(level or "", 0)


def is_valid_grade(level: Optional[str], grade: Optional[str]) -> bool:
    return normalize_grade(level, grade) in GRADE_ORDER.get(level or "", [])


def grade_to_points(level: Optional[str], grade: Optional[str]) -> int:
    """
    Convert a grade to admission points.

    Args:
        level: Education level (e.g. "NSSCO")
        grade: Grade token (e.g. "B", "2")

    Returns:
        Points for the grade, 0 for an unknown level or grade
    """
    table = GRADE_TO_POINTS.get(level or "")
    if not table:
        return 0
    return table.get(normalize_grade(level, grade), 0)


def calculate_total_points(subjects: Iterable) -> int:
    """
    Sum of the best BEST_SUBJECT_COUNT subject points.

    Accepts anything with a `points` attribute (or dicts with a "points" key).
    """
    points = []
    for subject in subjects:
        value = subject.get("points", 0) if isinstance(subject, dict) else getattr(subject, "points", 0)
        points.append(int(value or 0))
    points.sort(reverse=True)
    return sum(points[:BEST_SUBJECT_COUNT])


def grade_meets_requirement(
    student_level: str,
    student_grade: str,
    required_level: str,
    required_grade: str,
) -> bool:
    """
    Check whether a student's grade satisfies a requirement.

    Same rank: compare positions in the required level's grade order
    (NSSCO and IGCSE share an alphabet, as do NSSCH and HIGCSE).
    Higher student rank: compare point values.
    Lower student rank: never satisfies.
    """
    student_rank = level_rank(student_level)
    required_rank = level_rank(required_level)
    if not student_rank or not required_rank:
        return False

    student_grade = normalize_grade(student_level, student_grade)
    required_grade = normalize_grade(required_level, required_grade)

    if student_rank == required_rank:
        order = GRADE_ORDER[required_level]
        if student_grade not in order or required_grade not in order:
            return False
        # Lower index = better grade
        return order.index(student_grade) <= order.index(required_grade)

    if student_rank > required_rank:
        student_points = grade_to_points(student_level, student_grade)
        required_points = grade_to_points(required_level, required_grade)
        if not student_points or not required_points:
            return False
        return student_points >= required_points

    return False
