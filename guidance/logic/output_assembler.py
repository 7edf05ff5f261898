"""
Output Assembler

Builds the human-readable parts of MatchingResults: recommendation reasons,
improvement suggestions and warnings.
"""

from typing import List, Dict

from .contracts import StudentProfile, ProgramMatch, UniversityProgram
from .constants import (
    EligibilityStatus,
    STRONG_ALIGNMENT,
    PARTIAL_ALIGNMENT,
    MAX_IMPROVEMENT_SUGGESTIONS,
    RETAKE_POINTS_THRESHOLD,
)


def build_recommendation_reason(
    program: UniversityProgram,
    status: str,
    alignment: float,
    missing: List[str],
) -> str:
    """One-sentence explanation shown under each match."""
    if status == EligibilityStatus.ELIGIBLE.value:
        if alignment > STRONG_ALIGNMENT:
            return (
                "Excellent match! You meet all requirements and this program strongly "
                f"aligns with your interests in {', '.join(program.interest_categories)}."
            )
        if alignment > PARTIAL_ALIGNMENT:
            return "Good match! You qualify for this program and it partially aligns with your interests."
        return (
            "You meet the requirements for this program, though it may not fully "
            "align with your stated interests."
        )

    if status == EligibilityStatus.BORDERLINE.value:
        return (
            f"Close match! You're almost eligible - {', '.join(missing)}. "
            "Consider this as a stretch goal."
        )

    return f"This program requires additional preparation: {', '.join(missing[:2])}."


def _add(suggestions: List[str], text: str) -> None:
    if text not in suggestions:
        suggestions.append(text)


def build_improvement_suggestions(
    profile: StudentProfile,
    general_eligibility: Dict[str, bool],
    top_matches: List[ProgramMatch],
    alternatives: List[ProgramMatch],
) -> List[str]:
    """
    Generate improvement suggestions, de-duplicated and capped.

    Order: points, English, diploma pathway, subjects missing from
    alternatives, then interest-driven subject hints.
    """
    suggestions: List[str] = []

    if profile.total_points < RETAKE_POINTS_THRESHOLD:
        _add(suggestions, "Consider retaking some subjects to improve your total points - "
                          "this would open up more program options")

    if not any(general_eligibility.values()):
        _add(suggestions, "Focus on improving your English grade to meet general admission requirements")

    if not top_matches:
        _add(suggestions, "Consider diploma programs as a pathway to degree programs")

    missing = [req.lower() for match in alternatives for req in match.missing_requirements]
    if any("mathematics" in req for req in missing):
        _add(suggestions, "Improve your Mathematics grade to access more programs")
    if any("english" in req for req in missing):
        _add(suggestions, "Meet the English language requirements for your preferred programs")
    if any("science" in req for req in missing):
        _add(suggestions, "Consider improving your Science subjects for STEM programs")

    subject_names = [s.subject.lower() for s in profile.subjects]
    interests = [i.lower() for i in profile.interests]
    has_math = any("math" in name for name in subject_names)
    has_science = any("science" in name for name in subject_names)

    if not has_math and any("engineering" in i for i in interests):
        _add(suggestions, "Mathematics is essential for engineering programs - consider taking it")
    if not has_science and any("science" in i for i in interests):
        _add(suggestions, "Science subjects would help you access programs in your areas of interest")

    return suggestions[:MAX_IMPROVEMENT_SUGGESTIONS]


def build_warnings(
    profile: StudentProfile,
    catalogue_size: int,
    relevant_size: int,
) -> List[str]:
    """Conditions the student should know about that are not errors."""
    warnings: List[str] = []

    if catalogue_size == 0:
        warnings.append("No programs are available in the catalogue")
    elif relevant_size == 0 and profile.preferred_universities:
        warnings.append(
            "None of your preferred universities "
            f"({', '.join(profile.preferred_universities)}) has programs in the catalogue"
        )

    unknown = [s.subject for s in profile.subjects if s.points == 0]
    if unknown:
        warnings.append(
            f"Could not determine points for: {', '.join(unknown)}. "
            "Check the grade and level for these subjects."
        )

    return warnings
