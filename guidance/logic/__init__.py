"""
Matching Logic Module

Provides the deterministic eligibility and scoring engine for matching
students to university programs.
"""

from .contracts import (
    Subject,
    StudentProfile,
    AdmissionRequirement,
    UniversityProgram,
    ProgramMatch,
    MatchingResults,
    AdvisoryVerdict,
)
from .engine import MatchingEngine, match_programs
from .constants import EligibilityStatus, EducationLevel, Institution

__all__ = [
    # Main engine
    "MatchingEngine",
    "match_programs",

    # Contracts
    "Subject",
    "StudentProfile",
    "AdmissionRequirement",
    "UniversityProgram",
    "ProgramMatch",
    "MatchingResults",
    "AdvisoryVerdict",

    # Enums
    "EligibilityStatus",
    "EducationLevel",
    "Institution",
]
