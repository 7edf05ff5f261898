"""
Data Contracts for the Matching Engine

Defines Pydantic models for StudentProfile (input), UniversityProgram
(catalogue entry) and MatchingResults (output).
These contracts are the API boundary for the matching engine; field names
are snake_case in Python and camelCase on the wire.
"""

from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .constants import EducationLevel, Institution, EligibilityStatus
from .grading import calculate_total_points, grade_to_points, normalize_grade, normalize_level


class _WireModel(BaseModel):
    """Base model serialised with camelCase aliases."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        use_enum_values = True


# =============================================================================
# INPUT CONTRACTS
# =============================================================================

class Subject(_WireModel):
    """A single graded subject on a student's results."""
    subject: str
    level: EducationLevel = EducationLevel.NSSCO
    grade: str = ""
    points: int = 0

    @model_validator(mode="before")
    @classmethod
    def _accept_name_alias(cls, data: Any) -> Any:
        # OCR and the advisory matcher send {"name": ...}
        if isinstance(data, dict) and "subject" not in data and "name" in data:
            data = {**data, "subject": data["name"]}
        return data

    @field_validator("subject")
    @classmethod
    def _strip_subject(cls, value: str) -> str:
        return value.strip()

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, value: Any) -> Any:
        if value is None or value == "":
            return EducationLevel.NSSCO.value
        level = normalize_level(str(value))
        if level is None:
            raise ValueError(f"Unknown education level: {value}")
        return level

    @model_validator(mode="after")
    def _derive_points(self) -> "Subject":
        self.grade = normalize_grade(self.level, self.grade)
        if not self.points:
            self.points = grade_to_points(self.level, self.grade)
        return self


class StudentProfile(_WireModel):
    """
    Input contract for the matching engine.
    Built client-side from form input or OCR extraction.
    """
    name: Optional[str] = None
    subjects: List[Subject] = Field(default_factory=list)
    total_points: int = 0
    interests: List[str] = Field(default_factory=list)
    preferred_universities: List[Institution] = Field(default_factory=list)
    career_goals: List[str] = Field(default_factory=list)

    @field_validator("preferred_universities", mode="before")
    @classmethod
    def _upper_universities(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [v.strip().upper() if isinstance(v, str) else v for v in value]
        return value

    @field_validator("interests", "career_goals", mode="before")
    @classmethod
    def _drop_blank(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [v.strip() for v in value if isinstance(v, str) and v.strip()]
        return value

    @model_validator(mode="after")
    def _recompute_total(self) -> "StudentProfile":
        # Client-sent totals are never trusted
        self.total_points = calculate_total_points(self.subjects)
        return self


# =============================================================================
# CATALOGUE CONTRACTS
# =============================================================================

class AdmissionRequirement(_WireModel):
    """A (subject, level, minGrade) triple parsed from stored requirement text."""
    subject: str
    level: EducationLevel
    min_grade: str
    points: int = 0
    group: Optional[str] = None  # shared by OR-alternatives
    raw_requirement: Optional[str] = None


class UniversityProgram(_WireModel):
    """A program row reshaped for matching."""
    id: str
    institution: Institution
    faculty: str = ""
    department: str = ""
    program_name: str = ""
    program_code: str = ""
    duration: str = ""
    min_points: int = 0
    admission_requirements: List[AdmissionRequirement] = Field(default_factory=list)
    readable_requirements: str = ""
    career_possibilities: List[str] = Field(default_factory=list)
    interest_categories: List[str] = Field(default_factory=list)
    description: Optional[str] = None


# =============================================================================
# OUTPUT CONTRACTS
# =============================================================================

class AdvisoryVerdict(_WireModel):
    """What the external matching service said about a program (never authoritative)."""
    eligible: bool
    similarity_score: Optional[float] = None
    message: Optional[str] = None
    missing_requirements: List[str] = Field(default_factory=list)
    agrees: bool = True


class ProgramMatch(_WireModel):
    """A program scored against a student profile."""
    program: UniversityProgram
    match_score: int = Field(ge=0, le=100)
    eligibility_status: EligibilityStatus
    missing_requirements: List[str] = Field(default_factory=list)
    interest_alignment: float = Field(ge=0.0, le=100.0)
    recommendation_reason: str = ""
    advisory: Optional[AdvisoryVerdict] = None


class Recommendations(_WireModel):
    top_matches: List[ProgramMatch] = Field(default_factory=list)
    alternative_options: List[ProgramMatch] = Field(default_factory=list)
    improvement_suggestions: List[str] = Field(default_factory=list)


class AdvisorySummary(_WireModel):
    eligible_count: int = 0
    alternative_count: int = 0
    disagreements: int = 0


class MatchingResults(_WireModel):
    """
    Output contract for the matching engine.
    """
    matches: List[ProgramMatch] = Field(default_factory=list)
    general_eligibility: Dict[str, bool] = Field(default_factory=dict)
    diploma_eligibility: Dict[str, bool] = Field(default_factory=dict)
    recommendations: Recommendations = Field(default_factory=Recommendations)
    total_points: int = 0
    warnings: List[str] = Field(default_factory=list)
    advisory_summary: Optional[AdvisorySummary] = None
