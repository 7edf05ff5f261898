"""
Data Adapter for the Matching Engine

Reads from the guidance_program table and transforms the stored free-form
requirement text into the normalized format the matching engine expects.

This is a pure READ + TRANSFORM layer:
- NO scoring logic
- NO eligibility decisions
- NO DB writes
- NO AI/LLM usage
"""

import json
import logging
import re
from typing import List, Dict, Any, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from ..errors import ProgramNotFoundError
from ..models.program import GuidanceProgram
from .contracts import AdmissionRequirement, UniversityProgram
from .grading import normalize_level, normalize_grade, is_valid_grade, grade_to_points

logger = logging.getLogger(__name__)


# "NSSCO >= C", "NSSCH = 3", "NSSCAS B"
_REQUIREMENT_PATTERNS = [
    re.compile(r"(?=\b([\w-]+)\s*>=\s*([A-Z0-9*]+))", re.IGNORECASE),
    re.compile(r"(?=\b([\w-]+)\s*=\s*([A-Z0-9*]+))", re.IGNORECASE),
    re.compile(r"(?=\b([\w-]+)\s+([A-Z0-9*]+))", re.IGNORECASE),
]

_ALTERNATIVE_SPLIT = re.compile(r"\s+OR\s+", re.IGNORECASE)


# =============================================================================
# REQUIREMENT PARSING
# =============================================================================

def parse_single_requirement(
    subject: str,
    requirement: str,
    group: Optional[str] = None,
) -> Optional[AdmissionRequirement]:
    """
    Parse one "LEVEL >= GRADE" style requirement.

    Returns:
        AdmissionRequirement, or None when the level or grade is not recognised
    """
    text = requirement.strip()
    for pattern in _REQUIREMENT_PATTERNS:
        # Lookahead patterns so "English NSSCO C" still finds "NSSCO C"
        for match in pattern.finditer(text):
            level = normalize_level(match.group(1))
            if level is None:
                continue
            grade = normalize_grade(level, match.group(2))
            if not is_valid_grade(level, grade):
                continue
            return AdmissionRequirement(
                subject=subject.strip(),
                level=level,
                min_grade=grade,
                points=grade_to_points(level, grade),
                group=group,
                raw_requirement=text,
            )
    return None


def _parse_requirement_entry(subject: str, raw: Any) -> List[AdmissionRequirement]:
    """Parse one {subject: requirement} entry, expanding OR-alternatives."""
    text = raw if isinstance(raw, str) else str(raw)
    alternatives = [alt.strip() for alt in _ALTERNATIVE_SPLIT.split(text) if alt.strip()]
    # "Mathematics/Physical Science" lists interchangeable subjects
    subjects = [s.strip() for s in subject.split("/") if s.strip()] or [subject]

    group = subject if len(alternatives) > 1 or len(subjects) > 1 else None

    parsed: List[AdmissionRequirement] = []
    for name in subjects:
        for alternative in alternatives:
            requirement = parse_single_requirement(name, alternative, group)
            if requirement is None:
                logger.warning(f"Dropping unparseable requirement: {name} = {alternative!r}")
                continue
            parsed.append(requirement)
    return parsed


def _parse_requirement_dict(structured: Dict[str, Any]) -> List[AdmissionRequirement]:
    requirements: List[AdmissionRequirement] = []
    for subject, raw in structured.items():
        if subject.strip().lower().startswith("option"):
            # Subject combination rules are not modelled
            logger.debug(f"Skipping combination rule: {subject} = {raw}")
            continue
        if raw is None or str(raw).strip() == "":
            continue
        requirements.extend(_parse_requirement_entry(subject, raw))
    return requirements


def _parse_requirement_list(items: List[Any]) -> List[AdmissionRequirement]:
    """Parse a list of already-structured requirement dicts."""
    requirements: List[AdmissionRequirement] = []
    for item in items:
        if not isinstance(item, dict):
            logger.warning(f"Dropping non-dict requirement entry: {item!r}")
            continue
        subject = item.get("subject")
        level = normalize_level(item.get("level"))
        grade = normalize_grade(level, item.get("minGrade", item.get("min_grade")))
        if not subject or level is None or not is_valid_grade(level, grade):
            logger.warning(f"Dropping unparseable requirement: {item!r}")
            continue
        requirements.append(AdmissionRequirement(
            subject=str(subject).strip(),
            level=level,
            min_grade=grade,
            points=grade_to_points(level, grade),
            group=item.get("group"),
            raw_requirement=item.get("rawRequirement", item.get("raw_requirement")),
        ))
    return requirements


def _parse_plain_text(text: str) -> List[AdmissionRequirement]:
    """Parse one "Subject: requirement" per line."""
    entries: Dict[str, str] = {}
    for line in text.splitlines():
        if ":" not in line:
            if line.strip():
                logger.warning(f"Dropping unparseable requirement line: {line.strip()!r}")
            continue
        subject, requirement = line.split(":", 1)
        if subject.strip():
            entries[subject.strip()] = requirement.strip()
    return _parse_requirement_dict(entries)


def parse_admission_requirements(structured: Any) -> List[AdmissionRequirement]:
    """
    Parse stored structured_requirements into AdmissionRequirements.

    Accepts a {subject: requirement} dict, a JSON string of a dict or list,
    a list of structured dicts, or plain text with one "Subject: requirement"
    per line. Unparseable entries are logged and dropped.
    """
    if not structured:
        return []

    if isinstance(structured, dict):
        return _parse_requirement_dict(structured)

    if isinstance(structured, list):
        return _parse_requirement_list(structured)

    if isinstance(structured, str):
        try:
            decoded = json.loads(structured)
        except ValueError:
            return _parse_plain_text(structured)
        if isinstance(decoded, (dict, list)):
            return parse_admission_requirements(decoded)
        return _parse_plain_text(structured)

    logger.warning(f"Invalid structured_requirements type: {type(structured).__name__}")
    return []


def _split_comma_list(text: Optional[str]) -> List[str]:
    if not text:
        return []
    return [part.strip() for part in str(text).split(",") if part.strip()]


def parse_career_possibilities(text: Optional[str]) -> List[str]:
    return _split_comma_list(text)


def parse_interest_categories(text: Optional[str]) -> List[str]:
    return _split_comma_list(text)


def _parse_min_points(value: Any) -> int:
    """Lenient int parse: "30" -> 30, "N/A" -> 0."""
    if value is None:
        return 0
    try:
        return max(0, int(float(str(value).strip())))
    except (ValueError, TypeError, OverflowError):
        return 0


# =============================================================================
# ROW TRANSFORMATION
# =============================================================================

def to_program(row: GuidanceProgram) -> UniversityProgram:
    """Reshape a guidance_program row into a UniversityProgram."""
    return UniversityProgram(
        id=str(row.id),
        institution=(row.institution or "").strip().upper(),
        faculty=row.faculty or "",
        department=row.department or "",
        program_name=row.program_name or "",
        program_code=row.program_code or "",
        duration=row.duration or "",
        min_points=_parse_min_points(row.minimum_points),
        admission_requirements=parse_admission_requirements(row.structured_requirements),
        readable_requirements=row.readable_requirements or "",
        career_possibilities=parse_career_possibilities(row.career_possibilities),
        interest_categories=parse_interest_categories(row.interest_category),
        description=row.description,
    )


def _rows_to_programs(rows: List[GuidanceProgram]) -> List[UniversityProgram]:
    programs: List[UniversityProgram] = []
    for row in rows:
        try:
            programs.append(to_program(row))
        except ValueError as e:
            # Unknown institution codes cannot be matched
            logger.warning(f"Skipping program {row.id} ({row.program_name}): {e}")
    return programs


# =============================================================================
# DATABASE QUERIES
# =============================================================================

def fetch_programs(db: Session, institutions: Optional[List[str]] = None) -> List[UniversityProgram]:
    """
    Fetch programs, optionally restricted to a set of institutions.

    Args:
        db: SQLAlchemy session
        institutions: Institution codes to keep (None = all)

    Returns:
        Programs ordered by institution and name
    """
    try:
        query = db.query(GuidanceProgram)
        if institutions:
            query = query.filter(func.upper(GuidanceProgram.institution).in_(institutions))
        rows = query.order_by(GuidanceProgram.institution, GuidanceProgram.program_name).all()
    except SQLAlchemyError as e:
        logger.error(f"Failed to load programs: {e}")
        raise

    programs = _rows_to_programs(rows)
    logger.info(f"Loaded {len(programs)} programs from database")
    return programs


def fetch_program(db: Session, program_id: str) -> UniversityProgram:
    """
    Look a program up by id, then by program code, then by list position.

    Raises:
        ProgramNotFoundError: when none of the lookups match
    """
    row = None
    key = (program_id or "").strip()
    numeric = key.isascii() and key.isdigit()

    if numeric:
        row = db.get(GuidanceProgram, int(key))

    if row is None and key:
        row = (
            db.query(GuidanceProgram)
            .filter(GuidanceProgram.program_code == key)
            .first()
        )

    if row is None and numeric:
        # Legacy links use the position in the full listing
        rows = db.query(GuidanceProgram).order_by(
            GuidanceProgram.institution, GuidanceProgram.program_name
        ).all()
        index = int(key)
        if 0 <= index < len(rows):
            row = rows[index]

    if row is None:
        raise ProgramNotFoundError(f"Program not found: {program_id}")
    try:
        return to_program(row)
    except ValueError as e:
        # Same rows the listing skips
        logger.warning(f"Program {row.id} ({row.program_name}) is not servable: {e}")
        raise ProgramNotFoundError(f"Program not found: {program_id}")


def fetch_interests(db: Session) -> List[str]:
    """Sorted distinct interest categories across all programs."""
    values = db.query(GuidanceProgram.interest_category).all()
    interests = set()
    for (text,) in values:
        interests.update(parse_interest_categories(text))
    return sorted(interests)


def filter_programs(
    programs: List[UniversityProgram],
    institution: Optional[str] = None,
    faculty: Optional[str] = None,
    interest: Optional[str] = None,
    min_points: Optional[int] = None,
    max_points: Optional[int] = None,
    search: Optional[str] = None,
) -> List[UniversityProgram]:
    """Apply listing filters; text filters are case-insensitive."""
    result = programs

    if institution:
        code = institution.strip().upper()
        result = [p for p in result if p.institution == code]

    if faculty:
        needle = faculty.strip().lower()
        result = [p for p in result if needle in p.faculty.lower()]

    if interest:
        needle = interest.strip().lower()
        result = [
            p for p in result
            if any(needle in category.lower() for category in p.interest_categories)
        ]

    if min_points is not None:
        result = [p for p in result if p.min_points >= min_points]

    if max_points is not None:
        result = [p for p in result if p.min_points <= max_points]

    if search:
        needle = search.strip().lower()
        result = [
            p for p in result
            if needle in p.program_name.lower()
            or needle in p.faculty.lower()
            or any(needle in career.lower() for career in p.career_possibilities)
        ]

    return result
