"""
Institution admission rules and per-program requirement checks.
"""

from conftest import make_subjects, WORKED_EXAMPLE_SUBJECTS

from guidance.logic.contracts import StudentProfile, UniversityProgram, AdmissionRequirement
from guidance.logic.eligibility import (
    check_general_eligibility,
    check_diploma_eligibility,
    check_program_requirements,
    general_eligibility_map,
    diploma_eligibility_map,
    english_points,
)


def _profile(*entries, **kwargs):
    return StudentProfile(subjects=make_subjects(*entries), **kwargs)


def _program(requirements=(), min_points=0, institution="UNAM"):
    return UniversityProgram(
        id="p1",
        institution=institution,
        program_name="Test Program",
        min_points=min_points,
        admission_requirements=list(requirements),
    )


def _req(subject, level, grade, group=None):
    return AdmissionRequirement(subject=subject, level=level, min_grade=grade, group=group)


# =============================================================================
# GENERAL ELIGIBILITY
# =============================================================================

def test_worked_example_unam_ordinary_only_route():
    """English C + 4 NSSCO subjects at C = 25 points, eligible via the ordinary route."""
    profile = StudentProfile(subjects=WORKED_EXAMPLE_SUBJECTS)
    assert profile.total_points == 25
    assert check_general_eligibility(profile, "UNAM") is True
    assert check_general_eligibility(profile, "NUST") is True
    assert check_general_eligibility(profile, "IUM") is True


def test_repeated_calls_agree():
    profile = StudentProfile(subjects=WORKED_EXAMPLE_SUBJECTS)
    first = general_eligibility_map(profile)
    assert all(general_eligibility_map(profile) == first for _ in range(5))


def test_no_english_subject_fails_everywhere():
    profile = _profile(
        ("Mathematics", "NSSCO", "A*"),
        ("Biology", "NSSCO", "A*"),
        ("Geography", "NSSCO", "A*"),
        ("History", "NSSCO", "A*"),
        ("Physics", "NSSCO", "A*"),
    )
    assert profile.total_points == 40
    assert general_eligibility_map(profile) == {"UNAM": False, "NUST": False, "IUM": False}
    assert diploma_eligibility_map(profile) == {"UNAM": False}


def test_english_threshold_differs_by_institution():
    # English D (4 points): below UNAM (5), meets IUM (4) and NUST (3)
    profile = _profile(
        ("English", "NSSCO", "D"),
        ("Mathematics", "NSSCO", "A"),
        ("Biology", "NSSCO", "A"),
        ("Geography", "NSSCO", "B"),
        ("History", "NSSCO", "B"),
    )
    assert profile.total_points == 30
    assert general_eligibility_map(profile) == {"UNAM": False, "NUST": True, "IUM": True}


def test_best_english_subject_counts():
    profile = _profile(
        ("English First Language", "NSSCO", "E"),
        ("English Second Language", "NSSCO", "B"),
    )
    assert english_points(profile.subjects) == 6


def test_below_total_points_fails():
    profile = _profile(
        ("English", "NSSCO", "C"),
        ("Mathematics", "NSSCO", "C"),
        ("Biology", "NSSCO", "C"),
        ("Geography", "NSSCO", "D"),
        ("History", "NSSCO", "D"),
    )
    assert profile.total_points == 23
    assert not any(general_eligibility_map(profile).values())


def test_unam_higher_level_mix():
    # 2 NSSCH at 6+ and 3 NSSCO at C+
    profile = _profile(
        ("English", "NSSCO", "C"),
        ("Mathematics", "NSSCH", "3"),
        ("Physical Science", "NSSCH", "4"),
        ("Biology", "NSSCO", "C"),
        ("Geography", "NSSCO", "C"),
    )
    assert profile.total_points == 5 + 7 + 6 + 5 + 5
    assert check_general_eligibility(profile, "UNAM") is True


def test_unam_mix_not_met():
    # Only 4 ordinary subjects and a single higher subject
    profile = _profile(
        ("English", "NSSCO", "A"),
        ("Mathematics", "NSSCH", "1"),
        ("Biology", "NSSCO", "E"),
        ("Geography", "NSSCO", "E"),
        ("History", "NSSCO", "C"),
    )
    assert profile.total_points == 7 + 9 + 3 + 3 + 5
    assert check_general_eligibility(profile, "UNAM") is False
    assert check_general_eligibility(profile, "NUST") is True


def test_diploma_only_for_unam():
    profile = _profile(
        ("English", "NSSCO", "D"),
        ("Mathematics", "NSSCO", "C"),
        ("Biology", "NSSCO", "C"),
        ("Geography", "NSSCO", "C"),
        ("History", "NSSCO", "C"),
    )
    assert profile.total_points == 24
    assert diploma_eligibility_map(profile) == {"UNAM": True}
    assert check_diploma_eligibility(profile, "NUST") is None


# =============================================================================
# PROGRAM REQUIREMENTS
# =============================================================================

def test_program_requirements_met():
    profile = StudentProfile(subjects=WORKED_EXAMPLE_SUBJECTS)
    program = _program([_req("Mathematics", "NSSCO", "C"), _req("english", "NSSCO", "D")], min_points=25)
    assert check_program_requirements(profile, program) == (True, [])


def test_points_shortfall_reported():
    profile = StudentProfile(subjects=WORKED_EXAMPLE_SUBJECTS)
    eligible, missing = check_program_requirements(profile, _program(min_points=30))
    assert not eligible
    assert missing == ["Need 5 more points"]


def test_missing_subject_and_low_grade_messages():
    profile = StudentProfile(subjects=WORKED_EXAMPLE_SUBJECTS)
    program = _program([_req("Physics", "NSSCO", "B"), _req("Mathematics", "NSSCO", "A")])
    eligible, missing = check_program_requirements(profile, program)
    assert not eligible
    assert missing == [
        "Physics at NSSCO level (B or better)",
        "Mathematics: Need A or better (you have C)",
    ]


def test_or_group_met_by_any_alternative():
    profile = _profile(("Mathematics", "NSSCAS", "C"), ("English", "NSSCO", "C"))
    program = _program([
        _req("Mathematics", "NSSCH", "3", group="Mathematics"),
        _req("Mathematics", "NSSCAS", "C", group="Mathematics"),
    ])
    assert check_program_requirements(profile, program) == (True, [])


def test_or_group_unmet_joins_alternatives():
    profile = _profile(("English", "NSSCO", "C"))
    program = _program([
        _req("Physics", "NSSCO", "C", group="science"),
        _req("Chemistry", "NSSCO", "C", group="science"),
    ])
    eligible, missing = check_program_requirements(profile, program)
    assert not eligible
    assert missing == ["Physics at NSSCO level (C or better) or Chemistry at NSSCO level (C or better)"]


def test_higher_level_subject_satisfies_ordinary_requirement():
    profile = _profile(("Mathematics", "NSSCH", "3"))
    program = _program([_req("Mathematics", "NSSCO", "B")])
    assert check_program_requirements(profile, program)[0] is True


def test_lower_level_subject_reported_as_missing():
    profile = _profile(("Mathematics", "NSSCO", "A*"))
    program = _program([_req("Mathematics", "NSSCH", "3")])
    assert check_program_requirements(profile, program) == (
        False, ["Mathematics at NSSCH level (3 or better)"],
    )


def test_low_grade_at_required_level_reports_grade():
    profile = _profile(("Mathematics", "NSSCO", "A*"), ("Mathematics", "NSSCH", "4"))
    program = _program([_req("Mathematics", "NSSCH", "3")])
    assert check_program_requirements(profile, program) == (
        False, ["Mathematics: Need 3 or better (you have 4)"],
    )
