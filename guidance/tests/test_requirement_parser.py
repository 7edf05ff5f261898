"""
Requirement parsing and row transformation tests.
"""

import json
import logging

from guidance.logic.adapter import (
    parse_admission_requirements,
    parse_single_requirement,
    parse_career_possibilities,
    parse_interest_categories,
    to_program,
    filter_programs,
    fetch_programs,
    _parse_min_points,
)
from guidance.models import GuidanceProgram


def test_parses_all_requirement_forms():
    assert parse_single_requirement("Mathematics", "NSSCO >= C").min_grade == "C"
    assert parse_single_requirement("Mathematics", "NSSCH = 3").level == "NSSCH"
    req = parse_single_requirement("Mathematics", "NSSCAS B")
    assert (req.level, req.min_grade, req.points) == ("NSSCAS", "B", 8)
    assert parse_single_requirement("English", "English NSSCO C or better").min_grade == "C"


def test_dict_with_or_alternatives_shares_group():
    reqs = parse_admission_requirements({"Mathematics": "NSSCH >= 3 OR NSSCAS >= C"})
    assert [(r.level, r.min_grade) for r in reqs] == [("NSSCH", "3"), ("NSSCAS", "C")]
    assert reqs[0].group == reqs[1].group == "Mathematics"


def test_single_requirement_has_no_group():
    reqs = parse_admission_requirements({"English": "NSSCO >= C"})
    assert len(reqs) == 1
    assert reqs[0].group is None
    assert reqs[0].raw_requirement == "NSSCO >= C"


def test_slash_subjects_are_alternatives():
    reqs = parse_admission_requirements({"Physics/Physical Science": "NSSCO >= C"})
    assert [r.subject for r in reqs] == ["Physics", "Physical Science"]
    assert len({r.group for r in reqs}) == 1


def test_option_keys_are_skipped(caplog):
    with caplog.at_level(logging.DEBUG, logger="guidance.logic.adapter"):
        reqs = parse_admission_requirements({
            "English": "NSSCO >= C",
            "Option 1": "Any two sciences at NSSCO C",
        })
    assert [r.subject for r in reqs] == ["English"]
    assert "combination rule" in caplog.text


def test_unparseable_requirements_dropped_with_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="guidance.logic.adapter"):
        reqs = parse_admission_requirements({
            "English": "NSSCO >= C",
            "Latin": "A-Level >= B",
            "Art": "NSSCO >= Z",
        })
    assert [r.subject for r in reqs] == ["English"]
    assert "Latin" in caplog.text
    assert "Art" in caplog.text


def test_json_string_and_list_inputs():
    as_json = json.dumps({"Biology": "NSSCO >= C"})
    assert parse_admission_requirements(as_json)[0].subject == "Biology"

    structured = [
        {"subject": "Biology", "level": "NSSCO", "minGrade": "B"},
        {"subject": "Chemistry", "level": "nssco", "minGrade": "c", "group": "science"},
        {"subject": "Broken", "level": "XYZ", "minGrade": "A"},
    ]
    reqs = parse_admission_requirements(json.dumps(structured))
    assert [(r.subject, r.min_grade, r.group) for r in reqs] == [
        ("Biology", "B", None),
        ("Chemistry", "C", "science"),
    ]


def test_plain_text_lines():
    text = "Mathematics: NSSCO >= C\nEnglish: NSSCO = D\n\nrandom note"
    reqs = parse_admission_requirements(text)
    assert [(r.subject, r.min_grade) for r in reqs] == [("Mathematics", "C"), ("English", "D")]


def test_empty_inputs():
    assert parse_admission_requirements(None) == []
    assert parse_admission_requirements("") == []
    assert parse_admission_requirements({}) == []
    assert parse_admission_requirements(42) == []


def test_comma_lists():
    assert parse_career_possibilities("Nurse, Midwife,, ") == ["Nurse", "Midwife"]
    assert parse_interest_categories(None) == []


def test_min_points_is_lenient():
    assert _parse_min_points("30") == 30
    assert _parse_min_points("27.0") == 27
    assert _parse_min_points("N/A") == 0
    assert _parse_min_points(None) == 0


def test_to_program_reshapes_row():
    row = GuidanceProgram(
        id=7,
        institution="nust",
        faculty="Computing",
        program_name="Bachelor of Informatics",
        program_code="07BBIF",
        minimum_points="none",
        structured_requirements={"Mathematics": "NSSCO >= D"},
        career_possibilities="Analyst, Developer",
        interest_category="Technology",
    )
    program = to_program(row)
    assert program.id == "7"
    assert program.institution == "NUST"
    assert program.min_points == 0
    assert program.admission_requirements[0].subject == "Mathematics"
    assert program.career_possibilities == ["Analyst", "Developer"]

    wire = program.model_dump(by_alias=True)
    assert wire["programName"] == "Bachelor of Informatics"
    assert wire["admissionRequirements"][0]["minGrade"] == "D"


def test_filter_programs(db_session):
    programs = fetch_programs(db_session)
    assert len(programs) == 4

    assert {p.id for p in filter_programs(programs, institution="unam")} == {"1", "2"}
    assert {p.id for p in filter_programs(programs, interest="technology")} == {"3", "4"}
    assert {p.id for p in filter_programs(programs, min_points=26)} == {"1", "3"}
    assert {p.id for p in filter_programs(programs, max_points=25)} == {"2", "4"}
    assert [p.id for p in filter_programs(programs, search="nurse")] == ["2"]
    assert [p.id for p in filter_programs(programs, search="computing")] == ["3"]
