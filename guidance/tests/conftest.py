"""
Shared fixtures: in-memory SQLite catalogue, API client and fake LLM.
"""

import os

# Must be set before db.py is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.pop("MATCHING_SERVICE_URL", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from db import Base, get_session
from guidance.models import GuidanceProgram


SAMPLE_PROGRAMS = [
    {
        "id": 1,
        "institution": "UNAM",
        "faculty": "Faculty of Engineering and the Built Environment",
        "department": "Civil Engineering",
        "program_name": "Bachelor of Science in Civil Engineering",
        "program_code": "19BCVE",
        "duration": "5 years",
        "minimum_points": "37",
        "readable_requirements": "Mathematics NSSCH 3, English NSSCO C",
        "structured_requirements": {
            "Mathematics": "NSSCH >= 3 OR NSSCAS >= C",
            "English": "NSSCO >= C",
        },
        "career_possibilities": "Civil Engineer, Structural Engineer",
        "interest_category": "Engineering, Construction",
        "description": "Design and construction of infrastructure.",
    },
    {
        "id": 2,
        "institution": "UNAM",
        "faculty": "Faculty of Health Sciences",
        "department": "Nursing",
        "program_name": "Bachelor of Nursing Science",
        "program_code": "13BNSC",
        "duration": "4 years",
        "minimum_points": "25",
        "readable_requirements": "Biology NSSCO C, English NSSCO C",
        "structured_requirements": '{"Biology": "NSSCO >= C", "English": "NSSCO >= C", "Option 1": "Chemistry"}',
        "career_possibilities": "Registered Nurse, Midwife",
        "interest_category": "Health, Science",
        "description": None,
    },
    {
        "id": 3,
        "institution": "NUST",
        "faculty": "Faculty of Computing and Informatics",
        "department": "Computer Science",
        "program_name": "Bachelor of Computer Science",
        "program_code": "07BCMS",
        "duration": "3 years",
        "minimum_points": "26",
        "readable_requirements": "Mathematics NSSCO C, English NSSCO D",
        "structured_requirements": "Mathematics: NSSCO >= C\nEnglish: NSSCO >= D",
        "career_possibilities": "Software Developer, Data Scientist",
        "interest_category": "Technology, Computers",
        "description": None,
    },
    {
        "id": 4,
        "institution": "IUM",
        "faculty": "Faculty of Business",
        "department": "Management",
        "program_name": "Bachelor of Business Administration",
        "program_code": "BBA01",
        "duration": "3 years",
        "minimum_points": "N/A",
        "readable_requirements": "English NSSCO D",
        "structured_requirements": {"English": "NSSCO >= D"},
        "career_possibilities": "Business Manager, Entrepreneur",
        "interest_category": "Business, Technology",
        "description": None,
    },
]


def make_subjects(*entries):
    """(subject, level, grade) tuples -> wire subjects."""
    return [{"subject": s, "level": level, "grade": grade} for s, level, grade in entries]


# English C + four more NSSCO subjects totalling 20 -> 25 points
WORKED_EXAMPLE_SUBJECTS = make_subjects(
    ("English", "NSSCO", "C"),
    ("Mathematics", "NSSCO", "C"),
    ("Biology", "NSSCO", "C"),
    ("Geography", "NSSCO", "C"),
    ("History", "NSSCO", "C"),
)


@pytest.fixture
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture
def seeded(session_factory):
    db = session_factory()
    for row in SAMPLE_PROGRAMS:
        db.add(GuidanceProgram(**row))
    db.commit()
    db.close()
    return session_factory


@pytest.fixture
def db_session(seeded):
    db = seeded()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(seeded):
    from main import app

    def override_get_session():
        db = seeded()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


class FakeLLM:
    """Stands in for LLMClient; records prompts."""

    def __init__(self, text="You have a strong profile for engineering.\n\nMore detail.", chunks=None, fail_after=None):
        self.text = text
        self.chunks = chunks or ["Hello", " there"]
        self.fail_after = fail_after
        self.prompts = []
        self.configured = True

    def generate(self, prompt, max_tokens=1000, temperature=0.7):
        self.prompts.append(prompt)
        return self.text

    def stream(self, messages, max_tokens=2000, temperature=0.7):
        from guidance.errors import LLMServiceError

        self.prompts.append(messages)
        for index, chunk in enumerate(self.chunks):
            if self.fail_after is not None and index >= self.fail_after:
                raise LLMServiceError("AI service stream failed")
            yield chunk


@pytest.fixture
def fake_llm():
    return FakeLLM()
