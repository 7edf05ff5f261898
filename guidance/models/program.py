from sqlalchemy import Column, Integer, String, Text, JSON

from .base import Base


class GuidanceProgram(Base):
    __tablename__ = "guidance_program"

    id = Column(Integer, primary_key=True)
    institution = Column(String(20), index=True)
    faculty = Column(String)
    department = Column(String)
    program_name = Column(String)
    program_code = Column(String, index=True)
    duration = Column(String)
    # Free text in the source catalogue ("30", "N/A", ...)
    minimum_points = Column(String)
    readable_requirements = Column(Text)
    # Dict, list or JSON/plain text; parsed by guidance.logic.adapter
    structured_requirements = Column(JSON)
    career_possibilities = Column(Text)
    interest_category = Column(Text)
    description = Column(Text)
