import os
import csv
import json
import logging
import sys

from dotenv import load_dotenv

from db import Base, engine, get_db
from guidance.models import GuidanceProgram

load_dotenv()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

CSV_PATH = os.getenv(
    "PROGRAMS_CSV",
    os.path.join(os.path.dirname(os.path.abspath(__file__)), "data/guidance_programs.csv"),
)

COLUMNS = [
    "institution",
    "faculty",
    "department",
    "program_name",
    "program_code",
    "duration",
    "minimum_points",
    "readable_requirements",
    "structured_requirements",
    "career_possibilities",
    "interest_category",
    "description",
]


def _structured(value):
    """Keep JSON requirement dicts as JSON, anything else as text."""
    if not value:
        return None
    try:
        return json.loads(value)
    except ValueError:
        return value


def row_to_program(row):
    values = {col: (row.get(col) or "").strip() or None for col in COLUMNS}
    values["institution"] = (values["institution"] or "").upper() or None
    values["structured_requirements"] = _structured(values["structured_requirements"])
    return GuidanceProgram(**values)


def import_programs(csv_path=CSV_PATH, replace=False):
    """
    Load a CSV catalogue (one row per program, columns named like the table)
    into guidance_program. Rows are upserted on (institution, program_code).
    """
    Base.metadata.create_all(bind=engine)

    with open(csv_path, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))

    inserted = updated = skipped = 0
    # Rows handled in this run, keyed like the upsert (autoflush is off)
    seen = {}
    with get_db() as db:
        if replace:
            deleted = db.query(GuidanceProgram).delete()
            logger.info(f"Deleted {deleted} existing programs")

        for row in rows:
            program = row_to_program(row)
            if not program.program_name or not program.institution:
                skipped += 1
                continue

            key = (program.institution, program.program_code)
            existing = seen.get(key) if program.program_code else None
            if existing is None and program.program_code and not replace:
                existing = (
                    db.query(GuidanceProgram)
                    .filter(
                        GuidanceProgram.institution == program.institution,
                        GuidanceProgram.program_code == program.program_code,
                    )
                    .first()
                )

            if existing:
                for col in COLUMNS:
                    setattr(existing, col, getattr(program, col))
                updated += 1
            else:
                db.add(program)
                inserted += 1
                existing = program

            if program.program_code:
                seen[key] = existing

    logger.info(f"✅ Programs imported: {inserted} inserted, {updated} updated, {skipped} skipped")
    return inserted, updated, skipped


if __name__ == "__main__":
    path = sys.argv[1] if len(sys.argv) > 1 else CSV_PATH
    import_programs(path, replace="--replace" in sys.argv)
