"""
Document Analyzer

Validates an uploaded results document, sends it to the OCR service,
normalises the extracted subjects and asks the LLM for a short narrative.
"""

import base64
import binascii
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from starlette.concurrency import run_in_threadpool

from ..errors import InvalidDocumentError
from ..logic.constants import EducationLevel
from ..logic.grading import normalize_level, normalize_grade, grade_to_points, calculate_total_points
from ..services.ocr_client import ocr_client, OCRClient
from .llm_client import llm, LLMClient
from .prompt_builder import build_document_analysis_prompt

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/webp", "application/pdf")
MAX_DOCUMENT_BYTES = 10 * 1024 * 1024

_DATA_URL_PREFIX = re.compile(r"^data:(?P<mime>[\w/+.-]+)?(;[\w=-]+)*;base64,", re.IGNORECASE)


def validate_document(image_data: Optional[str], mime_type: Optional[str]) -> Tuple[str, str]:
    """
    Check type, encoding and size before any external call.

    Returns:
        (base64 payload without data-URL prefix, normalised MIME type)

    Raises:
        InvalidDocumentError
    """
    mime = (mime_type or "").strip().lower()
    if mime not in ALLOWED_MIME_TYPES:
        raise InvalidDocumentError(
            "Unsupported file type",
            details=f"Allowed types: {', '.join(ALLOWED_MIME_TYPES)}",
        )

    payload = (image_data or "").strip()
    prefix = _DATA_URL_PREFIX.match(payload)
    if prefix:
        payload = payload[prefix.end():]
    if not payload:
        raise InvalidDocumentError("No document data provided")

    try:
        decoded = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise InvalidDocumentError("Document data is not valid base64")

    if len(decoded) > MAX_DOCUMENT_BYTES:
        raise InvalidDocumentError(
            "Document is too large",
            details=f"Maximum size is {MAX_DOCUMENT_BYTES // (1024 * 1024)}MB",
        )

    return payload, mime


def normalize_extracted_subjects(raw_subjects: Any) -> List[Dict[str, Any]]:
    """
    Normalise OCR subjects to {name, level, grade, points}.

    Unknown levels default to NSSCO; points are always derived from the grade.
    """
    subjects = []
    for item in raw_subjects or []:
        if not isinstance(item, dict):
            continue
        name = str(item.get("name") or item.get("subject") or "").strip()
        if not name:
            continue
        level = normalize_level(item.get("level")) or EducationLevel.NSSCO.value
        grade = normalize_grade(level, item.get("grade"))
        subjects.append({
            "name": name,
            "level": level,
            "grade": grade,
            "points": grade_to_points(level, grade),
        })
    return subjects


class DocumentAnalyzer:
    def __init__(self, ocr: Optional[OCRClient] = None, client: Optional[LLMClient] = None):
        self.ocr = ocr or ocr_client
        self.client = client or llm
        self.max_tokens = 500

    async def analyze(
        self,
        image_data: Optional[str],
        mime_type: Optional[str],
        file_name: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Extract subjects from a results document.

        Returns:
            {subjects, totalPoints, studentInfo, aiAnalysis}

        Raises:
            InvalidDocumentError, ExternalServiceError, LLMNotConfiguredError, LLMServiceError
        """
        payload, mime = validate_document(image_data, mime_type)

        extraction = await self.ocr.extract(payload, mime, file_name)
        subjects = normalize_extracted_subjects(extraction.get("subjects"))
        total_points = calculate_total_points(subjects)
        logger.info(f"OCR extracted {len(subjects)} subjects from {file_name or 'document'} (total={total_points})")

        ai_analysis = ""
        if subjects:
            prompt = build_document_analysis_prompt(subjects, total_points)
            ai_analysis = await run_in_threadpool(self.client.generate, prompt, self.max_tokens, 0.7)

        student_info = extraction.get("studentInfo") or extraction.get("student_info") or {}

        return {
            "subjects": subjects,
            "totalPoints": total_points,
            "studentInfo": student_info,
            "aiAnalysis": ai_analysis,
        }


# Singleton instance
document_analyzer = DocumentAnalyzer()
