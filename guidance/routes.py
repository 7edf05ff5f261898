"""
Guidance API Routes

Exposes program matching, program listings, document analysis and the AI
career assistant via REST API under /api.
"""

import logging
from typing import Optional, List, Dict, Any
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

from db import get_session
from .errors import GuidanceError
from .logic.contracts import StudentProfile
from .logic.runner import run_matching
from .logic.adapter import fetch_programs, fetch_program, fetch_interests, filter_programs
from .services.matching_client import matching_service
from .ai.advisor import advisor
from .ai.chat import career_chat
from .ai.document_analyzer import document_analyzer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["guidance"])


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class _WireRequest(BaseModel):

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class DocumentRequest(_WireRequest):
    """Request body for document analysis (base64 image or PDF)."""
    image_data: Optional[str] = Field(default=None, description="Base64 payload, data-URL prefix allowed")
    mime_type: Optional[str] = None
    file_name: Optional[str] = None


class AIRecommendationsRequest(_WireRequest):
    student_profile: StudentProfile
    matches: Dict[str, Any] = Field(
        default_factory=dict,
        description="MatchingResults from /api/match-programs",
    )


class ChatRequest(_WireRequest):
    messages: List[Dict[str, Any]] = Field(default_factory=list)


# =============================================================================
# ERROR ENVELOPE
# =============================================================================

def error_response(status_code: int, error: str, details: Any = None) -> JSONResponse:
    content: Dict[str, Any] = {"success": False, "error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def _guidance_error(e: GuidanceError) -> JSONResponse:
    logger.warning(f"{type(e).__name__}: {e.message}")
    return error_response(e.status_code, e.message, e.details)


# =============================================================================
# MATCHING
# =============================================================================

@router.post("/match-programs", summary="Match a student profile to programs")
def match_programs(profile: StudentProfile, db: Session = Depends(get_session)):
    """
    Score every program at the student's preferred universities.

    **Response:** MatchingResults (matches, general/diploma eligibility,
    recommendations, totalPoints, warnings)
    """
    try:
        results = run_matching(db, profile, matching_service=matching_service)
        return results.model_dump(by_alias=True)
    except GuidanceError as e:
        return _guidance_error(e)
    except Exception as e:
        logger.exception(f"Matching failed: {e}")
        return error_response(500, "Failed to match programs")


# =============================================================================
# PROGRAM CATALOGUE
# =============================================================================

@router.get("/programs", summary="List programs")
def list_programs(
    institution: Optional[str] = Query(None, description="UNAM, NUST or IUM"),
    faculty: Optional[str] = None,
    interest: Optional[str] = None,
    min_points: Optional[int] = Query(None, ge=0),
    max_points: Optional[int] = Query(None, ge=0),
    search: Optional[str] = Query(None, description="Matches program name, faculty or careers"),
    db: Session = Depends(get_session),
):
    try:
        programs = fetch_programs(db)
        programs = filter_programs(
            programs,
            institution=institution,
            faculty=faculty,
            interest=interest,
            min_points=min_points,
            max_points=max_points,
            search=search,
        )
        return [p.model_dump(by_alias=True) for p in programs]
    except Exception as e:
        logger.exception(f"Error fetching programs: {e}")
        return error_response(500, "Failed to fetch programs")


@router.get("/programs/{program_id}", summary="Get one program")
def get_program(program_id: str, db: Session = Depends(get_session)):
    """Lookup by id, then program code, then list position."""
    try:
        program = fetch_program(db, program_id)
        return program.model_dump(by_alias=True)
    except GuidanceError as e:
        return _guidance_error(e)
    except Exception as e:
        logger.exception(f"Error fetching program {program_id}: {e}")
        return error_response(500, "Internal server error")


@router.get("/interests", summary="Distinct interest categories")
def list_interests(db: Session = Depends(get_session)):
    try:
        return fetch_interests(db)
    except Exception as e:
        logger.exception(f"Error fetching interests: {e}")
        return error_response(500, "Failed to fetch interests")


# =============================================================================
# AI ENDPOINTS
# =============================================================================

@router.post("/analyze-document", summary="Extract subjects from a results document")
async def analyze_document(request: DocumentRequest):
    try:
        data = await document_analyzer.analyze(request.image_data, request.mime_type, request.file_name)
        return {"success": True, "data": data}
    except GuidanceError as e:
        return _guidance_error(e)
    except Exception as e:
        logger.exception(f"Document analysis error: {e}")
        return error_response(500, "Failed to analyze document")


@router.post("/ai-recommendations", summary="AI career recommendations")
def ai_recommendations(request: AIRecommendationsRequest):
    try:
        data = advisor.build_recommendations(
            request.student_profile.model_dump(by_alias=True),
            request.matches,
        )
        return {"success": True, "data": data}
    except GuidanceError as e:
        return _guidance_error(e)
    except Exception as e:
        logger.exception(f"AI recommendations error: {e}")
        return error_response(500, "Failed to generate recommendations")


@router.post("/career-chat", summary="Streamed career counselling chat")
def chat(request: ChatRequest):
    """
    Streams Server-Sent Events:
    `data: {"content": "...", "done": false}` chunks, then `{"done": true}`.
    """
    try:
        events = career_chat.stream_events(request.messages)
    except GuidanceError as e:
        return _guidance_error(e)
    return StreamingResponse(events, media_type="text/event-stream")
