"""
Advisory Matching Service Client

Calls the external similarity-based matcher (MATCHING_SERVICE_URL). Its
verdicts are attached to local matches for comparison only; the local rule
module stays authoritative.
"""

import os
import logging
from typing import Any, Dict, Optional

import httpx

from ..errors import ExternalServiceError
from ..logic.contracts import StudentProfile

logger = logging.getLogger(__name__)


class MatchingServiceClient:
    """Thin httpx wrapper around the advisory matcher."""

    def __init__(self, url: Optional[str] = None, timeout: Optional[float] = None):
        self.url = url if url is not None else os.getenv("MATCHING_SERVICE_URL", "")
        self.timeout = timeout or float(os.getenv("EXTERNAL_SERVICE_TIMEOUT", "30"))

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    def fetch_verdicts(self, profile: StudentProfile) -> Dict[str, Any]:
        """
        Ask the advisory matcher for its eligible/alternative partition.

        Returns:
            Raw response with "eligible_programs" and "alternative_programs"

        Raises:
            ExternalServiceError: on transport errors or non-2xx responses
        """
        payload = {
            "subjects": [
                {"name": s.subject, "level": s.level, "grade": s.grade or ""}
                for s in profile.subjects
            ],
            "interests": profile.interests,
        }

        try:
            with httpx.Client(timeout=self.timeout) as client:
                resp = client.post(self.url, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Matching service unreachable: {e}")
            raise ExternalServiceError("Matching service unavailable", details=str(e))

        logger.info(f"Matching service response status: {resp.status_code}")
        if resp.status_code >= 400:
            raise ExternalServiceError(
                f"Matching service error: {resp.status_code}",
                details=resp.text[:500],
            )

        try:
            data = resp.json()
        except ValueError:
            raise ExternalServiceError("Matching service returned invalid JSON")

        if not isinstance(data, dict):
            raise ExternalServiceError("Matching service returned an unexpected payload")
        return data


matching_service = MatchingServiceClient()
