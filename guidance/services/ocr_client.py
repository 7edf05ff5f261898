"""
OCR Service Client

Posts an uploaded results document to OCR_SERVICE_URL and returns the raw
extraction (subjects and student details).
"""

import os
import logging
from typing import Any, Dict, Optional

import httpx

from ..errors import ExternalServiceError

logger = logging.getLogger(__name__)


class OCRClient:

    def __init__(self, url: Optional[str] = None, timeout: Optional[float] = None):
        self.url = url if url is not None else os.getenv("OCR_SERVICE_URL", "")
        self.timeout = timeout or float(os.getenv("EXTERNAL_SERVICE_TIMEOUT", "30"))

    async def extract(self, image_data: str, mime_type: str, file_name: Optional[str] = None) -> Dict[str, Any]:
        """
        Run OCR on a base64 document.

        Args:
            image_data: Base64 payload without data-URL prefix
            mime_type: Validated MIME type
            file_name: Original file name, for the service's logs

        Returns:
            Dict with "subjects" (list) and optional "studentInfo"

        Raises:
            ExternalServiceError: service not configured, unreachable or failing
        """
        if not self.url:
            raise ExternalServiceError("OCR service is not configured (OCR_SERVICE_URL)")

        payload = {"imageData": image_data, "mimeType": mime_type, "fileName": file_name}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(self.url, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"OCR service unreachable: {e}")
            raise ExternalServiceError("OCR service unavailable", details=str(e))

        logger.info(f"OCR service response status: {resp.status_code}")
        if resp.status_code >= 400:
            raise ExternalServiceError(f"OCR service error: {resp.status_code}", details=resp.text[:500])

        try:
            data = resp.json()
        except ValueError:
            raise ExternalServiceError("OCR service returned invalid JSON")

        # Some deployments wrap the payload as {"success": true, "data": {...}}
        if isinstance(data, dict) and isinstance(data.get("data"), dict):
            data = data["data"]
        if not isinstance(data, dict):
            raise ExternalServiceError("OCR service returned an unexpected payload")
        return data


ocr_client = OCRClient()
