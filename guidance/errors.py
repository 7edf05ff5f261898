"""
Guidance Errors

Domain exceptions raised by the matching pipeline and the external service
clients. Each carries the HTTP status the API maps it to.
"""

from typing import Any, Optional


class GuidanceError(Exception):
    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidRequestError(GuidanceError):
    """Malformed input that passed schema validation."""
    status_code = 400


class InvalidDocumentError(InvalidRequestError):
    """Uploaded document failed validation (type, encoding or size)."""


class ProgramNotFoundError(GuidanceError):
    status_code = 404


class ExternalServiceError(GuidanceError):
    """OCR or matching service unreachable or returned an error."""
    status_code = 502


class LLMNotConfiguredError(GuidanceError):
    """No API key for the LLM provider."""
    status_code = 502


class LLMServiceError(GuidanceError):
    status_code = 502
