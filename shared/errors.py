"""
Shared error handling for search skill services.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel, Field

from shared.logging import get_request_id


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class SkillServiceException(Exception):
    """Base exception for skill services."""

    status_code = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=get_request_id(),
            code=self.code,
            message=self.message,
            details=self.details
        )


class PayloadParseError(SkillServiceException):
    """Request body is neither a skill envelope nor a single JSON object."""

    def __init__(
        self,
        message: str = "Invalid request payload - expected skill 'values' array or single JSON object.",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__("PAYLOAD_PARSE_ERROR", message, details)
