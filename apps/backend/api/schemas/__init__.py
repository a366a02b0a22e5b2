"""Pydantic schemas for API request and response validation."""

from api.schemas.common import ErrorResponse, StatusResponse
from api.schemas.review import (
    RatingSummaryResponse,
    ReviewCreatedResponse,
    ReviewPayload,
    ReviewResponse,
)

__all__ = [
    # Common
    "ErrorResponse",
    "StatusResponse",
    # Review
    "RatingSummaryResponse",
    "ReviewCreatedResponse",
    "ReviewPayload",
    "ReviewResponse",
]
