"""
Common schemas shared across API endpoints.
"""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Human-readable error message")


class StatusResponse(BaseModel):
    """Standard success response for mutations."""

    status: str = "success"
    message: str
