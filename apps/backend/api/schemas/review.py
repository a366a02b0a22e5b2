"""
Review-related Pydantic schemas.

Request payloads accept any JSON value per field; the review router
does its own type and range checks so that every failure is reported
as a 400 with a specific message.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from api.schemas.common import StatusResponse


class ReviewPayload(BaseModel):
    """Body of POST /reviews/new and PUT /reviews/{id}."""

    movie_id: Optional[Any] = Field(None, alias="movieId", description="Movie ID (create only)")
    user: Optional[Any] = Field(None, description="Reviewer display name")
    review: Optional[Any] = Field(None, description="Review text")
    rating: Optional[Any] = Field(None, description="Star rating (1-5)")

    class Config:
        populate_by_name = True


class ReviewResponse(BaseModel):
    """A stored review."""

    id: str
    movie_id: int = Field(..., alias="movieId")
    user: str
    review: str
    rating: int
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    class Config:
        populate_by_name = True


class ReviewCreatedResponse(StatusResponse):
    """Response after creating a review."""

    review_id: str = Field(..., alias="reviewId", description="ID of the created review")

    class Config:
        populate_by_name = True


class RatingSummaryResponse(BaseModel):
    """Rating statistics for a movie."""

    movie_id: int = Field(..., alias="movieId")
    total: int = Field(..., ge=0, description="Number of reviews")
    average: float = Field(..., ge=0, description="Average rating, one decimal")
    distribution: Dict[str, int] = Field(..., description="Review count per star value")
    recommend_percent: int = Field(
        0, alias="recommendPercent", ge=0, le=100,
        description="Share of rated reviews with 4 or 5 stars",
    )

    class Config:
        populate_by_name = True
