"""
Review endpoints.

Create, read, update and delete movie reviews, list a movie's
reviews and summarize its ratings. Validation happens here, before
any storage call; storage failures are logged and reported to the
client with a generic message.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status

from api.dependencies import get_reviews_dao
from api.exceptions import NotFoundError, StorageError, ValidationError
from api.schemas.common import StatusResponse
from api.schemas.review import (
    RatingSummaryResponse,
    ReviewCreatedResponse,
    ReviewPayload,
    ReviewResponse,
)
from api.services.review_validation import (
    clean_new_review,
    clean_review_fields,
    parse_movie_id,
    require_review_id,
)
from moviereviews.database import ReviewsDAO

router = APIRouter()
logger = logging.getLogger("api.reviews")


@router.post("/reviews/new", response_model=ReviewCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    payload: ReviewPayload,
    dao: ReviewsDAO = Depends(get_reviews_dao),
):
    """
    Create a review for a movie.

    user is trimmed to 2-50 characters, review to 10-500 characters,
    and rating must be 1-5. The movie ID is not checked against any
    catalog.
    """
    cleaned = clean_new_review(payload.movie_id, payload.user, payload.review, payload.rating)

    result = dao.add_review(cleaned.movie_id, cleaned.user, cleaned.review, cleaned.rating)
    if not result.ok:
        logger.error(f"Review create failed: movie_id={cleaned.movie_id} error={result.error}")
        raise StorageError("Unable to post review")

    logger.info(f"Review created: id={result.value} movie_id={cleaned.movie_id} rating={cleaned.rating}")
    return ReviewCreatedResponse(message="Review created successfully", reviewId=result.value)


@router.get("/reviews/movie/{movie_id}", response_model=List[ReviewResponse])
async def get_movie_reviews(
    movie_id: str,
    dao: ReviewsDAO = Depends(get_reviews_dao),
):
    """
    Get all reviews for a movie, newest first.

    A movie without reviews returns an empty list.
    """
    movie_id_num = parse_movie_id(movie_id)

    result = dao.get_reviews_by_movie_id(movie_id_num)
    if not result.ok:
        logger.error(f"Review list failed: movie_id={movie_id_num} error={result.error}")
        raise StorageError("Failed to fetch reviews")
    if result.value is None:
        raise NotFoundError("No reviews found")

    return [ReviewResponse(**review.to_dict()) for review in result.value]


@router.get("/reviews/movie/{movie_id}/summary", response_model=RatingSummaryResponse)
async def get_movie_rating_summary(
    movie_id: str,
    dao: ReviewsDAO = Depends(get_reviews_dao),
):
    """Review count, average rating and 1-5 star distribution for a movie."""
    movie_id_num = parse_movie_id(movie_id)

    result = dao.get_rating_summary(movie_id_num)
    if not result.ok:
        logger.error(f"Rating summary failed: movie_id={movie_id_num} error={result.error}")
        raise StorageError("Failed to summarize reviews")

    return RatingSummaryResponse(**result.value.to_dict())


@router.get("/reviews/{review_id}", response_model=ReviewResponse)
async def get_review(
    review_id: str,
    dao: ReviewsDAO = Depends(get_reviews_dao),
):
    """Get a single review."""
    review_id = require_review_id(review_id)

    result = dao.get_review(review_id)
    if not result.ok:
        logger.error(f"Review fetch failed: id={review_id} error={result.error}")
        raise StorageError("Failed to fetch review")
    if result.value is None:
        raise NotFoundError("Review not found")

    return ReviewResponse(**result.value.to_dict())


@router.put("/reviews/{review_id}", response_model=StatusResponse)
async def update_review(
    review_id: str,
    payload: ReviewPayload,
    dao: ReviewsDAO = Depends(get_reviews_dao),
):
    """
    Replace the user, text and rating of a review.

    The movie ID and creation time never change.
    """
    review_id = require_review_id(review_id)
    cleaned = clean_review_fields(payload.user, payload.review, payload.rating)

    result = dao.update_review(review_id, cleaned.user, cleaned.review, cleaned.rating)
    if not result.ok:
        logger.warning(f"Review update rejected: id={review_id} error={result.error}")
        raise ValidationError("Unable to update review")
    if result.value.modified_count == 0:
        raise NotFoundError("Review not found or no changes made")

    logger.info(f"Review updated: id={review_id} rating={cleaned.rating}")
    return StatusResponse(message="Review updated successfully")


@router.delete("/reviews/{review_id}", response_model=StatusResponse)
async def delete_review(
    review_id: str,
    dao: ReviewsDAO = Depends(get_reviews_dao),
):
    """Delete a review."""
    review_id = require_review_id(review_id)

    result = dao.delete_review(review_id)
    if not result.ok:
        logger.error(f"Review delete failed: id={review_id} error={result.error}")
        raise StorageError("Unable to delete review")
    if result.value.deleted_count == 0:
        raise NotFoundError("Review not found")

    logger.info(f"Review deleted: id={review_id}")
    return StatusResponse(message="Review deleted successfully")
