"""
Validation and sanitizing of review payloads.

The API is the only place these rules are enforced; the data-access
layer stores whatever it is given.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Optional

from api.exceptions import ValidationError
from moviereviews.models import (
    MOVIE_ID_MAX,
    RATING_MAX,
    RATING_MIN,
    REVIEW_TEXT_MAX,
    REVIEW_TEXT_MIN,
    USER_NAME_MAX,
    USER_NAME_MIN,
)

logger = logging.getLogger("api.reviews")


@dataclass
class CleanReview:
    """Trimmed, range-checked review fields."""

    user: str
    review: str
    rating: int
    movie_id: Optional[int] = None


def _reject(message: str) -> ValidationError:
    logger.warning(f"Review rejected: {message}")
    return ValidationError(message)


def parse_rating(value: Any) -> int:
    """
    Integer rating from a JSON value.

    Missing, empty, zero and non-numeric values all become 0, which is
    then rejected by the range check. Fractions are truncated.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return 0
        return int(number) if math.isfinite(number) else 0
    return 0


def parse_movie_id(value: Any) -> int:
    """
    Non-negative integer movie ID from a JSON value or path segment.

    Raises:
        ValidationError: If the value is missing or not an integer in 0..MOVIE_ID_MAX.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise _reject("Movie ID is required")

    movie_id = None
    if isinstance(value, bool):
        movie_id = None
    elif isinstance(value, int):
        movie_id = value
    elif isinstance(value, float) and value.is_integer():
        movie_id = int(value)
    elif isinstance(value, str):
        try:
            movie_id = int(value.strip())
        except ValueError:
            movie_id = None

    if movie_id is None or not 0 <= movie_id <= MOVIE_ID_MAX:
        raise _reject("Movie ID must be a valid number")
    return movie_id


def clean_review_fields(user: Any, review: Any, rating: Any) -> CleanReview:
    """
    Check and trim the fields shared by create and update.

    Raises:
        ValidationError: On the first failing rule.
    """
    if not user or not isinstance(user, str):
        raise _reject("User name is required and must be a string")

    if not review or not isinstance(review, str):
        raise _reject("Review text is required and must be a string")

    sanitized_user = user.strip()
    if not USER_NAME_MIN <= len(sanitized_user) <= USER_NAME_MAX:
        raise _reject(
            f"User name must be between {USER_NAME_MIN} and {USER_NAME_MAX} characters"
        )

    sanitized_review = review.strip()
    if not REVIEW_TEXT_MIN <= len(sanitized_review) <= REVIEW_TEXT_MAX:
        raise _reject(
            f"Review must be between {REVIEW_TEXT_MIN} and {REVIEW_TEXT_MAX} characters"
        )

    validated_rating = parse_rating(rating)
    if not RATING_MIN <= validated_rating <= RATING_MAX:
        raise _reject(f"Rating must be between {RATING_MIN} and {RATING_MAX}")

    return CleanReview(user=sanitized_user, review=sanitized_review, rating=validated_rating)


def clean_new_review(movie_id: Any, user: Any, review: Any, rating: Any) -> CleanReview:
    """Validate a create payload, including its movie ID."""
    if movie_id is None or movie_id == "":
        raise _reject("Movie ID is required")

    cleaned = clean_review_fields(user, review, rating)
    cleaned.movie_id = parse_movie_id(movie_id)
    return cleaned


def require_review_id(review_id: str) -> str:
    """Path review ID with surrounding whitespace removed."""
    review_id = (review_id or "").strip()
    if not review_id:
        raise _reject("Review ID is required")
    return review_id
