"""
Data models for the review service.

Provides dataclasses for type-safe data handling between the
data-access layer, the API and the review client.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Generic, Optional, TypeVar

T = TypeVar("T")

# Field rules shared by the API and the client
USER_NAME_MIN = 2
USER_NAME_MAX = 50
REVIEW_TEXT_MIN = 10
REVIEW_TEXT_MAX = 500
RATING_MIN = 1
RATING_MAX = 5
# movieId is stored as a BSON int64
MOVIE_ID_MAX = 2**63 - 1


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    # API payloads carry ISO-8601 strings, possibly with a trailing Z
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


@dataclass
class ReviewDocument:
    """A persisted review for one movie."""

    id: str
    movie_id: int
    user: str
    review: str
    rating: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        """Convert to the API representation."""
        return {
            "id": self.id,
            "movieId": self.movie_id,
            "user": self.user,
            "review": self.review,
            "rating": self.rating,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_mongo(cls, doc: dict) -> "ReviewDocument":
        """Create ReviewDocument from a MongoDB document."""
        return cls(
            id=str(doc["_id"]),
            movie_id=doc.get("movieId"),
            user=doc.get("user", ""),
            review=doc.get("review", ""),
            rating=doc.get("rating", 0),
            created_at=doc.get("createdAt"),
            updated_at=doc.get("updatedAt"),
        )

    @classmethod
    def from_api(cls, data: dict) -> "ReviewDocument":
        """Create ReviewDocument from a review API response body."""
        return cls(
            id=data.get("id") or data.get("_id"),
            movie_id=data.get("movieId"),
            user=data.get("user", ""),
            review=data.get("review", ""),
            rating=data.get("rating", 0),
            created_at=_parse_timestamp(data.get("createdAt")),
            updated_at=_parse_timestamp(data.get("updatedAt")),
        )

    def stars(self) -> str:
        """Star rating for display, e.g. '★★★☆☆'."""
        filled = max(0, min(self.rating or 0, RATING_MAX))
        return "★" * filled + "☆" * (RATING_MAX - filled)


@dataclass
class WriteSummary:
    """Counts reported by an update or delete."""

    matched_count: int = 0
    modified_count: int = 0
    deleted_count: int = 0


@dataclass
class RatingSummary:
    """Aggregate rating statistics for a movie."""

    movie_id: int
    total: int = 0
    average: float = 0.0
    distribution: Dict[int, int] = field(
        default_factory=lambda: {star: 0 for star in range(RATING_MIN, RATING_MAX + 1)}
    )
    recommend_percent: int = 0

    @classmethod
    def from_ratings(cls, movie_id: int, ratings: list) -> "RatingSummary":
        """
        Build a summary from raw rating values.

        Out-of-range ratings (e.g. an unrated 0) count toward the total
        only. The average, distribution and recommend percentage (share
        of 4 and 5 star ratings) use the rated reviews.
        """
        summary = cls(movie_id=movie_id, total=len(ratings))
        rated = [r for r in ratings if isinstance(r, int) and RATING_MIN <= r <= RATING_MAX]
        if not rated:
            return summary
        summary.average = round(sum(rated) / len(rated), 1)
        for rating in rated:
            summary.distribution[rating] += 1
        recommended = summary.distribution[4] + summary.distribution[5]
        summary.recommend_percent = int(recommended * 100 / len(rated) + 0.5)
        return summary

    def to_dict(self) -> dict:
        return {
            "movieId": self.movie_id,
            "total": self.total,
            "average": self.average,
            "distribution": {str(k): v for k, v in self.distribution.items()},
            "recommendPercent": self.recommend_percent,
        }


@dataclass
class StoreResult(Generic[T]):
    """
    Outcome of a data-access operation.

    Exactly one of value/error is meaningful: a failed operation carries
    an error message, a successful one carries its value (which may be
    None, e.g. a lookup that found nothing).
    """

    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "StoreResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> "StoreResult[T]":
        return cls(error=error)
