"""
HTTP client for the review API.

Handles all review API interactions including:
- JSON request/response handling over a shared session
- Translating non-2xx responses into ReviewsClientError
- Client-side validation mirroring the server's field rules

Requests are not retried; a failure is terminal for that call.
"""

from typing import List, Optional

import requests

from .config import Config
from .models import (
    RATING_MAX,
    RATING_MIN,
    REVIEW_TEXT_MAX,
    REVIEW_TEXT_MIN,
    USER_NAME_MAX,
    USER_NAME_MIN,
    RatingSummary,
    ReviewDocument,
)
from .utils import setup_logger


class ReviewsClientError(Exception):
    """A review API call failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def validate_review_input(user: str, review: str, rating: int) -> List[str]:
    """
    Check review form input against the server's rules.

    Returns:
        List of problems; empty when the input is acceptable.
    """
    problems = []
    user = (user or "").strip()
    review = (review or "").strip()

    if not USER_NAME_MIN <= len(user) <= USER_NAME_MAX:
        problems.append(
            f"Name must be between {USER_NAME_MIN} and {USER_NAME_MAX} characters"
        )
    if not REVIEW_TEXT_MIN <= len(review) <= REVIEW_TEXT_MAX:
        problems.append(
            f"Review must be between {REVIEW_TEXT_MIN} and {REVIEW_TEXT_MAX} characters"
        )
    if not isinstance(rating, int) or isinstance(rating, bool) or not RATING_MIN <= rating <= RATING_MAX:
        problems.append(f"Please select a rating from {RATING_MIN} to {RATING_MAX} stars")
    return problems


class ReviewsClient:
    """
    Talks to the review API.

    Responsibilities:
    - Build endpoint URLs from the configured base URL
    - Send JSON bodies and decode JSON responses
    - Surface failures as ReviewsClientError with the server's message
    """

    def __init__(self, config: Config, session: Optional[requests.Session] = None):
        self.config = config
        self.base_url = config.reviews_api_url
        self.session = session or self._create_session()
        self.logger = setup_logger("reviews_client", config.log_dir)

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        session.headers.update(self.config.get_headers())
        return session

    def _request(self, method: str, path: str, payload: Optional[dict] = None):
        """
        Send a request and return the decoded JSON body.

        Raises:
            ReviewsClientError: On transport failure or a non-2xx response.
        """
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method, url, json=payload, timeout=self.config.request_timeout
            )
        except requests.exceptions.RequestException as e:
            self.logger.error(f"{method} {url} failed: {e}")
            raise ReviewsClientError(f"Could not reach the review service: {e}") from e

        if not response.ok:
            message = response.reason or "Request failed"
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and body.get("error"):
                message = body["error"]
            self.logger.warning(f"{method} {url} returned {response.status_code}: {message}")
            raise ReviewsClientError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            self.logger.error(f"{method} {url} returned a non-JSON body: {e}")
            raise ReviewsClientError(
                "Invalid response from the review service",
                status_code=response.status_code,
            ) from e

    def list_reviews(self, movie_id: int) -> List[ReviewDocument]:
        """Get all reviews for a movie, newest first."""
        data = self._request("GET", f"movie/{movie_id}")
        return [ReviewDocument.from_api(item) for item in data]

    def get_review(self, review_id: str) -> ReviewDocument:
        return ReviewDocument.from_api(self._request("GET", review_id))

    def get_summary(self, movie_id: int) -> RatingSummary:
        data = self._request("GET", f"movie/{movie_id}/summary")
        return RatingSummary(
            movie_id=data["movieId"],
            total=data["total"],
            average=data["average"],
            distribution={int(k): v for k, v in data["distribution"].items()},
            recommend_percent=data.get("recommendPercent", 0),
        )

    def create_review(self, movie_id: int, user: str, review: str, rating: int) -> str:
        """Post a new review and return its id."""
        data = self._request(
            "POST",
            "new",
            {"movieId": movie_id, "user": user, "review": review, "rating": rating},
        )
        self.logger.info(f"Review created: movie_id={movie_id} id={data.get('reviewId')}")
        return data["reviewId"]

    def update_review(self, review_id: str, user: str, review: str, rating: int) -> None:
        self._request(
            "PUT",
            review_id,
            {"user": user, "review": review, "rating": rating},
        )
        self.logger.info(f"Review updated: id={review_id}")

    def delete_review(self, review_id: str) -> None:
        self._request("DELETE", review_id)
        self.logger.info(f"Review deleted: id={review_id}")

    def close(self) -> None:
        self.session.close()
