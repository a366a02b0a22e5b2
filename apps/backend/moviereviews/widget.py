"""
Review view for one movie.

Keeps the reviews last fetched from the API, submits new and edited
reviews, and always reloads the list from the server after a
successful mutation instead of patching local state. Failed requests
leave the loaded reviews untouched and add a notification.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional

from .client import ReviewsClient, ReviewsClientError, validate_review_input
from .models import RatingSummary, ReviewDocument
from .utils import format_timestamp
from .votes import VoteLedger, VoteTally

DELETE_PROMPT = "Are you sure you want to delete this review?"


@dataclass
class Notification:
    """A transient message for the user."""

    level: str  # 'success', 'warning' or 'danger'
    message: str


@dataclass
class ReviewForm:
    """Review input, blank for a new review or pre-filled for an edit."""

    user: str = ""
    review: str = ""
    rating: int = 0
    review_id: Optional[str] = None

    @property
    def is_edit(self) -> bool:
        return self.review_id is not None


class ReviewWidget:
    """Reviews of a single movie as seen by one client."""

    def __init__(
        self,
        client: ReviewsClient,
        movie_id: int,
        ledger: Optional[VoteLedger] = None,
    ):
        self.client = client
        self.movie_id = movie_id
        self.ledger = ledger
        self.reviews: List[ReviewDocument] = []
        self.notifications: List[Notification] = []

    def notify(self, level: str, message: str) -> None:
        self.notifications.append(Notification(level, message))

    def pop_notifications(self) -> List[Notification]:
        pending, self.notifications = self.notifications, []
        return pending

    def load(self) -> bool:
        """Fetch the movie's reviews from the API."""
        try:
            self.reviews = self.client.list_reviews(self.movie_id)
        except ReviewsClientError:
            self.notify("danger", "Failed to load reviews")
            return False
        return True

    def find(self, review_id: str) -> Optional[ReviewDocument]:
        for review in self.reviews:
            if review.id == review_id:
                return review
        return None

    def _check(self, form: ReviewForm) -> bool:
        problems = validate_review_input(form.user, form.review, form.rating)
        for problem in problems:
            self.notify("warning", problem)
        return not problems

    def submit(self, user: str, review: str, rating: int) -> bool:
        """Post a new review, then reload."""
        form = ReviewForm(user=user, review=review, rating=rating)
        if not self._check(form):
            return False

        try:
            self.client.create_review(
                self.movie_id, form.user.strip(), form.review.strip(), form.rating
            )
        except ReviewsClientError:
            self.notify("danger", "Failed to submit review. Please try again.")
            return False

        self.notify("success", "Review submitted successfully!")
        self.load()
        return True

    def begin_edit(self, review_id: str) -> Optional[ReviewForm]:
        """A form pre-filled with the displayed review, or None if it is not loaded."""
        review = self.find(review_id)
        if review is None:
            return None
        return ReviewForm(
            user=review.user,
            review=review.review,
            rating=review.rating,
            review_id=review.id,
        )

    def save_edit(self, form: ReviewForm) -> bool:
        """Send an edited review, then reload."""
        if not form.is_edit:
            return self.submit(form.user, form.review, form.rating)
        if not self._check(form):
            return False

        try:
            self.client.update_review(
                form.review_id, form.user.strip(), form.review.strip(), form.rating
            )
        except ReviewsClientError:
            self.notify("danger", "Failed to update review. Please try again.")
            return False

        self.notify("success", "Review updated successfully!")
        self.load()
        return True

    def delete(self, review_id: str, confirm: Callable[[str], bool]) -> bool:
        """Delete a review after the user confirms, then reload."""
        if not confirm(DELETE_PROMPT):
            return False

        try:
            self.client.delete_review(review_id)
        except ReviewsClientError:
            self.notify("danger", "Failed to delete review. Please try again.")
            return False

        if self.ledger is not None:
            self.ledger.forget(review_id)
        self.notify("success", "Review deleted successfully!")
        self.load()
        return True

    def vote(self, review_id: str, vote_type: str) -> Optional[VoteTally]:
        if self.ledger is None:
            return None
        return self.ledger.vote(review_id, vote_type)

    def statistics(self) -> RatingSummary:
        """Summary of the loaded reviews."""
        return RatingSummary.from_ratings(self.movie_id, [r.rating for r in self.reviews])

    def render(self) -> str:
        """Plain-text rendering of the loaded reviews."""
        if not self.reviews:
            return "No reviews yet. Be the first to review this movie!"

        stats = self.statistics()
        lines = [
            f"{stats.total} review(s), average {stats.average:.1f}/5, "
            f"{stats.recommend_percent}% recommend",
            "",
        ]
        for review in self.reviews:
            lines.append(f"{review.stars()}  {review.user}  ({format_timestamp(review.created_at)})")
            lines.append(f"    {review.review}")
            if self.ledger is not None:
                tally = self.ledger.tally(review.id)
                mark = f" [you: {tally.user_vote}]" if tally.user_vote else ""
                lines.append(
                    f"    Helpful: {tally.helpful}  Not helpful: {tally.not_helpful}{mark}"
                )
            lines.append(f"    id: {review.id}")
            lines.append("")
        return "\n".join(lines).rstrip()
