"""
Database access for the review service.

Handles all MongoDB operations including:
- Connection lifecycle for the reviews collection
- CRUD operations for review documents
- Per-movie listing and rating statistics

The data-access layer never raises past its interface: every
operation returns a StoreResult carrying either a value or an
error message.
"""

from datetime import datetime, timezone
from typing import Any, List, Optional

from bson import ObjectId
from bson.errors import BSONError
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from .config import Config
from .models import RatingSummary, ReviewDocument, StoreResult, WriteSummary
from .utils import setup_logger

# Errors the DAO converts into failed results
DAO_ERRORS = (PyMongoError, BSONError, OverflowError, TypeError, ValueError)


class MongoConnection:
    """
    Owns the MongoClient and the reviews collection handle.

    Constructed explicitly and opened with connect(); a second connect()
    is a no-op. The driver pools connections, so one instance is shared
    across concurrent requests.
    """

    def __init__(self, config: Config):
        self.config = config
        self.client: Optional[MongoClient] = None
        self._collection: Optional[Collection] = None
        self.logger = setup_logger("database", config.log_dir)

    @property
    def is_connected(self) -> bool:
        return self._collection is not None

    @property
    def collection(self) -> Collection:
        """The reviews collection. Raises RuntimeError before connect()."""
        if self._collection is None:
            raise RuntimeError("MongoConnection.connect() has not been called")
        return self._collection

    def connect(self) -> Collection:
        """Create the client and collection handle and ensure indexes."""
        if self._collection is not None:
            return self._collection

        self.client = MongoClient(
            self.config.mongo_uri,
            serverSelectionTimeoutMS=self.config.mongo_timeout_ms,
            tz_aware=True,
        )
        self._collection = self.client[self.config.mongo_db][self.config.mongo_collection]
        self.logger.info(
            f"Connected to {self.config.mongo_db}.{self.config.mongo_collection}"
        )

        try:
            self._collection.create_index(
                [("movieId", ASCENDING), ("createdAt", DESCENDING)],
                name="movie_reviews_newest_first",
            )
        except PyMongoError as e:
            # Queries still work without the index
            self.logger.warning(f"Unable to create review indexes: {e}")

        return self._collection

    def close(self) -> None:
        """Close the client. Safe to call when not connected."""
        if self.client is not None:
            self.client.close()
            self.logger.info("MongoDB connection closed")
        self.client = None
        self._collection = None

    def ping(self) -> bool:
        """Check that the server answers."""
        if self.client is None:
            return False
        try:
            self.client.admin.command("ping")
            return True
        except PyMongoError as e:
            self.logger.error(f"MongoDB ping failed: {e}")
            return False


def _coerce_rating(rating: Any) -> int:
    """Integer rating; anything non-numeric becomes 0."""
    if isinstance(rating, bool):
        return 0
    try:
        return int(rating)
    except (TypeError, ValueError):
        pass
    try:
        return int(float(rating))
    except (TypeError, ValueError, OverflowError):
        return 0


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ReviewsDAO:
    """
    Data-access object for the reviews collection.

    Responsibilities:
    - Translate primitive arguments into review documents
    - Run single-document CRUD and per-movie queries
    - Log storage failures and report them as failed StoreResults
    """

    def __init__(self, collection: Collection, config: Optional[Config] = None):
        self.collection = collection
        self.logger = setup_logger("database", config.log_dir if config else None)

    def add_review(
        self,
        movie_id: Any,
        user: str,
        review: str,
        rating: Any = 0,
    ) -> StoreResult[str]:
        """
        Insert a new review.

        Returns:
            StoreResult whose value is the new review id as a string.
        """
        if movie_id is None or movie_id == "" or not user or not review:
            return StoreResult.failure("Missing required fields")

        try:
            now = _now()
            review_doc = {
                "movieId": int(movie_id),
                "user": user,
                "review": review,
                "rating": _coerce_rating(rating),
                "createdAt": now,
                "updatedAt": now,
            }
            self.logger.info(
                f"Adding review: movie_id={review_doc['movieId']} user={user!r} "
                f"rating={review_doc['rating']}"
            )
            result = self.collection.insert_one(review_doc)
            return StoreResult.success(str(result.inserted_id))
        except DAO_ERRORS as e:
            self.logger.error(f"Unable to post review: {e}")
            return StoreResult.failure(str(e) or "Unable to post review")

    def get_review(self, review_id: str) -> StoreResult[Optional[ReviewDocument]]:
        """Fetch one review. A missing review is a success with value None."""
        if not review_id:
            return StoreResult.failure("Review ID is required")

        try:
            doc = self.collection.find_one({"_id": ObjectId(review_id)})
            return StoreResult.success(ReviewDocument.from_mongo(doc) if doc else None)
        except DAO_ERRORS as e:
            self.logger.error(f"Unable to get review {review_id}: {e}")
            return StoreResult.failure(str(e) or "Unable to get review")

    def update_review(
        self,
        review_id: str,
        user: str,
        review: str,
        rating: Any = 0,
    ) -> StoreResult[WriteSummary]:
        """
        Overwrite user, review, rating and updatedAt.

        movieId and createdAt are never touched.
        """
        if not review_id or not user or not review:
            return StoreResult.failure("Missing required fields")

        try:
            result = self.collection.update_one(
                {"_id": ObjectId(review_id)},
                {
                    "$set": {
                        "user": user,
                        "review": review,
                        "rating": _coerce_rating(rating),
                        "updatedAt": _now(),
                    }
                },
            )
            return StoreResult.success(
                WriteSummary(
                    matched_count=result.matched_count,
                    modified_count=result.modified_count,
                )
            )
        except DAO_ERRORS as e:
            self.logger.error(f"Unable to update review {review_id}: {e}")
            return StoreResult.failure(str(e) or "Unable to update review")

    def delete_review(self, review_id: str) -> StoreResult[WriteSummary]:
        """Remove a review."""
        if not review_id:
            return StoreResult.failure("Review ID is required")

        try:
            result = self.collection.delete_one({"_id": ObjectId(review_id)})
            return StoreResult.success(WriteSummary(deleted_count=result.deleted_count))
        except DAO_ERRORS as e:
            self.logger.error(f"Unable to delete review {review_id}: {e}")
            return StoreResult.failure(str(e) or "Unable to delete review")

    def get_reviews_by_movie_id(self, movie_id: Any) -> StoreResult[List[ReviewDocument]]:
        """All reviews for a movie, newest first. No matches gives an empty list."""
        if movie_id is None or movie_id == "":
            return StoreResult.failure("Movie ID is required")

        try:
            cursor = self.collection.find({"movieId": int(movie_id)}).sort(
                "createdAt", DESCENDING
            )
            return StoreResult.success([ReviewDocument.from_mongo(doc) for doc in cursor])
        except DAO_ERRORS as e:
            self.logger.error(f"Unable to get reviews for movie {movie_id}: {e}")
            return StoreResult.failure(str(e) or "Unable to get reviews")

    def get_rating_summary(self, movie_id: Any) -> StoreResult[RatingSummary]:
        """Review count, average rating and star distribution for a movie."""
        if movie_id is None or movie_id == "":
            return StoreResult.failure("Movie ID is required")

        try:
            movie_id = int(movie_id)
            cursor = self.collection.find({"movieId": movie_id}, {"rating": 1})
            ratings = [_coerce_rating(doc.get("rating", 0)) for doc in cursor]
            return StoreResult.success(RatingSummary.from_ratings(movie_id, ratings))
        except DAO_ERRORS as e:
            self.logger.error(f"Unable to summarize ratings for movie {movie_id}: {e}")
            return StoreResult.failure(str(e) or "Unable to summarize ratings")
