"""
Shared fixtures for review backend tests.

Provides an in-memory reviews collection, a fake connection, a DAO
bound to it, and a FastAPI test client with overridden dependencies.
"""

import copy
import pytest
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Dict, List, Optional
from unittest.mock import MagicMock

from bson import ObjectId
from fastapi.testclient import TestClient

from moviereviews.config import Config
from moviereviews.database import ReviewsDAO


# =============================================================================
# SAMPLE DATA
# =============================================================================

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def create_sample_review(
    movie_id: int,
    user: str,
    review: str,
    rating: int = 4,
    minutes_ago: int = 0,
) -> dict:
    """Create a stored review document for testing."""
    created = BASE_TIME - timedelta(minutes=minutes_ago)
    return {
        "_id": ObjectId(),
        "movieId": movie_id,
        "user": user,
        "review": review,
        "rating": rating,
        "createdAt": created,
        "updatedAt": created,
    }


SAMPLE_REVIEWS = [
    create_sample_review(550, "Alice", "Great cinematography!", 5, minutes_ago=30),
    create_sample_review(550, "Bob", "Too long in the middle act.", 3, minutes_ago=10),
    create_sample_review(550, "Carol", "The twist still works on rewatch.", 4, minutes_ago=20),
    create_sample_review(13, "Dave", "Run, Forrest, run. A classic.", 5, minutes_ago=5),
]


# =============================================================================
# FAKE MONGODB COLLECTION
# =============================================================================

class FakeCursor:
    """Subset of pymongo Cursor: sort() and iteration."""

    def __init__(self, docs: List[dict]):
        self.docs = docs

    def sort(self, key: str, direction: int = 1) -> "FakeCursor":
        self.docs = sorted(self.docs, key=lambda d: d.get(key), reverse=direction < 0)
        return self

    def __iter__(self):
        return iter(self.docs)


class FakeCollection:
    """In-memory stand-in for the pymongo reviews collection."""

    def __init__(self, docs: Optional[List[dict]] = None):
        self.docs: Dict[ObjectId, dict] = {}
        self.indexes: List[list] = []
        for doc in docs or []:
            self.docs[doc["_id"]] = copy.deepcopy(doc)

    def _matches(self, doc: dict, query: dict) -> bool:
        return all(doc.get(key) == value for key, value in query.items())

    def create_index(self, keys, **kwargs) -> str:
        self.indexes.append(keys)
        return kwargs.get("name", "index")

    def insert_one(self, doc: dict):
        doc = copy.deepcopy(doc)
        doc.setdefault("_id", ObjectId())
        self.docs[doc["_id"]] = doc
        return SimpleNamespace(inserted_id=doc["_id"], acknowledged=True)

    def find_one(self, query: dict) -> Optional[dict]:
        for doc in self.docs.values():
            if self._matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query: dict, projection: Optional[dict] = None) -> FakeCursor:
        return FakeCursor(
            [copy.deepcopy(d) for d in self.docs.values() if self._matches(d, query)]
        )

    def update_one(self, query: dict, update: dict):
        for doc in self.docs.values():
            if self._matches(doc, query):
                changes = update.get("$set", {})
                modified = any(doc.get(k) != v for k, v in changes.items())
                doc.update(copy.deepcopy(changes))
                return SimpleNamespace(matched_count=1, modified_count=int(modified))
        return SimpleNamespace(matched_count=0, modified_count=0)

    def delete_one(self, query: dict):
        for key, doc in list(self.docs.items()):
            if self._matches(doc, query):
                del self.docs[key]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    def by_movie(self, movie_id: int) -> List[dict]:
        return [d for d in self.docs.values() if d["movieId"] == movie_id]


class FakeConnection:
    """Stand-in for MongoConnection around a FakeCollection."""

    def __init__(self, collection, config: Config):
        self.config = config
        self.collection = collection
        self.connect_calls = 0
        self.closed = False

    def connect(self):
        self.connect_calls += 1
        return self.collection

    def close(self) -> None:
        self.closed = True


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def test_config(tmp_path):
    """Config writing logs and votes under a temporary directory."""
    return Config(
        reviews_api_url="http://reviews.test/api/v1/reviews/",
        votes_path=tmp_path / "votes.json",
        log_dir=tmp_path / "logs",
    )


@pytest.fixture
def fake_collection():
    """Provide a fresh empty collection for each test."""
    return FakeCollection()


@pytest.fixture
def fake_collection_with_data():
    """Collection pre-populated with sample reviews."""
    return FakeCollection(SAMPLE_REVIEWS)


@pytest.fixture
def reviews_dao(fake_collection, test_config):
    return ReviewsDAO(fake_collection, test_config)


def _client_for(collection, config):
    from api.main import app
    from api import dependencies

    dependencies.get_config.cache_clear()
    dependencies.get_connection.cache_clear()

    connection = FakeConnection(collection, config)
    app.dependency_overrides[dependencies.get_connection] = lambda: connection
    app.dependency_overrides[dependencies.get_config] = lambda: config
    return app, connection


@pytest.fixture
def api_client(fake_collection_with_data, test_config):
    """Provide FastAPI test client backed by the sample collection."""
    app, _ = _client_for(fake_collection_with_data, test_config)

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def failing_api_client(test_config):
    """Test client whose collection raises on every operation."""
    from pymongo.errors import ServerSelectionTimeoutError

    collection = MagicMock()
    error = ServerSelectionTimeoutError("localhost:27017: connection refused")
    for method in ("insert_one", "find_one", "find", "update_one", "delete_one"):
        getattr(collection, method).side_effect = error

    app, _ = _client_for(collection, test_config)

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
