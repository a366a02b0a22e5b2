"""
Review API user flow tests.

Tests mimic what the review widget would call.
"""

from datetime import datetime, timezone

import pytest
from bson import ObjectId

from conftest import SAMPLE_REVIEWS

BASE = "/api/v1/reviews"

VALID_REVIEW = {
    "movieId": 550,
    "user": "Alice",
    "review": "Great cinematography!",
    "rating": 5,
}


def _parse(ts: str) -> datetime:
    return datetime.fromisoformat(ts.replace("Z", "+00:00"))


class TestCreateReviewFlow:
    """Flow 1: a visitor writes a review and sees it in the list."""

    def test_create_then_list(self, api_client):
        response = api_client.post(f"{BASE}/new", json={**VALID_REVIEW, "movieId": 603})

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "success"
        assert body["message"] == "Review created successfully"
        assert ObjectId.is_valid(body["reviewId"])

        listing = api_client.get(f"{BASE}/movie/603")
        assert listing.status_code == 200
        reviews = listing.json()
        assert len(reviews) == 1
        created = reviews[0]
        assert created["id"] == body["reviewId"]
        assert created["movieId"] == 603
        assert created["user"] == "Alice"
        assert created["review"] == "Great cinematography!"
        assert created["rating"] == 5
        age = datetime.now(timezone.utc) - _parse(created["createdAt"])
        assert abs(age.total_seconds()) < 60
        assert created["createdAt"] == created["updatedAt"]

    def test_create_trims_fields(self, api_client):
        response = api_client.post(
            f"{BASE}/new",
            json={**VALID_REVIEW, "movieId": 700, "user": "  Bob  ", "review": "   Solid thriller, tight pacing.  "},
        )
        assert response.status_code == 201

        stored = api_client.get(f"{BASE}/{response.json()['reviewId']}").json()
        assert stored["user"] == "Bob"
        assert stored["review"] == "Solid thriller, tight pacing."

    def test_string_numbers_are_accepted(self, api_client):
        response = api_client.post(
            f"{BASE}/new",
            json={**VALID_REVIEW, "movieId": "701", "rating": "4"},
        )
        assert response.status_code == 201

        stored = api_client.get(f"{BASE}/{response.json()['reviewId']}").json()
        assert stored["movieId"] == 701
        assert stored["rating"] == 4

    def test_response_carries_request_id(self, api_client):
        response = api_client.post(f"{BASE}/new", json=VALID_REVIEW)
        assert len(response.headers["X-Request-ID"]) == 8


class TestCreateReviewValidation:
    """Rejected payloads return 400 and store nothing."""

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"movieId": None}, "Movie ID is required"),
            ({"movieId": "abc"}, "Movie ID must be a valid number"),
            ({"movieId": -4}, "Movie ID must be a valid number"),
            ({"movieId": 10**20}, "Movie ID must be a valid number"),
            ({"user": None}, "User name is required and must be a string"),
            ({"user": 42}, "User name is required and must be a string"),
            ({"review": ["not", "text"]}, "Review text is required and must be a string"),
            ({"user": "A"}, "User name must be between 2 and 50 characters"),
            ({"user": "   A   "}, "User name must be between 2 and 50 characters"),
            ({"user": "x" * 51}, "User name must be between 2 and 50 characters"),
            ({"review": "Too short"}, "Review must be between 10 and 500 characters"),
            ({"review": "y" * 501}, "Review must be between 10 and 500 characters"),
            ({"rating": 0}, "Rating must be between 1 and 5"),
            ({"rating": 6}, "Rating must be between 1 and 5"),
            ({"rating": "great"}, "Rating must be between 1 and 5"),
        ],
    )
    def test_invalid_fields(self, api_client, fake_collection_with_data, overrides, message):
        before = len(fake_collection_with_data.docs)

        response = api_client.post(f"{BASE}/new", json={**VALID_REVIEW, **overrides})

        assert response.status_code == 400
        assert response.json() == {"error": message}
        assert len(fake_collection_with_data.docs) == before

    def test_missing_rating_is_rejected(self, api_client):
        payload = {k: v for k, v in VALID_REVIEW.items() if k != "rating"}

        response = api_client.post(f"{BASE}/new", json=payload)

        assert response.status_code == 400
        assert response.json()["error"] == "Rating must be between 1 and 5"

    def test_boundary_lengths_are_accepted(self, api_client):
        response = api_client.post(
            f"{BASE}/new",
            json={**VALID_REVIEW, "user": "Al", "review": "z" * 500, "rating": 1},
        )
        assert response.status_code == 201

    def test_largest_int64_movie_id_is_accepted(self, api_client):
        response = api_client.post(f"{BASE}/new", json={**VALID_REVIEW, "movieId": 2**63 - 1})

        assert response.status_code == 201

    def test_malformed_json_is_bad_request(self, api_client):
        response = api_client.post(
            f"{BASE}/new",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert "error" in response.json()


class TestReadReviews:
    """Reading single reviews and per-movie lists."""

    def test_list_is_newest_first(self, api_client):
        response = api_client.get(f"{BASE}/movie/550")

        assert response.status_code == 200
        users = [r["user"] for r in response.json()]
        assert users == ["Bob", "Carol", "Alice"]

    def test_list_for_movie_without_reviews_is_empty(self, api_client):
        response = api_client.get(f"{BASE}/movie/99999")

        assert response.status_code == 200
        assert response.json() == []

    def test_list_with_invalid_movie_id(self, api_client):
        response = api_client.get(f"{BASE}/movie/fight-club")

        assert response.status_code == 400
        assert response.json() == {"error": "Movie ID must be a valid number"}

    def test_list_with_movie_id_beyond_int64(self, api_client):
        response = api_client.get(f"{BASE}/movie/{2**63}")

        assert response.status_code == 400
        assert response.json() == {"error": "Movie ID must be a valid number"}

    def test_get_single_review(self, api_client):
        sample = SAMPLE_REVIEWS[3]

        response = api_client.get(f"{BASE}/{sample['_id']}")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == str(sample["_id"])
        assert data["user"] == "Dave"
        assert data["movieId"] == 13

    def test_get_unknown_review(self, api_client):
        response = api_client.get(f"{BASE}/{ObjectId()}")

        assert response.status_code == 404
        assert response.json() == {"error": "Review not found"}

    def test_get_malformed_review_id(self, api_client):
        response = api_client.get(f"{BASE}/not-an-object-id")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch review"}

    def test_rating_summary(self, api_client):
        response = api_client.get(f"{BASE}/movie/550/summary")

        assert response.status_code == 200
        data = response.json()
        assert data["movieId"] == 550
        assert data["total"] == 3
        assert data["average"] == 4.0
        assert data["distribution"] == {"1": 0, "2": 0, "3": 1, "4": 1, "5": 1}
        assert data["recommendPercent"] == 67


class TestUpdateReviewFlow:
    """Flow 2: a reviewer edits their review in place."""

    def test_update_changes_text_fields_only(self, api_client, fake_collection_with_data):
        sample = SAMPLE_REVIEWS[1]
        review_id = str(sample["_id"])

        response = api_client.put(
            f"{BASE}/{review_id}",
            json={"user": "Bobby", "review": "Grew on me the second time.", "rating": 4, "movieId": 1},
        )

        assert response.status_code == 200
        assert response.json() == {"status": "success", "message": "Review updated successfully"}

        stored = api_client.get(f"{BASE}/{review_id}").json()
        assert stored["id"] == review_id
        assert stored["user"] == "Bobby"
        assert stored["review"] == "Grew on me the second time."
        assert stored["rating"] == 4
        assert stored["movieId"] == 550
        assert _parse(stored["createdAt"]) == sample["createdAt"]
        assert _parse(stored["updatedAt"]) > sample["updatedAt"]

    def test_update_unknown_review(self, api_client):
        response = api_client.put(
            f"{BASE}/{ObjectId()}",
            json={"user": "Bobby", "review": "Grew on me the second time.", "rating": 4},
        )

        assert response.status_code == 404

    def test_update_with_malformed_id(self, api_client):
        response = api_client.put(
            f"{BASE}/xyz",
            json={"user": "Bobby", "review": "Grew on me the second time.", "rating": 4},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Unable to update review"}

    def test_update_validates_fields(self, api_client):
        review_id = str(SAMPLE_REVIEWS[1]["_id"])

        response = api_client.put(
            f"{BASE}/{review_id}",
            json={"user": "Bobby", "review": "Grew on me.", "rating": 9},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Rating must be between 1 and 5"}


class TestDeleteReviewFlow:
    """Flow 3: a reviewer deletes their review."""

    def test_delete_then_get(self, api_client):
        review_id = str(SAMPLE_REVIEWS[0]["_id"])

        response = api_client.delete(f"{BASE}/{review_id}")
        assert response.status_code == 200
        assert response.json() == {"status": "success", "message": "Review deleted successfully"}

        assert api_client.get(f"{BASE}/{review_id}").status_code == 404
        users = [r["user"] for r in api_client.get(f"{BASE}/movie/550").json()]
        assert "Alice" not in users

    def test_delete_unknown_review(self, api_client):
        response = api_client.delete(f"{BASE}/{ObjectId()}")

        assert response.status_code == 404
        assert response.json() == {"error": "Review not found"}

    def test_delete_malformed_id(self, api_client):
        response = api_client.delete(f"{BASE}/12345")

        assert response.status_code == 500
        assert response.json() == {"error": "Unable to delete review"}


class TestStorageFailures:
    """A storage outage surfaces as 500 with a generic message."""

    def test_create_when_store_is_down(self, failing_api_client):
        response = failing_api_client.post(f"{BASE}/new", json=VALID_REVIEW)

        assert response.status_code == 500
        assert response.json() == {"error": "Unable to post review"}

    def test_list_when_store_is_down(self, failing_api_client):
        response = failing_api_client.get(f"{BASE}/movie/550")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch reviews"}

    def test_summary_when_store_is_down(self, failing_api_client):
        response = failing_api_client.get(f"{BASE}/movie/550/summary")

        assert response.status_code == 500

    def test_validation_runs_before_storage(self, failing_api_client):
        response = failing_api_client.post(f"{BASE}/new", json={**VALID_REVIEW, "user": "A"})

        assert response.status_code == 400


class TestServiceEndpoints:
    """Health check and docs."""

    def test_health(self, api_client):
        response = api_client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_unknown_route_uses_error_shape(self, api_client):
        response = api_client.get("/api/v1/nothing-here")

        assert response.status_code == 404
        assert "error" in response.json()
