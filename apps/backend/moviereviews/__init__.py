"""
Movie reviews - storage and client for the movie review site.

This package provides:
- MongoDB data access for review documents
- An HTTP client for the review API
- A review view that reloads after every change
- Device-local helpful/not-helpful votes
- A command-line front end
"""

from .config import Config
from .models import RatingSummary, ReviewDocument, StoreResult, WriteSummary
from .database import MongoConnection, ReviewsDAO
from .client import ReviewsClient, ReviewsClientError, validate_review_input
from .votes import VoteLedger, VoteTally
from .widget import Notification, ReviewForm, ReviewWidget

__version__ = "1.0.0"
__all__ = [
    "Config",
    "RatingSummary",
    "ReviewDocument",
    "StoreResult",
    "WriteSummary",
    "MongoConnection",
    "ReviewsDAO",
    "ReviewsClient",
    "ReviewsClientError",
    "validate_review_input",
    "VoteLedger",
    "VoteTally",
    "Notification",
    "ReviewForm",
    "ReviewWidget",
]
