"""
Dependency injection for the API.

Provides dependencies for configuration, the MongoDB connection
and the reviews data-access object.
"""

from functools import lru_cache

from fastapi import Depends

from moviereviews.config import Config
from moviereviews.database import MongoConnection, ReviewsDAO


@lru_cache()
def get_config() -> Config:
    """Get cached configuration instance."""
    return Config.from_env()


@lru_cache()
def get_connection() -> MongoConnection:
    """
    Get the shared MongoConnection.

    The connection is opened and closed by the application lifespan,
    not here.
    """
    return MongoConnection(get_config())


def get_reviews_dao(
    connection: MongoConnection = Depends(get_connection),
) -> ReviewsDAO:
    """ReviewsDAO bound to the shared collection handle."""
    return ReviewsDAO(connection.collection, connection.config)
