"""
Movie Review REST API.

This module provides a FastAPI-based REST API for movie reviews
backed by a MongoDB collection.
"""

from api.main import app

__all__ = ["app"]
