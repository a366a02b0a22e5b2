"""
Configuration management for the review service.

Loads configuration from environment variables and provides
a centralized Config dataclass for the API, the data-access layer
and the review client.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv


@dataclass
class Config:
    """Centralized configuration from environment variables."""

    # MongoDB
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "movie-review-site"
    mongo_collection: str = "reviews"
    mongo_timeout_ms: int = 5000

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # CORS settings
    allowed_origins: List[str] = field(default_factory=list)

    # Review client
    reviews_api_url: str = "http://localhost:8000/api/v1/reviews/"
    request_timeout: int = 10
    votes_path: Path = field(
        default_factory=lambda: Path.home() / ".moviereviews" / "votes.json"
    )

    # Paths
    log_dir: Path = field(default_factory=lambda: Path.cwd() / "logs")

    @classmethod
    def from_env(cls, env_path: Optional[str] = None) -> "Config":
        """
        Load configuration from environment variables.

        Args:
            env_path: Optional path to .env file. If not provided,
                     looks for .env in monorepo root, then current directory.

        Returns:
            Config instance with loaded values.

        Raises:
            ValueError: If a numeric setting is not an integer.
        """
        if env_path:
            load_dotenv(env_path)
        else:
            # Try monorepo root first (../../.env from this file)
            root_env = Path(__file__).parent.parent.parent.parent / ".env"
            if root_env.exists():
                load_dotenv(root_env)
            else:
                load_dotenv()

        mongo_uri = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
        if not mongo_uri.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError("MONGODB_URI must be a mongodb:// or mongodb+srv:// URI")

        origins_str = os.getenv("ALLOWED_ORIGINS", "")
        allowed_origins = [o.strip() for o in origins_str.split(",") if o.strip()]

        api_url = os.getenv("REVIEWS_API_URL", "http://localhost:8000/api/v1/reviews/")
        if not api_url.endswith("/"):
            api_url += "/"

        votes_path = os.getenv("VOTES_PATH")
        log_dir = os.getenv("LOG_DIR")

        return cls(
            mongo_uri=mongo_uri,
            mongo_db=os.getenv("MONGODB_DB", "movie-review-site"),
            mongo_collection=os.getenv("MONGODB_COLLECTION", "reviews"),
            mongo_timeout_ms=int(os.getenv("MONGODB_TIMEOUT_MS", "5000")),
            api_host=os.getenv("API_HOST", "0.0.0.0"),
            api_port=int(os.getenv("API_PORT", "8000")),
            allowed_origins=allowed_origins,
            reviews_api_url=api_url,
            request_timeout=int(os.getenv("REQUEST_TIMEOUT", "10")),
            votes_path=(
                Path(votes_path).expanduser() if votes_path
                else Path.home() / ".moviereviews" / "votes.json"
            ),
            log_dir=Path(log_dir) if log_dir else Path.cwd() / "logs",
        )

    def get_headers(self) -> dict:
        """Get headers for review API requests."""
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
