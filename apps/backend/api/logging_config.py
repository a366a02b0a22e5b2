"""
Logging configuration for the review API.

Every record written by the "api" logger (and its children such as
"api.reviews") carries the id of the request that produced it.
"""

import logging
import os
import sys
import uuid
from contextvars import ContextVar, Token
from datetime import datetime
from pathlib import Path
from typing import Optional

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] - %(message)s"


class RequestIdFilter(logging.Filter):
    """Add request_id to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or "-"
        return True


def setup_api_logger(
    name: str = "api",
    log_dir: Optional[Path] = None,
    level: Optional[int] = None,
) -> logging.Logger:
    """
    Set up the API logger with file and console handlers.

    Args:
        name: Logger name
        log_dir: Directory for log files (defaults to $LOG_DIR or ./logs)
        level: Logging level (defaults to $LOG_LEVEL or INFO)

    Returns:
        Configured logger instance
    """
    if level is None:
        level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    request_filter = RequestIdFilter()

    if log_dir is None:
        log_dir = Path(os.getenv("LOG_DIR") or Path.cwd() / "logs")
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / f"{name}_{datetime.now().strftime('%Y%m%d')}.log"
    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    file_handler.addFilter(request_filter)
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(request_filter)
    logger.addHandler(console_handler)

    return logger


def generate_request_id() -> str:
    """Generate a short unique request ID."""
    return uuid.uuid4().hex[:8]


def get_request_id() -> Optional[str]:
    return request_id_var.get()


def set_request_id(request_id: str) -> Token:
    """Set the request ID in context. Returns a token for reset_request_id."""
    return request_id_var.set(request_id)


def reset_request_id(token: Token) -> None:
    request_id_var.reset(token)


logger = setup_api_logger()
