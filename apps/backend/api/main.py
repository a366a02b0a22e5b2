"""
FastAPI application for the movie review site.

JSON API for creating, reading, updating and deleting movie reviews.
The MongoDB connection is opened when the app starts and closed when
it stops.
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.dependencies import get_config, get_connection
from api.exceptions import (
    APIError,
    api_error_handler,
    generic_exception_handler,
    http_error_handler,
    request_validation_handler,
)
from api.logging_config import (
    logger,
    generate_request_id,
    reset_request_id,
    set_request_id,
)
from api.routers import reviews


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the shared MongoDB connection for the life of the app."""
    # Honour test overrides of the connection provider
    provider = app.dependency_overrides.get(get_connection, get_connection)
    connection = provider()
    connection.connect()
    logger.info("Review API started")
    try:
        yield
    finally:
        connection.close()
        logger.info("Review API stopped")


app = FastAPI(
    title="Movie Review API",
    description="REST API for movie reviews",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# Register exception handlers
app.add_exception_handler(APIError, api_error_handler)
app.add_exception_handler(StarletteHTTPException, http_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(Exception, generic_exception_handler)


def _allowed_origins() -> list:
    try:
        return get_config().allowed_origins or ["*"]
    except ValueError as e:
        logger.error(f"Configuration error, allowing all origins: {e}")
        return ["*"]


app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    """Log all HTTP requests with timing and response status."""
    request_id = generate_request_id()
    token = set_request_id(request_id)

    try:
        # Skip logging for health checks and docs
        skip_paths = {"/health", "/", "/api/docs", "/api/redoc", "/api/openapi.json"}
        if request.url.path in skip_paths:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response

        start_time = time.time()
        client_ip = request.client.host if request.client else "unknown"

        logger.info(
            f"Request started: {request.method} {request.url.path} "
            f"from {client_ip}"
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Request failed: {request.method} {request.url.path} "
                f"duration={duration_ms:.2f}ms error={str(e)}"
            )
            raise

        duration_ms = (time.time() - start_time) * 1000
        log_msg = (
            f"Request completed: {request.method} {request.url.path} "
            f"status={response.status_code} duration={duration_ms:.2f}ms"
        )

        if response.status_code >= 500:
            logger.error(log_msg)
        elif response.status_code >= 400:
            logger.warning(log_msg)
        else:
            logger.info(log_msg)

        # Add request ID to response headers for debugging
        response.headers["X-Request-ID"] = request_id
        return response
    finally:
        reset_request_id(token)


app.include_router(reviews.router, prefix="/api/v1", tags=["Reviews"])


@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint lists the docs."""
    return {
        "message": "Movie Review API",
        "docs": "/api/docs",
        "redoc": "/api/redoc",
    }


@app.get("/health", include_in_schema=False)
async def health():
    """Simple health check endpoint."""
    return {"status": "ok"}
