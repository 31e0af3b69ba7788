"""Custom exceptions and centralized FastAPI error handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AnalyticsError(Exception):
    """Base exception with HTTP status code."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class InvalidPostTypeError(AnalyticsError):
    def __init__(self, post_type: str | None):
        super().__init__(
            "Invalid type parameter. Use 'latest' or 'popular'.",
            status_code=400,
        )
        self.post_type = post_type


class UpstreamError(AnalyticsError):
    """The remote analytics API failed or answered with something unusable."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Upstream request to {path} failed: {reason}", status_code=502)
        self.path = path


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(AnalyticsError)
    async def handle_analytics_error(_request: Request, exc: AnalyticsError):
        return JSONResponse({"message": str(exc)}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse(
            {"message": "Internal server error"},
            status_code=500,
        )
