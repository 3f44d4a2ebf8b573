"""Custom exceptions and centralized FastAPI error handlers."""
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger("errors")


class OverlayError(Exception):
    """Base exception with HTTP status code."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class PlayerValidationError(OverlayError):
    """Malformed or missing player query (client fault)."""

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class UpstreamError(OverlayError):
    """Failure talking to the Lounge API. Always surfaced as a 500."""

    def __init__(self, message: str):
        super().__init__(message, status_code=500)


class UpstreamNetworkError(UpstreamError):
    """Transport-level failure: timeout, DNS, connection refused."""

    def __init__(self, cause: object):
        super().__init__(f"Network error: {cause}")


class UpstreamStatusError(UpstreamError):
    """Upstream answered with a non-success status code."""

    def __init__(self, upstream_status: int, body: Optional[str]):
        super().__init__(f"API error {upstream_status}: {body}")
        self.upstream_status = upstream_status


class UpstreamDecodeError(UpstreamError):
    """Upstream body did not match the expected player schema."""

    def __init__(self, cause: object):
        super().__init__(f"JSON parse error: {cause}")


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(OverlayError)
    async def handle_overlay_error(_request: Request, exc: OverlayError):
        return JSONResponse({"error": str(exc)}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse(
            {"error": "Internal server error"},
            status_code=500,
        )
