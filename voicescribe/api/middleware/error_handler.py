"""
Global error handling middleware for the FastAPI application.

Catches VoiceScribeError subclasses, Pydantic validation errors, and
unhandled exceptions, converting them into a consistent JSON envelope.
"""

import logging
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from voicescribe.core.exceptions import StageError, VoiceScribeError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application.

    Registers three handlers in priority order:
    1. ``VoiceScribeError``: domain and stage errors as structured JSON.
    2. ``RequestValidationError``: malformed request bodies (422).
    3. ``Exception``: unexpected server errors (500).

    Args:
        app: The FastAPI application instance to register handlers on.
    """

    @app.exception_handler(VoiceScribeError)
    async def voicescribe_error_handler(request: Request, exc: VoiceScribeError) -> JSONResponse:
        """Convert domain-specific errors into a JSON error envelope."""
        if isinstance(exc, StageError):
            logger.warning("%s stage failed on %s: %s", exc.stage, request.url.path, exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "code": exc.code,
                "timestamp": exc.timestamp,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle Pydantic request validation errors (malformed body/params)."""
        return JSONResponse(
            status_code=422,
            content={
                "detail": str(exc),
                "code": "VALIDATION_ERROR",
                "timestamp": datetime.now(UTC).isoformat(),
            },
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all handler; stack traces go to the log, not the client."""
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "code": "INTERNAL_ERROR",
                "timestamp": datetime.now(UTC).isoformat(),
            },
        )
