"""Global exception handlers — translate domain errors to HTTP responses.

Each domain exception maps to a specific HTTP status code and the
standard ``{"status": "error", "message": "..."}`` envelope.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from repo_indexer.domain.exceptions import (
    AuthenticationFailedError,
    DecodingFailedError,
    GenerationCancelledError,
    GenerationInProgressError,
    GitHubRateLimitError,
    MissingCredentialError,
    NetworkFailureError,
    PersistenceError,
    RepoIndexerError,
)
from repo_indexer.interface.schemas import ErrorResponse

logger = logging.getLogger(__name__)

# Checked in order; subclasses before their bases.
_EXCEPTION_STATUS: list[tuple[type[RepoIndexerError], int]] = [
    (MissingCredentialError, 401),
    (AuthenticationFailedError, 401),
    (GenerationInProgressError, 409),
    (GenerationCancelledError, 409),
    (GitHubRateLimitError, 429),
    (NetworkFailureError, 502),
    (DecodingFailedError, 502),
    (PersistenceError, 500),
]


def _error_json(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
    )


def status_for(exc: RepoIndexerError) -> int:
    for exc_type, code in _EXCEPTION_STATUS:
        if isinstance(exc, exc_type):
            return code
    return 500


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application."""

    # ── Domain exceptions ───────────────────────────────────────────────

    @app.exception_handler(RepoIndexerError)
    async def domain_handler(request: Request, exc: RepoIndexerError) -> JSONResponse:
        logger.warning("%s: %s", type(exc).__name__, exc)
        return _error_json(status_for(exc), str(exc))

    # ── Pydantic / FastAPI validation errors ────────────────────────────

    @app.exception_handler(RequestValidationError)
    async def validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        messages = []
        for err in exc.errors():
            loc = " → ".join(str(p) for p in err.get("loc", []))
            messages.append(f"{loc}: {err.get('msg', 'validation error')}")
        return _error_json(422, "; ".join(messages))

    # ── Catch-all for unexpected errors ─────────────────────────────────

    @app.exception_handler(Exception)
    async def generic_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception")
        return _error_json(500, "An unexpected error occurred. Please try again later.")
