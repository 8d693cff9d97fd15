"""FastAPI application factory for the repository indexer."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from repo_indexer.interface.dependencies import get_use_case, shutdown, startup
from repo_indexer.interface.error_handlers import register_error_handlers
from repo_indexer.interface.routes import router
from repo_indexer.services.index_repositories import IndexRepositoriesUseCase

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the indexer on startup; stop its active operation on shutdown.

    A background run that is still going when the server stops is cancelled
    before the HTTP client closes, so it never persists a partial database.
    """
    await startup()
    use_case = get_use_case()
    logger.info(
        "Indexer ready (credential configured: %s)",
        use_case.session.snapshot().has_credential,
    )
    try:
        yield
    finally:
        if use_case.cancel():
            logger.info("Cancelled the active GitHub operation on shutdown")
        await shutdown()


def create_app(use_case: IndexRepositoriesUseCase | None = None) -> FastAPI:
    """Build and wire the FastAPI application.

    With *use_case* given the app serves that instance and skips the
    lifespan, so no settings are read and no HTTP client is opened.
    """
    app = FastAPI(
        title="GitHub Repository Indexer",
        version="1.0.0",
        description=(
            "Indexes every repository owned by a GitHub user (README, "
            "directory tree and source files) into one JSON documentation "
            "database."
        ),
        lifespan=None if use_case is not None else _lifespan,
    )

    register_error_handlers(app)
    app.include_router(router)
    if use_case is not None:
        app.dependency_overrides[get_use_case] = lambda: use_case

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
