"""API routes — thin controllers that delegate to the use case."""

from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends

from repo_indexer.domain.exceptions import GenerationInProgressError, RepoIndexerError
from repo_indexer.interface.dependencies import get_use_case
from repo_indexer.interface.schemas import (
    AcceptedResponse,
    CredentialRequest,
    ErrorResponse,
    RepositoryResponse,
    StatusResponse,
)
from repo_indexer.services.cancellation import CancellationToken
from repo_indexer.services.index_repositories import IndexRepositoriesUseCase

logger = logging.getLogger(__name__)

router = APIRouter()


async def _run_generation(
    use_case: IndexRepositoriesUseCase, token: CancellationToken
) -> None:
    try:
        await use_case.run_generation(token)
    except RepoIndexerError as exc:
        logger.warning("Documentation run ended early: %s", exc)


@router.put(
    "/credential",
    response_model=StatusResponse,
    responses={
        401: {"model": ErrorResponse, "description": "GitHub authentication failed"},
        409: {"model": ErrorResponse, "description": "Another GitHub operation is running"},
    },
)
async def set_credential(
    body: CredentialRequest,
    use_case: IndexRepositoriesUseCase = Depends(get_use_case),
) -> StatusResponse:
    """Store a GitHub token, authenticate and list repositories."""
    if use_case.is_running:
        raise GenerationInProgressError("Cannot change the token while a GitHub operation is running.")
    use_case.session.set_credential(body.token)
    await use_case.authenticate()
    return StatusResponse.from_snapshot(use_case.session.snapshot())


@router.get("/status", response_model=StatusResponse)
async def status(
    use_case: IndexRepositoriesUseCase = Depends(get_use_case),
) -> StatusResponse:
    """Current session state and progress."""
    return StatusResponse.from_snapshot(use_case.session.snapshot())


@router.get("/repositories", response_model=list[RepositoryResponse])
async def repositories(
    use_case: IndexRepositoriesUseCase = Depends(get_use_case),
) -> list[RepositoryResponse]:
    """Repositories found by the last listing."""
    return [
        RepositoryResponse.from_entity(repo)
        for repo in use_case.session.snapshot().repositories
    ]


@router.post(
    "/generate",
    response_model=AcceptedResponse,
    status_code=202,
    responses={
        401: {"model": ErrorResponse, "description": "No GitHub token configured"},
        409: {"model": ErrorResponse, "description": "Another GitHub operation is running"},
    },
)
async def generate(
    background: BackgroundTasks,
    use_case: IndexRepositoriesUseCase = Depends(get_use_case),
) -> AcceptedResponse:
    """Start generating the combined documentation database."""
    use_case.require_credential()
    # Reserved before responding, so a second request gets 409 rather than 202.
    token = use_case.reserve()
    background.add_task(_run_generation, use_case, token)
    return AcceptedResponse(message="Documentation generation started.")


@router.post("/generate/cancel", response_model=AcceptedResponse, status_code=202)
async def cancel_generation(
    use_case: IndexRepositoriesUseCase = Depends(get_use_case),
) -> AcceptedResponse:
    """Ask the active run to stop before its next request."""
    if use_case.cancel():
        return AcceptedResponse(message="Cancellation requested.")
    return AcceptedResponse(status="idle", message="No documentation run is active.")
