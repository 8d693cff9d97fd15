"""FastAPI dependency injection wiring."""

from __future__ import annotations

import httpx

from repo_indexer.infrastructure.config import Settings, get_settings
from repo_indexer.infrastructure.file_sink import default_sinks
from repo_indexer.infrastructure.github_rest_adapter import GitHubRestAdapter
from repo_indexer.services.index_repositories import (
    IndexRepositoriesUseCase,
    PipelineOptions,
)
from repo_indexer.services.pacing import FixedDelay
from repo_indexer.services.session import IndexerSession

_http_client: httpx.AsyncClient | None = None
_use_case: IndexRepositoriesUseCase | None = None


def build_options(settings: Settings) -> PipelineOptions:
    return PipelineOptions(
        page_size=settings.page_size,
        page_delay=FixedDelay(settings.page_delay_seconds),
        entry_delay=FixedDelay(settings.entry_delay_seconds),
        repository_delay=FixedDelay(settings.repository_delay_seconds),
        max_tree_depth=settings.max_tree_depth,
        max_recursion_depth=settings.max_recursion_depth,
        max_code_files=settings.max_code_files,
        schema_version=settings.schema_version,
    )


async def startup() -> None:
    """Initialise shared resources — called from the lifespan context manager."""
    global _http_client, _use_case  # noqa: PLW0603

    settings = get_settings()
    client = httpx.AsyncClient(timeout=httpx.Timeout(settings.request_timeout))
    _http_client = client

    token = settings.github_token.get_secret_value() if settings.github_token else None
    _use_case = IndexRepositoriesUseCase(
        session=IndexerSession(token),
        gateway_factory=lambda tok: GitHubRestAdapter(
            client=client, token=tok, base_url=settings.github_api_base
        ),
        sinks=default_sinks(settings),
        options=build_options(settings),
    )


async def shutdown() -> None:
    """Release shared resources."""
    global _http_client, _use_case  # noqa: PLW0603

    _use_case = None
    if _http_client:
        await _http_client.aclose()
        _http_client = None


def get_use_case() -> IndexRepositoriesUseCase:
    """Return the process-wide use case built at startup."""
    assert _use_case is not None, "startup() was not called"
    return _use_case
