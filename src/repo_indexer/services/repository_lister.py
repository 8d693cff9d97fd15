"""Repository lister — pages through every repository the user owns."""

from __future__ import annotations

import logging

from repo_indexer.domain.entities import RepositorySummary
from repo_indexer.domain.ports.github_gateway import GitHubGateway
from repo_indexer.services.cancellation import CancellationToken
from repo_indexer.services.pacing import DelayStrategy, NoDelay

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


class RepositoryLister:
    """Collect ``/user/repos`` page by page, starting at page 1.

    Listing stops at the first empty page, or right after a page shorter than
    *page_size* since nothing can follow it. Any failing page aborts the
    whole listing. *page_size* is capped at GitHub's per-page maximum,
    otherwise every full page would look like the last one.
    """

    def __init__(
        self,
        gateway: GitHubGateway,
        page_size: int = 100,
        delay: DelayStrategy | None = None,
    ) -> None:
        self._gateway = gateway
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self._page_size = min(page_size, MAX_PAGE_SIZE)
        self._delay = delay or NoDelay()

    async def list_all(
        self, cancel_token: CancellationToken | None = None
    ) -> list[RepositorySummary]:
        repositories: list[RepositorySummary] = []
        seen: set[int] = set()
        page = 1

        while True:
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()
            batch = await self._gateway.fetch_repository_page(page, self._page_size)
            if not batch:
                break

            for repo in batch:
                if repo.id in seen:
                    logger.debug("Dropping duplicate repository %s", repo.full_name)
                    continue
                seen.add(repo.id)
                repositories.append(repo)

            if len(batch) < self._page_size:
                break
            page += 1
            await self._delay.pause()

        logger.info("Listed %d repositories over %d page(s)", len(repositories), page)
        return repositories
