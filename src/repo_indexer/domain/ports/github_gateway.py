"""Port: GitHub gateway — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol

from repo_indexer.domain.entities import ContentEntry, Principal, RepositorySummary


class GitHubGateway(Protocol):
    """Abstract contract for the three GitHub resources the indexer reads."""

    async def fetch_current_user(self) -> Principal:
        """Return the principal that owns the configured token."""
        ...

    async def fetch_repository_page(
        self, page: int, per_page: int
    ) -> list[RepositorySummary]:
        """Return one page of the authenticated user's repositories."""
        ...

    async def list_contents(
        self, owner: str, repo: str, path: str = ""
    ) -> list[ContentEntry]:
        """Return the entries at *path*; a single file comes back as one entry."""
        ...
