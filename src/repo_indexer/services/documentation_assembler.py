"""Documentation assembler — one record per repository."""

from __future__ import annotations

import logging

from repo_indexer.domain.entities import (
    RepositoryDocumentationRecord,
    RepositoryReport,
    RepositorySummary,
)
from repo_indexer.domain.exceptions import GitHubApiError
from repo_indexer.services.code_extractor import CodeFileExtractor
from repo_indexer.services.content_fetcher import ContentFetcher
from repo_indexer.services.tree_builder import TreeBuilder

logger = logging.getLogger(__name__)

README_PATH = "README.md"
NO_DESCRIPTION = "No description"


class DocumentationAssembler:
    """README (best effort), then tree, then code files, then the record.

    Only the README is optional; a failing root listing fails the whole
    repository.
    """

    def __init__(
        self,
        fetcher: ContentFetcher,
        tree_builder: TreeBuilder,
        extractor: CodeFileExtractor,
    ) -> None:
        self._fetcher = fetcher
        self._tree_builder = tree_builder
        self._extractor = extractor

    async def assemble(
        self, repo: RepositorySummary
    ) -> tuple[RepositoryDocumentationRecord, RepositoryReport]:
        owner = repo.owner_login
        report = RepositoryReport(full_name=repo.full_name)

        readme = await self._fetch_readme(owner, repo.name)

        structure = await self._tree_builder.build_tree(owner, repo.name, report=report)
        code_files = await self._extractor.extract(owner, repo.name, structure, report)

        record = RepositoryDocumentationRecord(
            id=f"{owner}-{repo.name}",
            name=repo.name,
            full_name=repo.full_name,
            description=repo.description or NO_DESCRIPTION,
            url=repo.html_url,
            owner=owner,
            language=repo.language,
            stars=repo.stargazers_count,
            forks=repo.forks_count,
            readme=readme,
            structure=tuple(structure),
            code_files=tuple(code_files),
            topics=repo.topics,
            created_at=repo.created_at,
            updated_at=repo.updated_at,
        )
        return record, report

    async def _fetch_readme(self, owner: str, name: str) -> str | None:
        try:
            return await self._fetcher.fetch_file_content(owner, name, README_PATH)
        except GitHubApiError as exc:
            logger.info("No README found for %s/%s (%s)", owner, name, exc)
            return None
