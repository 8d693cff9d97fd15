"""Code file extractor — fetch recognised source files from a built tree."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from repo_indexer.domain.entities import FileTreeNode, RepositoryReport, SourceFile
from repo_indexer.domain.exceptions import GitHubApiError
from repo_indexer.services.content_fetcher import ContentFetcher
from repo_indexer.services.language_detection import detect_language, is_code_file

logger = logging.getLogger(__name__)


class CodeFileExtractor:
    """Depth-first walk that decodes source files, up to *max_files* per repo.

    Once the cap is reached no further file is fetched, but directories are
    still walked. A file that cannot be fetched or decoded is skipped.
    """

    def __init__(self, fetcher: ContentFetcher, max_files: int = 50) -> None:
        self._fetcher = fetcher
        self._max_files = max_files

    async def extract(
        self,
        owner: str,
        repo: str,
        tree: Sequence[FileTreeNode],
        report: RepositoryReport | None = None,
    ) -> list[SourceFile]:
        collected: list[SourceFile] = []
        await self._walk(owner, repo, tree, collected, report)
        logger.debug("Collected %d source files from %s/%s", len(collected), owner, repo)
        return collected

    async def _walk(
        self,
        owner: str,
        repo: str,
        nodes: Sequence[FileTreeNode],
        collected: list[SourceFile],
        report: RepositoryReport | None,
    ) -> None:
        for node in nodes:
            if node.is_file and is_code_file(node.name) and len(collected) < self._max_files:
                source = await self._fetch(owner, repo, node, report)
                if source is not None:
                    collected.append(source)

            if node.children:
                await self._walk(owner, repo, node.children, collected, report)

    async def _fetch(
        self,
        owner: str,
        repo: str,
        node: FileTreeNode,
        report: RepositoryReport | None,
    ) -> SourceFile | None:
        try:
            content = await self._fetcher.fetch_file_content(owner, repo, node.path)
        except GitHubApiError as exc:
            logger.warning("Failed to fetch %s/%s/%s: %s", owner, repo, node.path, exc)
            if report is not None:
                report.skipped_files.append(node.path)
            return None
        return SourceFile(
            path=node.path,
            name=node.name,
            language=detect_language(node.name),
            content=content,
            size=node.size or 0,
        )
