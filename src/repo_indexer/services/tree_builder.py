"""Tree builder — mirror a repository's directories into FileTreeNodes."""

from __future__ import annotations

import logging

from repo_indexer.domain.entities import ContentEntry, FileTreeNode, RepositoryReport
from repo_indexer.domain.exceptions import GitHubApiError
from repo_indexer.services.content_fetcher import ContentFetcher
from repo_indexer.services.pacing import DelayStrategy, NoDelay

logger = logging.getLogger(__name__)


class TreeBuilder:
    """Walk the contents API recursively, one request at a time.

    Two bounds apply. A call at ``depth >= max_depth`` returns nothing at
    all; directories are only descended into while ``depth <
    max_recursion_depth``. Deeper directories become leaves with no children.
    """

    def __init__(
        self,
        fetcher: ContentFetcher,
        delay: DelayStrategy | None = None,
        max_depth: int = 5,
        max_recursion_depth: int = 3,
    ) -> None:
        self._fetcher = fetcher
        self._delay = delay or NoDelay()
        self._max_depth = max_depth
        self._max_recursion_depth = max_recursion_depth

    async def build_tree(
        self,
        owner: str,
        repo: str,
        path: str = "",
        depth: int = 0,
        report: RepositoryReport | None = None,
    ) -> list[FileTreeNode]:
        if depth >= self._max_depth:
            return []

        entries = await self._fetcher.list_contents(owner, repo, path)
        nodes: list[FileTreeNode] = []
        for entry in entries:
            children: tuple[FileTreeNode, ...] | None = None
            if entry.is_dir and depth < self._max_recursion_depth:
                children = tuple(
                    await self._explore_directory(owner, repo, entry, depth + 1, report)
                )
            nodes.append(
                FileTreeNode(
                    name=entry.name,
                    path=entry.path,
                    type=entry.type,
                    size=entry.size,
                    children=children,
                )
            )
            await self._delay.pause()
        return nodes

    async def _explore_directory(
        self,
        owner: str,
        repo: str,
        entry: ContentEntry,
        depth: int,
        report: RepositoryReport | None,
    ) -> list[FileTreeNode]:
        """Children of *entry*, or ``[]`` when the subdirectory can't be listed."""
        try:
            return await self.build_tree(owner, repo, entry.path, depth, report)
        except GitHubApiError as exc:
            logger.warning("Skipping directory %s/%s/%s: %s", owner, repo, entry.path, exc)
            if report is not None:
                report.skipped_directories.append(entry.path)
            return []
