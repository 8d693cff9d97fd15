"""Index-repositories use case — the main orchestration pipeline.

This is the single entry point for the business logic. It depends only on
the two ports (:class:`GitHubGateway` and :class:`DocumentationSink`) and
the service modules. The interface layer injects concrete adapters.

Flow: identity → repository listing → per repository (README, tree, code
files) → database → sinks. One operation holds the pipeline at a time
and it keeps exactly one request in flight.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Callable

from repo_indexer.domain.entities import (
    DocumentationDatabase,
    GenerationReport,
    Principal,
    RepositorySummary,
)
from repo_indexer.domain.exceptions import (
    GenerationCancelledError,
    GenerationInProgressError,
    MissingCredentialError,
    RepoIndexerError,
)
from repo_indexer.domain.ports.documentation_sink import DocumentationSink
from repo_indexer.domain.ports.github_gateway import GitHubGateway
from repo_indexer.services.cancellation import CancellationToken
from repo_indexer.services.code_extractor import CodeFileExtractor
from repo_indexer.services.content_fetcher import ContentFetcher
from repo_indexer.services.database_builder import SCHEMA_VERSION, DatabaseBuilder
from repo_indexer.services.documentation_assembler import DocumentationAssembler
from repo_indexer.services.identity import IdentityResolver
from repo_indexer.services.pacing import DelayStrategy, NoDelay
from repo_indexer.services.repository_lister import RepositoryLister
from repo_indexer.services.session import IndexerSession
from repo_indexer.services.tree_builder import TreeBuilder

logger = logging.getLogger(__name__)

GatewayFactory = Callable[[str], GitHubGateway]


@dataclass(frozen=True, slots=True)
class PipelineOptions:
    """Bounds and pacing for one pipeline instance."""

    page_size: int = 100
    page_delay: DelayStrategy = NoDelay()
    entry_delay: DelayStrategy = NoDelay()
    repository_delay: DelayStrategy = NoDelay()
    max_tree_depth: int = 5
    max_recursion_depth: int = 3
    max_code_files: int = 50
    schema_version: str = SCHEMA_VERSION


class IndexRepositoriesUseCase:
    """Orchestrates authentication, listing and documentation generation.

    Parameters
    ----------
    session:
        Shared state; holds the credential and receives progress updates.
    gateway_factory:
        Builds a GitHub gateway for a given token.
    sinks:
        Destinations for the serialized database, written in order.
    options:
        Traversal bounds and delay strategies.
    """

    def __init__(
        self,
        session: IndexerSession,
        gateway_factory: GatewayFactory,
        sinks: Sequence[DocumentationSink] = (),
        options: PipelineOptions | None = None,
    ) -> None:
        self._session = session
        self._gateway_factory = gateway_factory
        self._sinks = list(sinks)
        self._options = options or PipelineOptions()
        self._active_token: CancellationToken | None = None

    @property
    def session(self) -> IndexerSession:
        return self._session

    @property
    def is_running(self) -> bool:
        return self._active_token is not None

    # ── Public entry points ─────────────────────────────────────────────

    def reserve(self, cancel_token: CancellationToken | None = None) -> CancellationToken:
        """Claim the pipeline for one operation.

        Authentication, refresh and generation share this single claim, so at
        most one of them talks to GitHub at a time. It is synchronous: a
        caller can reject an overlapping request before scheduling anything.
        The returned token is released when the operation it is passed to
        finishes.
        """
        if self._active_token is not None:
            raise GenerationInProgressError("Another GitHub operation is already in progress.")
        token = cancel_token or CancellationToken()
        self._active_token = token
        return token

    def require_credential(self) -> str:
        token = self._session.token
        if not token:
            raise MissingCredentialError(
                "No GitHub token configured. Set GITHUB_TOKEN or PUT /credential."
            )
        return token

    async def authenticate(self) -> Principal:
        """Resolve the principal, then list its repositories."""
        gateway = self._gateway()
        token = self.reserve()
        self._session.begin("Authenticating with GitHub...")
        try:
            principal = await IdentityResolver(gateway, self._session).resolve(token)
            await self._list_repositories(gateway, token)
        except RepoIndexerError as exc:
            self._session.finish(f"Failed: {exc}", completed=False)
            raise
        finally:
            self._release(token)
        self._session.finish(f"Authenticated as {principal.login}", completed=False)
        return principal

    async def refresh_repositories(self) -> list[RepositorySummary]:
        gateway = self._gateway()
        token = self.reserve()
        self._session.begin("Fetching repositories...")
        try:
            repositories = await self._list_repositories(gateway, token)
        except RepoIndexerError as exc:
            self._session.finish(f"Failed: {exc}", completed=False)
            raise
        finally:
            self._release(token)
        self._session.finish(f"Fetched {len(repositories)} repositories", completed=False)
        return repositories

    async def generate_combined_documentation(
        self, cancel_token: CancellationToken | None = None
    ) -> tuple[DocumentationDatabase, GenerationReport]:
        """Document every repository and persist the combined database.

        Authentication or listing failures abort the run. Nothing is written
        if the run is cancelled.
        """
        self.require_credential()
        return await self.run_generation(self.reserve(cancel_token))

    async def run_generation(
        self, token: CancellationToken
    ) -> tuple[DocumentationDatabase, GenerationReport]:
        """Run a generation under *token*, previously returned by :meth:`reserve`."""
        if self._active_token is not token:
            raise GenerationInProgressError("This documentation run holds no reservation.")

        try:
            gateway = self._gateway()
            self._session.begin("Generating combined documentation...")
            database, report = await self._run(gateway, token)
        except GenerationCancelledError:
            logger.info("Documentation generation cancelled")
            self._session.finish("Cancelled", completed=False)
            raise
        except RepoIndexerError as exc:
            logger.error("Documentation generation failed: %s", exc)
            self._session.finish(f"Failed: {exc}", completed=False)
            raise
        finally:
            self._release(token)

        self._session.finish("Complete!", completed=True, report=report)
        logger.info(
            "Generated documentation for %d repositories (%d failed)",
            database.repository_count,
            report.failed,
        )
        return database, report

    def cancel(self) -> bool:
        """Request cancellation of the active operation; False if none is active."""
        if self._active_token is None:
            return False
        self._active_token.cancel()
        return True

    # ── Internals ───────────────────────────────────────────────────────

    def _release(self, token: CancellationToken) -> None:
        if self._active_token is token:
            self._active_token = None

    def _gateway(self) -> GitHubGateway:
        return self._gateway_factory(self.require_credential())

    async def _list_repositories(
        self, gateway: GitHubGateway, cancel_token: CancellationToken | None = None
    ) -> list[RepositorySummary]:
        lister = RepositoryLister(
            gateway,
            page_size=self._options.page_size,
            delay=self._options.page_delay,
        )
        repositories = await lister.list_all(cancel_token)
        self._session.set_repositories(repositories)
        return repositories

    async def _run(
        self, gateway: GitHubGateway, cancel_token: CancellationToken
    ) -> tuple[DocumentationDatabase, GenerationReport]:
        opts = self._options
        if not self._session.snapshot().is_authenticated:
            await IdentityResolver(gateway, self._session).resolve(cancel_token)
        repositories = await self._list_repositories(gateway, cancel_token)

        fetcher = ContentFetcher(gateway, cancel_token)
        assembler = DocumentationAssembler(
            fetcher,
            TreeBuilder(
                fetcher,
                delay=opts.entry_delay,
                max_depth=opts.max_tree_depth,
                max_recursion_depth=opts.max_recursion_depth,
            ),
            CodeFileExtractor(fetcher, max_files=opts.max_code_files),
        )
        builder = DatabaseBuilder(
            assembler,
            self._session,
            sinks=self._sinks,
            delay=opts.repository_delay,
            version=opts.schema_version,
        )

        report = GenerationReport()
        database = await builder.build(repositories, report)
        cancel_token.raise_if_cancelled()
        builder.persist(database, report)
        return database, report
