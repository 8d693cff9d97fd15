"""Database builder — run every repository, aggregate, serialize, persist."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

from repo_indexer.domain.entities import (
    DocumentationDatabase,
    FileTreeNode,
    GenerationReport,
    RepositoryDocumentationRecord,
    RepositoryOutcome,
    RepositorySummary,
    SourceFile,
)
from repo_indexer.domain.exceptions import GitHubApiError, PersistenceError
from repo_indexer.domain.ports.documentation_sink import DocumentationSink
from repo_indexer.services.documentation_assembler import DocumentationAssembler
from repo_indexer.services.pacing import DelayStrategy, NoDelay
from repo_indexer.services.session import IndexerSession

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "1.0.0"
UNKNOWN_USER = "unknown"


class DatabaseBuilder:
    """Drive the assembler over every repository, in listing order.

    A repository that fails is logged, reported and left out; the run goes
    on. Cancellation and programming errors are not caught here.
    """

    def __init__(
        self,
        assembler: DocumentationAssembler,
        session: IndexerSession,
        sinks: Sequence[DocumentationSink] = (),
        delay: DelayStrategy | None = None,
        version: str = SCHEMA_VERSION,
    ) -> None:
        self._assembler = assembler
        self._session = session
        self._sinks = list(sinks)
        self._delay = delay or NoDelay()
        self._version = version

    async def build(
        self, repositories: Sequence[RepositorySummary], report: GenerationReport
    ) -> DocumentationDatabase:
        records: list[RepositoryDocumentationRecord] = []
        total = len(repositories)
        self._session.set_progress(0.0)

        for index, repo in enumerate(repositories):
            self._session.describe(f"Generating documentation for {repo.name}...")
            try:
                record, repo_report = await self._assembler.assemble(repo)
            except GitHubApiError as exc:
                logger.warning("Failed to generate docs for %s: %s", repo.full_name, exc)
                report.outcomes.append(
                    RepositoryOutcome(full_name=repo.full_name, succeeded=False, error=str(exc))
                )
            else:
                records.append(record)
                report.outcomes.append(
                    RepositoryOutcome(
                        full_name=repo.full_name,
                        succeeded=True,
                        skipped_files=tuple(repo_report.skipped_files),
                        skipped_directories=tuple(repo_report.skipped_directories),
                    )
                )

            self._session.set_progress((index + 1) / total)
            if index + 1 < total:
                await self._delay.pause()

        principal = self._session.snapshot().principal
        return DocumentationDatabase.create(
            version=self._version,
            generated_at=datetime.now(timezone.utc).isoformat(timespec="seconds").replace(
                "+00:00", "Z"
            ),
            user=principal.login if principal else UNKNOWN_USER,
            repositories=records,
        )

    def persist(self, database: DocumentationDatabase, report: GenerationReport) -> bytes:
        """Serialize once and hand the bytes to every sink independently."""
        payload = serialize_database(database)
        for sink in self._sinks:
            try:
                written = sink.write(payload)
            except PersistenceError as exc:
                logger.error("Sink %s failed: %s", sink.name, exc)
                report.sink_errors.append(f"{sink.name}: {exc}")
            else:
                report.written_to.append(written)
        return payload


# ── Serialization ───────────────────────────────────────────────────────────


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


def _node_to_dict(node: FileTreeNode) -> dict[str, Any]:
    return _compact(
        {
            "name": node.name,
            "path": node.path,
            "type": node.type,
            "size": node.size,
            "children": (
                [_node_to_dict(child) for child in node.children]
                if node.children is not None
                else None
            ),
        }
    )


def _source_to_dict(source: SourceFile) -> dict[str, Any]:
    return {
        "path": source.path,
        "name": source.name,
        "language": source.language,
        "content": source.content,
        "size": source.size,
    }


def _record_to_dict(record: RepositoryDocumentationRecord) -> dict[str, Any]:
    return _compact(
        {
            "id": record.id,
            "name": record.name,
            "fullName": record.full_name,
            "description": record.description,
            "url": record.url,
            "owner": record.owner,
            "language": record.language,
            "stars": record.stars,
            "forks": record.forks,
            "readme": record.readme,
            "structure": [_node_to_dict(node) for node in record.structure],
            "codeFiles": [_source_to_dict(source) for source in record.code_files],
            "topics": list(record.topics),
            "createdAt": record.created_at,
            "updatedAt": record.updated_at,
        }
    )


def database_to_dict(database: DocumentationDatabase) -> dict[str, Any]:
    return {
        "version": database.version,
        "generatedAt": database.generated_at,
        "user": database.user,
        "repositoryCount": database.repository_count,
        "repositories": [_record_to_dict(r) for r in database.repositories],
    }


def serialize_database(database: DocumentationDatabase) -> bytes:
    """Pretty-printed JSON with sorted keys; identical input gives identical bytes."""
    text = json.dumps(database_to_dict(database), sort_keys=True, indent=2, ensure_ascii=False)
    return text.encode("utf-8")


def _node_from_dict(data: dict[str, Any]) -> FileTreeNode:
    children = data.get("children")
    return FileTreeNode(
        name=data["name"],
        path=data["path"],
        type=data["type"],
        size=data.get("size"),
        children=tuple(_node_from_dict(c) for c in children) if children is not None else None,
    )


def _record_from_dict(data: dict[str, Any]) -> RepositoryDocumentationRecord:
    return RepositoryDocumentationRecord(
        id=data["id"],
        name=data["name"],
        full_name=data["fullName"],
        description=data["description"],
        url=data["url"],
        owner=data["owner"],
        language=data.get("language"),
        stars=data["stars"],
        forks=data["forks"],
        readme=data.get("readme"),
        structure=tuple(_node_from_dict(n) for n in data.get("structure", [])),
        code_files=tuple(SourceFile(**f) for f in data.get("codeFiles", [])),
        topics=tuple(data.get("topics", [])),
        created_at=data["createdAt"],
        updated_at=data["updatedAt"],
    )


def parse_database(payload: bytes | str) -> DocumentationDatabase:
    """Inverse of :func:`serialize_database`."""
    data = json.loads(payload)
    return DocumentationDatabase(
        version=data["version"],
        generated_at=data["generatedAt"],
        user=data["user"],
        repository_count=data["repositoryCount"],
        repositories=tuple(_record_from_dict(r) for r in data["repositories"]),
    )
