"""Pydantic request / response DTOs for the API boundary."""

from __future__ import annotations

from pydantic import BaseModel, field_validator

from repo_indexer.domain.entities import GenerationReport, RepositorySummary
from repo_indexer.services.session import SessionSnapshot


class CredentialRequest(BaseModel):
    """Request body for ``PUT /credential``."""

    token: str

    @field_validator("token")
    @classmethod
    def _must_not_be_blank(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            msg = "token must not be empty."
            raise ValueError(msg)
        return stripped


class ReportSummary(BaseModel):
    succeeded: int
    failed: int
    failures: dict[str, str]
    written_to: list[str]
    sink_errors: list[str]

    @classmethod
    def from_report(cls, report: GenerationReport) -> ReportSummary:
        return cls(
            succeeded=report.succeeded,
            failed=report.failed,
            failures={o.full_name: o.error or "" for o in report.outcomes if not o.succeeded},
            written_to=report.written_to,
            sink_errors=report.sink_errors,
        )


class StatusResponse(BaseModel):
    """Response from ``GET /status``."""

    has_credential: bool
    is_authenticated: bool
    user: str | None
    repository_count: int
    is_loading: bool
    progress: float
    current_task: str
    completed: bool
    last_report: ReportSummary | None = None

    @classmethod
    def from_snapshot(cls, snap: SessionSnapshot) -> StatusResponse:
        return cls(
            has_credential=snap.has_credential,
            is_authenticated=snap.is_authenticated,
            user=snap.principal.login if snap.principal else None,
            repository_count=len(snap.repositories),
            is_loading=snap.is_loading,
            progress=snap.progress,
            current_task=snap.current_task,
            completed=snap.completed,
            last_report=(
                ReportSummary.from_report(snap.last_report) if snap.last_report else None
            ),
        )


class RepositoryResponse(BaseModel):
    id: int
    name: str
    full_name: str
    description: str | None
    language: str | None
    stars: int
    forks: int
    topics: list[str]
    updated_at: str

    @classmethod
    def from_entity(cls, repo: RepositorySummary) -> RepositoryResponse:
        return cls(
            id=repo.id,
            name=repo.name,
            full_name=repo.full_name,
            description=repo.description,
            language=repo.language,
            stars=repo.stargazers_count,
            forks=repo.forks_count,
            topics=list(repo.topics),
            updated_at=repo.updated_at,
        )


class AcceptedResponse(BaseModel):
    status: str = "accepted"
    message: str


class ErrorResponse(BaseModel):
    """Standard error envelope returned on all failure paths."""

    status: str = "error"
    message: str
