"""Pydantic models for the GitHub REST payloads the indexer consumes.

Only the fields we use are declared; GitHub sends many more and they are
ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from repo_indexer.domain.entities import ContentEntry, Principal, RepositorySummary


class _GitHubModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class UserPayload(_GitHubModel):
    login: str
    id: int
    avatar_url: str = ""
    name: str | None = None
    email: str | None = None
    bio: str | None = None
    public_repos: int = 0
    followers: int = 0
    following: int = 0

    def to_entity(self) -> Principal:
        return Principal(**self.model_dump())


class OwnerPayload(_GitHubModel):
    login: str
    id: int


class RepositoryPayload(_GitHubModel):
    id: int
    name: str
    full_name: str
    description: str | None = None
    html_url: str
    language: str | None = None
    stargazers_count: int = 0
    forks_count: int = 0
    topics: list[str] | None = None
    created_at: str
    updated_at: str
    owner: OwnerPayload

    def to_entity(self) -> RepositorySummary:
        return RepositorySummary(
            id=self.id,
            name=self.name,
            full_name=self.full_name,
            description=self.description,
            html_url=self.html_url,
            language=self.language,
            stargazers_count=self.stargazers_count,
            forks_count=self.forks_count,
            topics=tuple(self.topics or ()),
            owner_login=self.owner.login,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class ContentPayload(_GitHubModel):
    name: str
    path: str
    type: str
    size: int | None = None
    content: str | None = None

    def to_entity(self) -> ContentEntry:
        return ContentEntry(
            name=self.name,
            path=self.path,
            type=self.type,
            size=self.size,
            content=self.content,
        )
