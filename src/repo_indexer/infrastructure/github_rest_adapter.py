"""GitHub REST API adapter — implements the GitHubGateway port."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from repo_indexer.domain.entities import ContentEntry, Principal, RepositorySummary
from repo_indexer.domain.exceptions import (
    DecodingFailedError,
    GitHubRateLimitError,
    MissingCredentialError,
    NetworkFailureError,
    ResourceNotFoundError,
)
from repo_indexer.infrastructure.github_schemas import (
    ContentPayload,
    RepositoryPayload,
    UserPayload,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_GITHUB_API = "https://api.github.com"
_API_VERSION = "2022-11-28"

_USER = TypeAdapter(UserPayload)
_REPOSITORY_PAGE = TypeAdapter(list[RepositoryPayload])
# A directory answers with a list, a single file with one object.
_CONTENTS = TypeAdapter(list[ContentPayload] | ContentPayload)


class GitHubRestAdapter:
    """Concrete GitHubGateway backed by the GitHub v3 REST API.

    Every request carries the bearer token and a versioned ``Accept`` header.
    The adapter never retries; callers decide what a failure means.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        token: str | None,
        base_url: str = _GITHUB_API,
    ) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._has_token = bool(token)
        self._api_headers: dict[str, str] = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": _API_VERSION,
            "User-Agent": "repo-indexer/1.0",
        }
        if token:
            self._api_headers["Authorization"] = f"Bearer {token}"

    async def fetch_current_user(self) -> Principal:
        """GET /user → Principal."""
        payload = await self.get_json("/user", _USER)
        return payload.to_entity()

    async def fetch_repository_page(
        self, page: int, per_page: int
    ) -> list[RepositorySummary]:
        """GET /user/repos?page=N&per_page=M → [RepositorySummary]."""
        payload = await self.get_json(
            "/user/repos",
            _REPOSITORY_PAGE,
            params={"page": str(page), "per_page": str(per_page), "sort": "updated"},
        )
        return [item.to_entity() for item in payload]

    async def list_contents(
        self, owner: str, repo: str, path: str = ""
    ) -> list[ContentEntry]:
        """GET /repos/{owner}/{repo}/contents/{path} → [ContentEntry]."""
        endpoint = f"/repos/{owner}/{repo}/contents"
        encoded = quote(path.strip("/"), safe="/")
        if encoded:
            endpoint = f"{endpoint}/{encoded}"
        payload = await self.get_json(endpoint, _CONTENTS)
        if isinstance(payload, ContentPayload):
            return [payload.to_entity()]
        return [item.to_entity() for item in payload]

    async def get_json(
        self,
        endpoint: str,
        shape: TypeAdapter[T],
        params: dict[str, str] | None = None,
    ) -> T:
        """GET *endpoint* and validate the JSON body against *shape*."""
        resp = await self._api_get(endpoint, params=params)
        try:
            data: Any = resp.json()
        except ValueError as exc:
            raise DecodingFailedError(
                f"GitHub returned a non-JSON body for {endpoint}"
            ) from exc
        try:
            return shape.validate_python(data)
        except ValidationError as exc:
            raise DecodingFailedError(
                f"Unexpected payload shape for {endpoint}: {exc.error_count()} error(s)"
            ) from exc

    async def _api_get(
        self,
        endpoint: str,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Perform a GitHub API GET request with error translation."""
        if not self._has_token:
            raise MissingCredentialError("No GitHub token configured.")

        url = f"{self._base_url}{endpoint}"
        logger.debug("GET %s params=%s", url, params)
        try:
            resp = await self._client.get(
                url, headers=self._api_headers, params=params
            )
        except httpx.HTTPError as exc:
            raise NetworkFailureError(
                f"Network error fetching {url}: {exc}"
            ) from exc

        if resp.is_success:
            return resp

        if resp.status_code == 404:
            raise ResourceNotFoundError(
                f"GitHub resource not found: {endpoint}", status_code=404
            )

        if resp.status_code == 403:
            remaining = resp.headers.get("x-ratelimit-remaining", "")
            if remaining == "0":
                reset_raw = resp.headers.get("x-ratelimit-reset", "")
                try:
                    reset_str = datetime.fromtimestamp(int(reset_raw), tz=timezone.utc).strftime(
                        "%Y-%m-%d %H:%M:%S UTC"
                    )
                except (ValueError, OSError):
                    reset_str = reset_raw or "unknown"
                raise GitHubRateLimitError(
                    f"GitHub API rate limit exceeded. Resets at {reset_str}.",
                    status_code=403,
                )

        if resp.status_code == 429:
            raise GitHubRateLimitError(
                "GitHub API rate limit exceeded (HTTP 429).", status_code=429
            )

        raise NetworkFailureError(
            f"GitHub API returned HTTP {resp.status_code} for {url}",
            status_code=resp.status_code,
        )
