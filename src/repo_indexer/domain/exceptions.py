"""Domain exception hierarchy.

Inner layers raise these; the generation loops decide which ones are
recoverable and the interface layer translates the rest to HTTP responses.
"""

from __future__ import annotations


class RepoIndexerError(Exception):
    """Base exception for the entire application."""


# ── Session state ───────────────────────────────────────────────────────────


class MissingCredentialError(RepoIndexerError):
    """No GitHub token is configured; nothing may be requested."""


class GenerationInProgressError(RepoIndexerError):
    """A documentation run is already active for this session."""


class GenerationCancelledError(RepoIndexerError):
    """The active documentation run was cancelled before completion."""


# ── GitHub API errors ───────────────────────────────────────────────────────


class GitHubApiError(RepoIndexerError):
    """Anything that went wrong talking to GitHub or reading its payloads."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthenticationFailedError(GitHubApiError):
    """The identity check did not succeed (any non-200 from ``/user``)."""


class NetworkFailureError(GitHubApiError):
    """A request failed at the transport level or returned a non-2xx status."""


class ResourceNotFoundError(NetworkFailureError):
    """The requested resource does not exist (404)."""


class GitHubRateLimitError(NetworkFailureError):
    """GitHub API rate limit exceeded (429 / 403 with rate-limit header)."""


class DecodingFailedError(GitHubApiError):
    """A payload or file body could not be decoded."""


class RepositoryFileNotFoundError(GitHubApiError):
    """The path did not resolve to a file with inline content."""


# ── Persistence ─────────────────────────────────────────────────────────────


class PersistenceError(RepoIndexerError):
    """Writing the documentation database to a destination failed."""
