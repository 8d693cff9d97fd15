"""Content fetcher — directory listings and decoded file bodies."""

from __future__ import annotations

import base64
import binascii
import re

from repo_indexer.domain.entities import ContentEntry
from repo_indexer.domain.exceptions import DecodingFailedError, RepositoryFileNotFoundError
from repo_indexer.domain.ports.github_gateway import GitHubGateway
from repo_indexer.services.cancellation import CancellationToken

# Literal backslash-n pairs left over from double-escaped payloads, and real
# whitespace GitHub inserts every 60 characters.
_BASE64_NOISE = re.compile(r"\\n|\s")


def decode_base64_content(encoded: str) -> str:
    """Decode a contents-API base64 body into UTF-8 text."""
    cleaned = _BASE64_NOISE.sub("", encoded)
    try:
        raw = base64.b64decode(cleaned, validate=True)
    except binascii.Error as exc:
        raise DecodingFailedError(f"Invalid base64 content: {exc}") from exc
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodingFailedError(f"Content is not valid UTF-8: {exc}") from exc


class ContentFetcher:
    """Thin layer over the gateway's contents resource.

    Checks for cancellation before every request so a run can stop at any
    point without touching the network again.
    """

    def __init__(
        self,
        gateway: GitHubGateway,
        cancel_token: CancellationToken | None = None,
    ) -> None:
        self._gateway = gateway
        self._cancel_token = cancel_token or CancellationToken()

    async def list_contents(self, owner: str, repo: str, path: str = "") -> list[ContentEntry]:
        self._cancel_token.raise_if_cancelled()
        return await self._gateway.list_contents(owner, repo, path)

    async def fetch_file_content(self, owner: str, repo: str, path: str) -> str:
        entries = await self.list_contents(owner, repo, path)
        entry = entries[0] if entries else None
        if entry is None or not entry.is_file or entry.content is None:
            raise RepositoryFileNotFoundError(f"No file content at {owner}/{repo}/{path}")
        return decode_base64_content(entry.content)
