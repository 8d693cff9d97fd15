"""Cooperative cancellation for a documentation run."""

from __future__ import annotations

from repo_indexer.domain.exceptions import GenerationCancelledError


class CancellationToken:
    """Flag checked before every network call of a run."""

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise GenerationCancelledError("Documentation generation was cancelled.")
