"""Session state shared by the pipeline and whoever is watching it.

The session is the single writer of credential, identity and progress
state. Readers get immutable :class:`SessionSnapshot` values, either on
demand or pushed to subscribed callbacks after every change.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable

from repo_indexer.domain.entities import GenerationReport, Principal, RepositorySummary

logger = logging.getLogger(__name__)

Listener = Callable[["SessionSnapshot"], None]


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """Read-only view of the session at one point in time."""

    has_credential: bool = False
    is_authenticated: bool = False
    principal: Principal | None = None
    repositories: tuple[RepositorySummary, ...] = ()
    is_loading: bool = False
    progress: float = 0.0
    current_task: str = ""
    completed: bool = False
    last_report: GenerationReport | None = None


class IndexerSession:
    """Holds the credential and everything derived from it."""

    def __init__(self, token: str | None = None) -> None:
        self._token = token or None
        self._state = SessionSnapshot(has_credential=self._token is not None)
        self._listeners: list[Listener] = []

    @property
    def token(self) -> str | None:
        return self._token

    def snapshot(self) -> SessionSnapshot:
        return self._state

    def set_credential(self, token: str | None) -> None:
        """Replace the credential; identity and repositories are forgotten."""
        self._token = token or None
        self._update(
            has_credential=self._token is not None,
            is_authenticated=False,
            principal=None,
            repositories=(),
            completed=False,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* after every change; returns an unsubscribe handle."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ── Writers used by the services ────────────────────────────────────

    def mark_authenticated(self, principal: Principal) -> None:
        self._update(is_authenticated=True, principal=principal)

    def mark_unauthenticated(self) -> None:
        self._update(is_authenticated=False, principal=None, repositories=())

    def set_repositories(self, repositories: list[RepositorySummary]) -> None:
        self._update(repositories=tuple(repositories))

    def begin(self, task: str) -> None:
        self._update(is_loading=True, current_task=task, completed=False)

    def describe(self, task: str) -> None:
        self._update(current_task=task)

    def set_progress(self, fraction: float) -> None:
        self._update(progress=min(max(fraction, 0.0), 1.0))

    def finish(self, task: str, *, completed: bool, report: GenerationReport | None = None) -> None:
        changes: dict[str, object] = {
            "is_loading": False,
            "current_task": task,
            "completed": completed,
        }
        if completed:
            changes["progress"] = 1.0
        if report is not None:
            changes["last_report"] = report
        self._update(**changes)

    def _update(self, **changes: object) -> None:
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logger.exception("Session listener %r failed", listener)
