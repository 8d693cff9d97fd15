"""User/identity resolver — confirms the token and records who owns it."""

from __future__ import annotations

import logging

from repo_indexer.domain.entities import Principal
from repo_indexer.domain.exceptions import AuthenticationFailedError, GitHubApiError
from repo_indexer.domain.ports.github_gateway import GitHubGateway
from repo_indexer.services.cancellation import CancellationToken
from repo_indexer.services.session import IndexerSession

logger = logging.getLogger(__name__)


class IdentityResolver:
    """Resolve the principal behind the session's credential.

    Every failure of ``GET /user`` is reported as
    :class:`AuthenticationFailedError`; a bad token, a 403 and a 5xx are not
    told apart, but the observed status code travels on the exception.
    """

    def __init__(self, gateway: GitHubGateway, session: IndexerSession) -> None:
        self._gateway = gateway
        self._session = session

    async def resolve(self, cancel_token: CancellationToken | None = None) -> Principal:
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        try:
            principal = await self._gateway.fetch_current_user()
        except AuthenticationFailedError:
            self._session.mark_unauthenticated()
            raise
        except GitHubApiError as exc:
            self._session.mark_unauthenticated()
            logger.warning("Authentication failed: %s", exc)
            raise AuthenticationFailedError(
                "GitHub authentication failed.", status_code=exc.status_code
            ) from exc

        self._session.mark_authenticated(principal)
        logger.info("Authenticated as %s", principal.login)
        return principal
