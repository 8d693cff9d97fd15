import pytest

from fakes import FakeGitHub
from repo_indexer.domain.exceptions import AuthenticationFailedError, NetworkFailureError
from repo_indexer.services.identity import IdentityResolver


async def test_resolve_marks_session_authenticated(github, session):
    principal = await IdentityResolver(github, session).resolve()

    snap = session.snapshot()
    assert principal.login == "octocat"
    assert snap.is_authenticated
    assert snap.principal == principal


@pytest.mark.parametrize("status", [401, 403, 500])
async def test_any_failure_status_is_authentication_failed(session, status):
    github = FakeGitHub()
    github.user_status = status

    with pytest.raises(AuthenticationFailedError) as exc_info:
        await IdentityResolver(github, session).resolve()

    assert exc_info.value.status_code == status
    assert not session.snapshot().is_authenticated


async def test_network_failure_becomes_authentication_failed(session):
    class Down(FakeGitHub):
        async def fetch_current_user(self):
            raise NetworkFailureError("connection reset")

    with pytest.raises(AuthenticationFailedError):
        await IdentityResolver(Down(), session).resolve()
    assert session.snapshot().principal is None
