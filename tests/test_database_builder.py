import json

import pytest

from fakes import FakeGitHub, MemorySink, make_repo
from repo_indexer.domain.entities import DocumentationDatabase, GenerationReport, Principal
from repo_indexer.services.code_extractor import CodeFileExtractor
from repo_indexer.services.content_fetcher import ContentFetcher
from repo_indexer.services.database_builder import (
    DatabaseBuilder,
    parse_database,
    serialize_database,
)
from repo_indexer.services.documentation_assembler import DocumentationAssembler
from repo_indexer.services.tree_builder import TreeBuilder


def make_builder(github, session, sinks=()):
    fetcher = ContentFetcher(github)
    assembler = DocumentationAssembler(
        fetcher, TreeBuilder(fetcher), CodeFileExtractor(fetcher)
    )
    return DatabaseBuilder(assembler, session, sinks=sinks)


@pytest.fixture
def three_repos():
    repos = [make_repo(1, "alpha"), make_repo(2, "beta"), make_repo(3, "gamma")]
    github = FakeGitHub(repositories=repos)
    for repo in repos:
        github.add_files(repo.full_name, {"README.md": f"# {repo.name}", "main.py": "pass"})
    return github, repos


@pytest.fixture
def authed_session(session):
    session.mark_authenticated(Principal(login="octocat", id=1))
    return session


async def test_record_contents(github, authed_session):
    report = GenerationReport()
    db = await make_builder(github, authed_session).build(github.repositories, report)

    record = db.repositories[0]
    assert record.id == "octocat-hello"
    assert record.readme == "# Hello\n"
    assert [f.path for f in record.code_files] == ["main.py", "src/lib.rs", "src/util/helpers.go"]
    assert record.topics == ("demo",)
    assert db.user == "octocat"
    assert db.generated_at.endswith("Z")


async def test_failing_repository_is_skipped(three_repos, authed_session):
    github, repos = three_repos
    github.failing_repos.add("octocat/beta")
    report = GenerationReport()

    db = await make_builder(github, authed_session).build(repos, report)

    assert [r.name for r in db.repositories] == ["alpha", "gamma"]
    assert db.repository_count == len(db.repositories) == 2
    assert report.failed == 1
    assert report.outcomes[1].full_name == "octocat/beta"
    assert authed_session.snapshot().progress == 1.0


async def test_missing_readme_is_tolerated(github, authed_session):
    del github.files["octocat/hello"]["README.md"]
    db = await make_builder(github, authed_session).build(github.repositories, GenerationReport())

    assert db.repositories[0].readme is None


async def test_progress_reported_per_repository(three_repos, authed_session):
    github, repos = three_repos
    seen = []
    authed_session.subscribe(lambda snap: seen.append(snap.progress))

    await make_builder(github, authed_session).build(repos, GenerationReport())

    assert sorted({p for p in seen if p > 0}) == pytest.approx([1 / 3, 2 / 3, 1.0])


async def test_failed_repository_still_advances_progress(three_repos, authed_session):
    github, repos = three_repos
    github.failing_repos.add("octocat/alpha")
    seen = []
    authed_session.subscribe(lambda snap: seen.append(snap.progress))

    await make_builder(github, authed_session).build(repos, GenerationReport())

    assert [p for p in seen if p > 0][0] == pytest.approx(1 / 3)


async def test_unauthenticated_user_is_unknown(github, session):
    db = await make_builder(github, session).build(github.repositories, GenerationReport())
    assert db.user == "unknown"


async def test_round_trip_preserves_records(three_repos, authed_session):
    github, repos = three_repos
    db = await make_builder(github, authed_session).build(repos, GenerationReport())

    parsed = parse_database(serialize_database(db))

    assert parsed.repository_count == db.repository_count
    assert [r.id for r in parsed.repositories] == [r.id for r in db.repositories]
    assert parsed == db


async def test_serialization_is_sorted_and_omits_missing_values(github, authed_session):
    del github.files["octocat/hello"]["README.md"]
    db = await make_builder(github, authed_session).build(github.repositories, GenerationReport())

    payload = serialize_database(db)
    data = json.loads(payload)

    assert list(data) == sorted(data)
    assert set(data) == {"generatedAt", "repositories", "repositoryCount", "user", "version"}
    record = data["repositories"][0]
    assert "readme" not in record
    assert record["fullName"] == "octocat/hello"
    assert "children" not in record["structure"][0]
    assert payload == serialize_database(db)
    assert payload.startswith(b"{\n  ")


async def test_one_failing_sink_does_not_block_the_other(github, authed_session):
    broken, good = MemorySink("broken", fail=True), MemorySink("good")
    builder = make_builder(github, authed_session, sinks=[broken, good])
    report = GenerationReport()
    db = await builder.build(github.repositories, report)

    payload = builder.persist(db, report)

    assert good.payloads == [payload]
    assert report.written_to == ["memory://good"]
    assert report.sink_errors == ["broken: broken is read-only"]
    assert db.repository_count == 1


def test_count_mismatch_rejected():
    with pytest.raises(ValueError):
        DocumentationDatabase(
            version="1.0.0", generated_at="now", user="u", repository_count=2, repositories=()
        )
