from __future__ import annotations

import pytest

from fakes import FakeGitHub, make_repo
from repo_indexer.services.content_fetcher import ContentFetcher
from repo_indexer.services.session import IndexerSession


@pytest.fixture
def github() -> FakeGitHub:
    fake = FakeGitHub(repositories=[make_repo(1, "hello")])
    fake.add_files(
        "octocat/hello",
        {
            "README.md": "# Hello\n",
            "main.py": "print('hi')\n",
            "src/lib.rs": "fn main() {}\n",
            "src/util/helpers.go": "package util\n",
            "docs/guide.md": "guide\n",
        },
    )
    return fake


@pytest.fixture
def fetcher(github: FakeGitHub) -> ContentFetcher:
    return ContentFetcher(github)


@pytest.fixture
def session() -> IndexerSession:
    return IndexerSession("ghp_test")
