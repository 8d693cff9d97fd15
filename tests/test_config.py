import pytest
from pydantic import ValidationError

from repo_indexer.infrastructure.config import Settings


def test_page_size_defaults_to_github_maximum():
    assert Settings(_env_file=None).page_size == 100


@pytest.mark.parametrize("page_size", [0, 150])
def test_page_size_outside_github_range_is_rejected(page_size):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, page_size=page_size)


def test_page_size_from_environment(monkeypatch):
    monkeypatch.setenv("PAGE_SIZE", "50")
    assert Settings(_env_file=None).page_size == 50
