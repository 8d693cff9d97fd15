import logging

from repo_indexer import main as entry
from repo_indexer.infrastructure.config import Settings


def test_main_serves_app_factory_with_settings(monkeypatch, tmp_path, caplog):
    settings = Settings(
        _env_file=None,
        github_token=None,
        host="0.0.0.0",
        port=9000,
        data_dir=tmp_path,
        project_output_dir=None,
    )
    runs = []
    monkeypatch.setattr(entry, "get_settings", lambda: settings)
    monkeypatch.setattr(entry.uvicorn, "run", lambda app, **kwargs: runs.append((app, kwargs)))

    with caplog.at_level(logging.INFO, logger="repo_indexer.main"):
        entry.main()

    app, kwargs = runs[0]
    assert app == "repo_indexer.interface.app:create_app"
    assert kwargs["factory"] is True
    assert (kwargs["host"], kwargs["port"]) == ("0.0.0.0", 9000)
    assert "GITHUB_TOKEN is not set" in caplog.text
    assert str(tmp_path / settings.output_filename) in caplog.text


def test_configure_logging_quiets_httpx():
    entry.configure_logging(Settings(_env_file=None))
    assert logging.getLogger("httpx").level == logging.WARNING
