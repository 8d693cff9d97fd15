"""Application configuration — loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    github_token: SecretStr | None = None
    github_api_base: str = "https://api.github.com"
    request_timeout: float = 30.0

    # Rate limiting: fixed pauses between units of work
    page_size: int = Field(100, ge=1, le=100)  # GitHub caps per_page at 100
    page_delay_seconds: float = 0.1
    entry_delay_seconds: float = 0.05
    repository_delay_seconds: float = 0.5

    # Traversal bounds
    max_tree_depth: int = 5
    max_recursion_depth: int = 3
    max_code_files: int = 50

    # Output
    schema_version: str = "1.0.0"
    output_filename: str = "github_repos_combined.json"
    data_dir: Path = Path.home() / ".local" / "share" / "repo-indexer"
    project_output_dir: Path | None = Path("data")

    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton application settings (cached after first call)."""
    return Settings()
