"""Filesystem sinks for the serialized documentation database."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from repo_indexer.domain.exceptions import PersistenceError
from repo_indexer.infrastructure.config import Settings

logger = logging.getLogger(__name__)


class AtomicFileSink:
    """Write the payload to a fixed path via a temp file and ``os.replace``.

    Readers of *path* see either the previous document or the new one, never
    a half-written file.
    """

    def __init__(self, name: str, path: Path) -> None:
        self.name = name
        self.path = path

    def write(self, payload: bytes) -> str:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "wb") as fh:
                    fh.write(payload)
                    fh.flush()
                    os.fsync(fh.fileno())
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise PersistenceError(f"Could not write {self.path}: {exc}") from exc

        logger.info("Saved documentation database to %s", self.path)
        return str(self.path)


def default_sinks(settings: Settings) -> list[AtomicFileSink]:
    """Application-data location first, then the project-relative copy."""
    sinks = [
        AtomicFileSink("data_dir", settings.data_dir / settings.output_filename),
    ]
    if settings.project_output_dir is not None:
        sinks.append(
            AtomicFileSink(
                "project", settings.project_output_dir / settings.output_filename
            )
        )
    return sinks
