"""``repo-indexer`` entry point: serve the indexer API under uvicorn."""

from __future__ import annotations

import logging

import uvicorn

from repo_indexer.infrastructure.config import Settings, get_settings
from repo_indexer.infrastructure.file_sink import default_sinks

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)
    # httpx logs every request at INFO; one repository can take hundreds.
    logging.getLogger("httpx").setLevel(logging.WARNING)


def main() -> None:
    settings = get_settings()
    configure_logging(settings)

    if settings.github_token is None:
        logger.warning("GITHUB_TOKEN is not set; PUT /credential before generating")
    for sink in default_sinks(settings):
        logger.info("Documentation database target (%s): %s", sink.name, sink.path)

    uvicorn.run(
        "repo_indexer.interface.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
