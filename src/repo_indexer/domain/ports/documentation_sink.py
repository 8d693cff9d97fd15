"""Port: documentation sink — a destination for the serialized database."""

from __future__ import annotations

from typing import Protocol


class DocumentationSink(Protocol):
    """Somewhere the serialized documentation database can be written."""

    name: str

    def write(self, payload: bytes) -> str:
        """Persist *payload* and return a description of where it went."""
        ...
