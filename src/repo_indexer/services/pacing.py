"""Delay strategies used to pace requests against the GitHub API.

The pipeline pauses a fixed amount after each unit of work (a repository
page, a tree entry, a repository). Tests pass :class:`NoDelay`.
"""

from __future__ import annotations

import asyncio
from typing import Protocol


class DelayStrategy(Protocol):
    async def pause(self) -> None: ...


class FixedDelay:
    """Sleep for the same number of seconds every time."""

    def __init__(self, seconds: float) -> None:
        self.seconds = seconds

    async def pause(self) -> None:
        if self.seconds > 0:
            await asyncio.sleep(self.seconds)

    def __repr__(self) -> str:
        return f"FixedDelay({self.seconds})"


class NoDelay:
    """Never sleep."""

    async def pause(self) -> None:
        return None
