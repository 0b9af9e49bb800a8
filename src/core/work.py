"""Tracking of fire-and-forget units of work.

A `WorkTracker` is the asyncio counterpart of a wait group: units are
spawned without being awaited, and `wait()` blocks until every unit spawned
so far (and any spawned while waiting) has finished.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Optional

LOGGER = logging.getLogger(__name__)


class WorkTracker:
    """Unbounded set of in-flight tasks with a completion barrier."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task] = set()

    def __len__(self) -> int:
        return len(self._tasks)

    def spawn(self, work: Awaitable[object], name: Optional[str] = None) -> asyncio.Task:
        task = asyncio.ensure_future(work)
        if name:
            task.set_name(name)
        self._tasks.add(task)
        task.add_done_callback(self._finished)
        return task

    def _finished(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            LOGGER.error("Unit of work %s failed", task.get_name(), exc_info=exc)

    async def wait(self) -> None:
        """Wait until no tracked task is left running."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
