"""Lifecycle shared by the pipeline stages that own background tasks."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

import aiohttp

from ..exceptions import PipelineError

logger = logging.getLogger(__name__)

# Failures that drop a single item and never stop a stage loop.
ITEM_FAILURE_ERRORS = (
    PipelineError,
    aiohttp.ClientError,
    asyncio.TimeoutError,
    ValueError,
    KeyError,
    TypeError,
)


class Stage:
    """Owns the stage's background tasks and its one-shot stop signal."""

    name = "stage"

    def __init__(self) -> None:
        self._stop_event = asyncio.Event()
        self._tasks: List[asyncio.Task] = []

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    @property
    def running(self) -> bool:
        return any(not task.done() for task in self._tasks)

    def _spawn(self, coro, suffix: str) -> asyncio.Task:
        task = asyncio.create_task(coro, name=f"{self.name}-{suffix}")
        self._tasks.append(task)
        return task

    def stop(self) -> None:
        """Trigger cancellation. Further calls are no-ops."""
        if self._stop_event.is_set():
            return
        self._stop_event.set()
        logger.info("[%s] Stop requested", self.name)

    async def wait_closed(self, timeout: Optional[float] = None) -> None:
        """Wait for every stage task to finish and re-raise the first failure."""
        if not self._tasks:
            return
        await asyncio.wait_for(asyncio.gather(*self._tasks), timeout=timeout)


__all__ = ["ITEM_FAILURE_ERRORS", "Stage"]
