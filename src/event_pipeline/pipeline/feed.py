"""
Discovery poller for the upstream feed.

Periodically lists the ids the feed knows about, keeps only those above the
discovery cursor and emits each one downstream exactly once. The cursor lives
on the instance and is only touched by the poller's own task.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List

from ..channel import Channel
from .protocols import INewItemChecker
from .stage import ITEM_FAILURE_ERRORS, Stage

logger = logging.getLogger(__name__)


class Feed(Stage):
    """Polls an ``INewItemChecker`` and publishes new ids on ``new_items``."""

    name = "Feed"

    def __init__(
        self,
        checker: INewItemChecker,
        poll_interval_seconds: float,
        *,
        start_cursor: int = 0,
        channel_capacity: int = 1,
    ) -> None:
        """
        Initialize the poller.

        Args:
            checker: Source of the full list of known item ids
            poll_interval_seconds: Delay between polls (the first poll is immediate)
            start_cursor: Highest id treated as already seen
            channel_capacity: Buffer size of the ``new_items`` channel
        """
        if poll_interval_seconds <= 0:
            raise ValueError(f"poll_interval_seconds must be positive (got {poll_interval_seconds})")
        super().__init__()
        self._checker = checker
        self.poll_interval_seconds = poll_interval_seconds
        self._cursor = start_cursor
        self._new_items: Channel[int] = Channel(channel_capacity)

    @property
    def cursor(self) -> int:
        """Highest item id discovered so far."""
        return self._cursor

    @property
    def new_items(self) -> Channel[int]:
        return self._new_items

    def start(self) -> "Feed":
        if self._tasks:
            logger.warning("[%s] Already started", self.name)
            return self
        self._spawn(self._process(), "poll")
        logger.info("[%s] Polling every %.3fs from cursor %d", self.name, self.poll_interval_seconds, self._cursor)
        return self

    def filter_new_items(self, items: Iterable[int]) -> List[int]:
        """Return the unseen ids in ascending order and advance the cursor past them."""
        new_items = sorted({item for item in items if item > self._cursor})
        if new_items:
            self._cursor = max(self._cursor, new_items[-1])
        return new_items

    async def check_for_new_items(self) -> List[int]:
        """Run one poll. A failed poll logs, returns no ids and leaves the cursor untouched."""
        try:
            items = await self._checker.list_item_ids()
        except ITEM_FAILURE_ERRORS as exc:
            logger.warning("[%s] Failed to check for new item ids: %s", self.name, exc)
            return []

        new_items = self.filter_new_items(items)
        if new_items:
            logger.debug("[%s] Discovered %d new ids, cursor now %d", self.name, len(new_items), self._cursor)
        return new_items

    async def _wait_for_next_poll(self, delay: float) -> bool:
        """Sleep for ``delay`` seconds; return True if a stop arrived instead."""
        if delay <= 0:
            return self._stop_event.is_set()
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return False
        return True

    async def _process(self) -> None:
        delay = 0.0
        try:
            while not await self._wait_for_next_poll(delay):
                delay = self.poll_interval_seconds
                for item in await self.check_for_new_items():
                    if not await self._new_items.send(item, self._stop_event):
                        return
        finally:
            self._new_items.close()
            logger.info("[%s] Stopped at cursor %d", self.name, self._cursor)


__all__ = ["Feed"]
