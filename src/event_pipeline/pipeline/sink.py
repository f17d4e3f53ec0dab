"""Delivery sink: writes normalized events to the store one at a time."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..channel import Channel
from ..data_models.normalized import NormalizedEvent
from .protocols import IEventWriter
from .stage import ITEM_FAILURE_ERRORS

logger = logging.getLogger(__name__)


@dataclass
class SinkStats:
    """Counts of events handled by one ``process_all`` run."""

    delivered: int = 0
    failed: int = 0


class EventSink:
    def __init__(self, events: Channel[NormalizedEvent], event_store: IEventWriter) -> None:
        self._events = events
        self._event_store = event_store
        self.stats = SinkStats()

    async def process_all(self) -> SinkStats:
        """Consume events until the input channel is closed and drained.

        A failed write is logged and the event discarded; it is never retried.
        """
        async for event in self._events:
            try:
                await self._event_store.create(event)
            except ITEM_FAILURE_ERRORS as exc:
                self.stats.failed += 1
                logger.warning("[EventSink] Failed to store event %s: %s", event.id, exc)
                continue
            self.stats.delivered += 1

        logger.info(
            "[EventSink] Input exhausted (delivered=%d, failed=%d)", self.stats.delivered, self.stats.failed
        )
        return self.stats


__all__ = ["EventSink", "SinkStats"]
