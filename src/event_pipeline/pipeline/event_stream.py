"""
Fetch-transform stage.

Two tasks joined by an internal buffer:

- fetch: reads ids from the feed and fetches each source event
- transform: fetches every market of an event, decodes the odds and emits a
  normalized event

Failures drop the affected id or event and never stop either task. Closing
the input ends the fetch task, which closes the buffer, which ends the
transform task, which closes ``events``.
"""

from __future__ import annotations

import logging
from typing import List

from ..channel import Channel
from ..data_models.normalized import NormalizedEvent, NormalizedMarket
from ..data_models.source import SourceEvent
from .protocols import IEventSourcer, IMarketSourcer
from .stage import ITEM_FAILURE_ERRORS, Stage
from .transform import build_event, convert_market

logger = logging.getLogger(__name__)


class EventStream(Stage):
    name = "EventStream"

    def __init__(
        self,
        new_ids: Channel[int],
        event_source: IEventSourcer,
        market_source: IMarketSourcer,
        *,
        buffer_capacity: int = 1,
        channel_capacity: int = 1,
    ) -> None:
        super().__init__()
        self._new_ids = new_ids
        self._event_source = event_source
        self._market_source = market_source
        self._source_events: Channel[SourceEvent] = Channel(buffer_capacity)
        self._events: Channel[NormalizedEvent] = Channel(channel_capacity)

    @property
    def events(self) -> Channel[NormalizedEvent]:
        return self._events

    def start(self) -> "EventStream":
        if self._tasks:
            logger.warning("[%s] Already started", self.name)
            return self
        self._spawn(self._fetch_events(), "fetch")
        self._spawn(self._transform_events(), "transform")
        return self

    async def convert_event(self, event: SourceEvent) -> NormalizedEvent:
        """Fetch and convert every market of ``event`` in listed order.

        Raises on the first market that cannot be fetched or decoded.
        """
        markets: List[NormalizedMarket] = []
        for market_id in event.market_ids:
            market = await self._market_source.get_by_id(market_id)
            markets.append(convert_market(market, market_id=market_id))
        return build_event(event, markets)

    async def _fetch_events(self) -> None:
        try:
            async for event_id in self._new_ids.iterate(self._stop_event):
                try:
                    event = await self._event_source.get_by_id(event_id)
                except ITEM_FAILURE_ERRORS as exc:
                    logger.warning("[%s] Failed to source event %s: %s", self.name, event_id, exc)
                    continue

                if not await self._source_events.send(event, self._stop_event):
                    return
        finally:
            self._source_events.close()

    async def _transform_events(self) -> None:
        try:
            async for event in self._source_events.iterate(self._stop_event):
                try:
                    product = await self.convert_event(event)
                except ITEM_FAILURE_ERRORS as exc:
                    logger.warning("[%s] Failed to convert event %s (%r): %s", self.name, event.id, event.name, exc)
                    continue

                if not await self._events.send(product, self._stop_event):
                    return
                logger.debug("[%s] Emitted event %s with %d markets", self.name, product.id, len(product.markets))
        finally:
            self._events.close()
            logger.info("[%s] Stopped", self.name)


__all__ = ["EventStream"]
