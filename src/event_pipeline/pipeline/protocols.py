"""Protocols for the collaborators the pipeline stages depend on."""

from __future__ import annotations

from typing import Protocol, Sequence

from ..data_models.normalized import NormalizedEvent
from ..data_models.source import SourceEvent, SourceMarket


class INewItemChecker(Protocol):
    """Lists every item id the upstream feed currently knows about."""

    async def list_item_ids(self) -> Sequence[int]:
        """Return all known ids, in any order, possibly including ids seen before."""
        ...


class IEventSourcer(Protocol):
    async def get_by_id(self, event_id: int) -> SourceEvent:
        ...


class IMarketSourcer(Protocol):
    async def get_by_id(self, market_id: int) -> SourceMarket:
        ...


class IEventWriter(Protocol):
    async def create(self, event: NormalizedEvent) -> None:
        """Store one event, raising on any failure."""
        ...


__all__ = ["IEventSourcer", "IEventWriter", "IMarketSourcer", "INewItemChecker"]
