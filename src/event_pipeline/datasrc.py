"""Read-only clients for the upstream football source service.

Endpoints:
- ``GET <base>/football/events``       -> JSON array of event ids
- ``GET <base>/football/events/{id}``  -> event object
- ``GET <base>/football/markets/{id}`` -> market object
"""

from __future__ import annotations

import asyncio
from typing import Any, List

import aiohttp
import orjson

from .data_models.source import SourceEvent, SourceMarket
from .exceptions import PayloadDecodeError, SourceFetchError
from .http_utils import ensure_http_url, is_success_status
from .session_manager import SessionManager

EVENTS_PATH = "/football/events"
MARKETS_PATH = "/football/markets"


async def fetch_json(session_manager: SessionManager, url: str) -> Any:
    """GET ``url`` and decode its JSON body.

    Raises:
        SourceFetchError: on transport failure, non-2xx status or a body that is not JSON
    """
    session = await session_manager.get_session()
    try:
        async with session.get(url) as response:
            body = await response.read()
            if not is_success_status(response.status):
                raise SourceFetchError(f"GET {url} returned {response.status}", url=url, status=response.status)
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        raise SourceFetchError(f"GET {url} failed: {exc!r}", url=url) from exc

    try:
        return orjson.loads(body)
    except orjson.JSONDecodeError as exc:
        raise SourceFetchError(f"GET {url} returned a body that is not JSON", url=url, status=response.status) from exc


class EventRepository:
    """Lists and fetches source events."""

    def __init__(self, base_url: str, session_manager: SessionManager) -> None:
        self.events_url = ensure_http_url(base_url) + EVENTS_PATH
        self._session_manager = session_manager

    async def list_item_ids(self) -> List[int]:
        """Return every event id the feed currently knows about, in feed order."""
        payload = await fetch_json(self._session_manager, self.events_url)
        if not isinstance(payload, list):
            raise PayloadDecodeError(f"Event list must be a JSON array, got {type(payload).__name__}")
        for item in payload:
            if not isinstance(item, int) or isinstance(item, bool):
                raise PayloadDecodeError(f"Event list entries must be integers, got {item!r}", value=item)
        return payload

    async def get_by_id(self, event_id: int) -> SourceEvent:
        payload = await fetch_json(self._session_manager, f"{self.events_url}/{event_id}")
        return SourceEvent.from_payload(payload)


class MarketRepository:
    """Fetches source markets."""

    def __init__(self, base_url: str, session_manager: SessionManager) -> None:
        self.markets_url = ensure_http_url(base_url) + MARKETS_PATH
        self._session_manager = session_manager

    async def get_by_id(self, market_id: int) -> SourceMarket:
        payload = await fetch_json(self._session_manager, f"{self.markets_url}/{market_id}")
        return SourceMarket.from_payload(payload)


__all__ = ["EventRepository", "MarketRepository", "fetch_json"]
