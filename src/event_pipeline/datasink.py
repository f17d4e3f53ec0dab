"""Write-only client for the downstream event store (``POST <base>/event``)."""

from __future__ import annotations

import asyncio
import logging

import aiohttp

from .data_models.normalized import NormalizedEvent
from .exceptions import StoreWriteError
from .http_utils import ensure_http_url, is_success_status
from .session_manager import SessionManager

logger = logging.getLogger(__name__)

EVENT_PATH = "/event"
JSON_CONTENT_TYPE = "application/json; charset=utf-8"


class EventStore:
    def __init__(self, base_url: str, session_manager: SessionManager) -> None:
        self.event_url = ensure_http_url(base_url) + EVENT_PATH
        self._session_manager = session_manager

    async def create(self, event: NormalizedEvent) -> None:
        """Store one event; any 2xx response is an acknowledgment.

        Raises:
            StoreWriteError: when the store is unreachable or rejects the event
        """
        session = await self._session_manager.get_session()
        try:
            async with session.post(
                self.event_url,
                data=event.to_json(),
                headers={"Content-Type": JSON_CONTENT_TYPE},
            ) as response:
                if not is_success_status(response.status):
                    reason = response.reason or ""
                    raise StoreWriteError(
                        f"Event store rejected event {event.id} with {response.status} {reason}".rstrip(),
                        event_id=event.id,
                        status=response.status,
                    )
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise StoreWriteError(f"Event store unreachable for event {event.id}: {exc!r}", event_id=event.id) from exc
        logger.debug("Stored event %s", event.id)


__all__ = ["EventStore"]
