"""HTTP session management shared by the source and store clients."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import aiohttp

from .http_utils import is_aiohttp_session_open

logger = logging.getLogger(__name__)


class SessionManager:
    """Manages a lazily created ``aiohttp.ClientSession``."""

    def __init__(self, request_timeout_seconds: Optional[float] = None) -> None:
        self._request_timeout_seconds = request_timeout_seconds
        self._session: Optional[aiohttp.ClientSession] = None
        self._session_lock = asyncio.Lock()

    async def get_session(self) -> aiohttp.ClientSession:
        """Return the open session, creating it on first use."""
        async with self._session_lock:
            if is_aiohttp_session_open(self._session):
                return self._session

            timeout = aiohttp.ClientTimeout(total=self._request_timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
            logger.debug("Opened HTTP session (timeout=%s)", self._request_timeout_seconds)
            return self._session

    async def close(self) -> None:
        """Close the HTTP session if one exists."""
        async with self._session_lock:
            if self._session is not None:
                await self._session.close()
                self._session = None
                logger.debug("Closed HTTP session")

    @property
    def session(self) -> Optional[aiohttp.ClientSession]:
        """Access the current session without creating one."""
        return self._session

    async def __aenter__(self) -> "SessionManager":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()


__all__ = ["SessionManager"]
