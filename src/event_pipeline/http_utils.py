from __future__ import annotations

"""HTTP helper utilities shared by the source and store clients."""

from typing import Any, Optional
from urllib.parse import urlsplit

from .exceptions import ConfigurationError

HTTP_SUCCESS_MIN = 200
HTTP_SUCCESS_MAX = 299


def is_aiohttp_session_open(session: Optional[Any]) -> bool:
    """Return True when the provided aiohttp session exists and remains open."""
    if session is None:
        return False
    if not hasattr(session, "closed"):
        return False
    return not bool(session.closed)


def ensure_http_url(base_url: str) -> str:
    """Ensure the provided URL uses an allowed HTTP/HTTPS scheme and return it without a trailing slash."""
    parsed = urlsplit(base_url)
    scheme = parsed.scheme.lower()
    if scheme not in {"http", "https"}:
        raise ConfigurationError(f"Unsupported URL scheme: {base_url}")
    if not parsed.netloc:
        raise ConfigurationError(f"URL missing network location: {base_url}")
    return base_url.rstrip("/")


def is_success_status(status: int) -> bool:
    return HTTP_SUCCESS_MIN <= status <= HTTP_SUCCESS_MAX


__all__ = ["ensure_http_url", "is_aiohttp_session_open", "is_success_status"]
