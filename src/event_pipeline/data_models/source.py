"""Entities published by the upstream football feed.

The pipeline only ever decodes these; it never builds or mutates them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Tuple

from ..exceptions import PayloadDecodeError

# e.g. "2017-08-20:15:00:00Z" or "2017-08-20:15:00:00+01:00"
SOURCE_TIME_FORMAT = "%Y-%m-%d:%H:%M:%S%z"

_MISSING = object()


def _lookup(payload: Mapping[str, Any], key: str) -> Any:
    """Return ``payload[key]``, falling back to a case-insensitive key match."""
    if key in payload:
        return payload[key]
    lowered = key.lower()
    for candidate, value in payload.items():
        if isinstance(candidate, str) and candidate.lower() == lowered:
            return value
    return _MISSING


def _require(payload: Mapping[str, Any], key: str, expected: type, entity: str) -> Any:
    value = _lookup(payload, key)
    if value is _MISSING:
        raise PayloadDecodeError(f"{entity} payload missing field {key!r}", field=key)
    # bool is an int subclass but never a valid identifier
    if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        raise PayloadDecodeError(
            f"{entity} field {key!r} must be {expected.__name__}, got {type(value).__name__}",
            field=key,
            value=value,
        )
    return value


def _ensure_mapping(payload: Any, entity: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise PayloadDecodeError(f"{entity} payload must be a JSON object, got {type(payload).__name__}")
    return payload


def parse_source_time(raw: str) -> datetime:
    """Parse the feed's ``YYYY-MM-DD:HH:MM:SS<zone>`` timestamps into aware datetimes."""
    try:
        return datetime.strptime(raw, SOURCE_TIME_FORMAT)
    except ValueError as exc:
        raise PayloadDecodeError(f"Invalid event time {raw!r}", value=raw) from exc


@dataclass(frozen=True)
class SourceEvent:
    id: int
    name: str
    time: datetime
    market_ids: Tuple[int, ...]

    @classmethod
    def from_payload(cls, payload: Any) -> "SourceEvent":
        data = _ensure_mapping(payload, "Event")
        market_ids = _require(data, "Markets", list, "Event")
        for market_id in market_ids:
            if not isinstance(market_id, int) or isinstance(market_id, bool):
                raise PayloadDecodeError(f"Event market ids must be integers, got {market_id!r}", value=market_id)
        return cls(
            id=_require(data, "id", int, "Event"),
            name=_require(data, "name", str, "Event"),
            time=parse_source_time(_require(data, "time", str, "Event")),
            market_ids=tuple(market_ids),
        )


@dataclass(frozen=True)
class SourceOption:
    id: str
    name: str
    odds: str  # fractional "<numerator>/<denominator>"

    @classmethod
    def from_payload(cls, payload: Any) -> "SourceOption":
        data = _ensure_mapping(payload, "Option")
        return cls(
            id=_require(data, "id", str, "Option"),
            name=_require(data, "name", str, "Option"),
            odds=_require(data, "odds", str, "Option"),
        )


@dataclass(frozen=True)
class SourceMarket:
    id: str
    type: str
    options: Tuple[SourceOption, ...]

    @classmethod
    def from_payload(cls, payload: Any) -> "SourceMarket":
        data = _ensure_mapping(payload, "Market")
        raw_options = _require(data, "options", list, "Market")
        return cls(
            id=_require(data, "id", str, "Market"),
            type=_require(data, "type", str, "Market"),
            options=tuple(SourceOption.from_payload(option) for option in raw_options),
        )


__all__ = [
    "SOURCE_TIME_FORMAT",
    "SourceEvent",
    "SourceMarket",
    "SourceOption",
    "parse_source_time",
]
