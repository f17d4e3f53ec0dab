"""Normalized entities delivered to the event store.

Instances are frozen and hold tuples, so an event cannot change once the
transform stage has emitted it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Tuple, Union

import orjson

from ..exceptions import PayloadDecodeError

JsonLike = Union[str, bytes, Dict[str, Any]]


def format_rfc3339(value: datetime) -> str:
    """Format ``value`` as RFC3339, using ``Z`` for UTC and assuming UTC when naive."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    if value.utcoffset() == timedelta(0):
        return value.replace(tzinfo=None).isoformat() + "Z"
    return value.isoformat()


def parse_rfc3339(raw: str) -> datetime:
    text = raw[:-1] + "+00:00" if raw.endswith(("Z", "z")) else raw
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise PayloadDecodeError(f"Invalid RFC3339 timestamp {raw!r}", value=raw) from exc
    if parsed.tzinfo is None:
        raise PayloadDecodeError(f"RFC3339 timestamp {raw!r} has no UTC offset", value=raw)
    return parsed


@dataclass(frozen=True)
class NormalizedOption:
    id: str
    name: str
    num: int
    den: int


@dataclass(frozen=True)
class NormalizedMarket:
    id: str
    type: str
    options: Tuple[NormalizedOption, ...] = ()


@dataclass(frozen=True)
class NormalizedEvent:
    id: str
    name: str
    time: datetime
    markets: Tuple[NormalizedMarket, ...] = ()

    def to_payload(self) -> Dict[str, Any]:
        """Return the store body for this event."""
        return {
            "id": self.id,
            "name": self.name,
            "time": format_rfc3339(self.time),
            "markets": [
                {
                    "id": market.id,
                    "type": market.type,
                    "options": [
                        {"id": option.id, "name": option.name, "num": option.num, "den": option.den}
                        for option in market.options
                    ],
                }
                for market in self.markets
            ],
        }

    def to_json(self) -> bytes:
        return orjson.dumps(self.to_payload())

    @classmethod
    def from_payload(cls, payload: JsonLike) -> "NormalizedEvent":
        """Decode a store body (mapping or raw JSON) back into an event."""
        if isinstance(payload, (str, bytes)):
            try:
                payload = orjson.loads(payload)
            except orjson.JSONDecodeError as exc:
                raise PayloadDecodeError("Event body is not valid JSON") from exc
        if not isinstance(payload, dict):
            raise PayloadDecodeError("Event body must be a JSON object")
        try:
            markets = tuple(
                NormalizedMarket(
                    id=str(market["id"]),
                    type=str(market["type"]),
                    options=tuple(
                        NormalizedOption(
                            id=str(option["id"]),
                            name=str(option["name"]),
                            num=int(option["num"]),
                            den=int(option["den"]),
                        )
                        for option in market.get("options") or ()
                    ),
                )
                for market in payload.get("markets") or ()
            )
            return cls(
                id=str(payload["id"]),
                name=str(payload["name"]),
                time=parse_rfc3339(str(payload["time"])),
                markets=markets,
            )
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise PayloadDecodeError(f"Malformed event body: {exc}") from exc


__all__ = [
    "NormalizedEvent",
    "NormalizedMarket",
    "NormalizedOption",
    "format_rfc3339",
    "parse_rfc3339",
]
