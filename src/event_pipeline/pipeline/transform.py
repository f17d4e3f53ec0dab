"""Conversion from source entities to the normalized store representation."""

from __future__ import annotations

import re
from typing import Iterable, Tuple

from ..data_models.normalized import NormalizedEvent, NormalizedMarket, NormalizedOption
from ..data_models.source import SourceEvent, SourceMarket, SourceOption
from ..exceptions import OddsDecodeError

ODDS_SEPARATOR = "/"
_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


def decode_odds(odds: str, *, market_id=None) -> Tuple[int, int]:
    """Decode ``"<numerator>/<denominator>"`` into ``(numerator, denominator)``.

    Raises:
        OddsDecodeError: unless the string holds exactly two integer parts
    """
    parts = odds.split(ODDS_SEPARATOR)
    if len(parts) != 2:
        raise OddsDecodeError(odds, market_id=market_id)
    numerator, denominator = parts
    if not _INTEGER_PATTERN.fullmatch(numerator) or not _INTEGER_PATTERN.fullmatch(denominator):
        raise OddsDecodeError(odds, market_id=market_id)
    return int(numerator), int(denominator)


def convert_option(option: SourceOption, *, market_id=None) -> NormalizedOption:
    num, den = decode_odds(option.odds, market_id=market_id)
    return NormalizedOption(id=option.id, name=option.name, num=num, den=den)


def convert_market(market: SourceMarket, *, market_id=None) -> NormalizedMarket:
    """Convert one market, keeping option order. Any bad option fails the whole market."""
    if market_id is None:
        market_id = market.id
    return NormalizedMarket(
        id=market.id,
        type=market.type,
        options=tuple(convert_option(option, market_id=market_id) for option in market.options),
    )


def build_event(event: SourceEvent, markets: Iterable[NormalizedMarket]) -> NormalizedEvent:
    return NormalizedEvent(
        id=str(event.id),
        name=event.name,
        time=event.time,
        markets=tuple(markets),
    )


__all__ = ["build_event", "convert_market", "convert_option", "decode_odds"]
