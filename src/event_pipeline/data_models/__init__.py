"""Source and normalized data models."""

from .normalized import NormalizedEvent, NormalizedMarket, NormalizedOption
from .source import SourceEvent, SourceMarket, SourceOption

__all__ = [
    "NormalizedEvent",
    "NormalizedMarket",
    "NormalizedOption",
    "SourceEvent",
    "SourceMarket",
    "SourceOption",
]
