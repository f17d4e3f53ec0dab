"""The three pipeline stages: Feed -> EventStream -> EventSink."""

from .event_stream import EventStream
from .feed import Feed
from .sink import EventSink, SinkStats
from .transform import decode_odds

__all__ = ["EventSink", "EventStream", "Feed", "SinkStats", "decode_odds"]
