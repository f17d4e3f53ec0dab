"""Process entry point wiring the feed, stream and sink together."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Optional

from .config import ConfigurationError, PipelineSettings, get_pipeline_settings
from .datasink import EventStore
from .datasrc import EventRepository, MarketRepository
from .logging_config import setup_logging
from .pipeline import EventSink, EventStream, Feed, SinkStats
from .session_manager import SessionManager

logger = logging.getLogger(__name__)

SERVICE_NAME = "event_pipeline"
_SHUTDOWN_TIMEOUT_SECONDS = 5.0


async def run_pipeline(settings: PipelineSettings, session_manager: Optional[SessionManager] = None) -> SinkStats:
    """Run the pipeline until it is cancelled or the feed stops.

    The sink runs in the calling task. On exit both upstream stages are
    stopped and the HTTP session is closed.
    """
    session_manager = session_manager or SessionManager(settings.request_timeout_seconds)
    events = EventRepository(settings.feed_base_url, session_manager)
    markets = MarketRepository(settings.feed_base_url, session_manager)
    store = EventStore(settings.store_base_url, session_manager)

    feed = Feed(events, settings.poll_interval_seconds, channel_capacity=settings.channel_capacity)
    stream = EventStream(
        feed.new_items,
        events,
        markets,
        buffer_capacity=settings.channel_capacity,
        channel_capacity=settings.channel_capacity,
    )
    sink = EventSink(stream.events, store)

    feed.start()
    stream.start()
    try:
        return await sink.process_all()
    finally:
        feed.stop()
        stream.stop()
        try:
            await asyncio.wait_for(
                asyncio.gather(feed.wait_closed(), stream.wait_closed(), return_exceptions=True),
                timeout=_SHUTDOWN_TIMEOUT_SECONDS,
            )
        except asyncio.TimeoutError:
            logger.warning("Pipeline stages did not stop within %.1fs", _SHUTDOWN_TIMEOUT_SECONDS)
        await session_manager.close()


def main() -> int:
    setup_logging(SERVICE_NAME)
    try:
        settings = get_pipeline_settings()
    except ConfigurationError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    logger.info("Using Feed at %s", settings.feed_base_url)
    logger.info("Using Store at %s", settings.store_base_url)

    try:
        asyncio.run(run_pipeline(settings))
    except ConfigurationError as exc:
        logger.error("Failed to start pipeline: %s", exc)
        return 2
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
