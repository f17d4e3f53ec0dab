"""Tests for the discovery poller."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from event_pipeline.exceptions import ChannelClosedError, SourceFetchError
from event_pipeline.pipeline.feed import Feed


class ScriptedChecker:
    """Returns one scripted result per poll, repeating the last one forever."""

    def __init__(self, *results):
        self._results = list(results)
        self.calls = 0

    async def list_item_ids(self):
        index = min(self.calls, len(self._results) - 1)
        self.calls += 1
        result = self._results[index]
        if isinstance(result, Exception):
            raise result
        return list(result)


async def _collect(channel, count, timeout=2.0):
    items = []
    for _ in range(count):
        items.append(await asyncio.wait_for(channel.receive(), timeout=timeout))
    return items


def test_rejects_non_positive_interval():
    with pytest.raises(ValueError):
        Feed(ScriptedChecker([]), 0)


@pytest.mark.asyncio
async def test_check_filters_dedupes_and_sorts():
    feed = Feed(ScriptedChecker([5, 3, 3, 1, 4]), 1.0, start_cursor=2)

    assert await feed.check_for_new_items() == [3, 4, 5]
    assert feed.cursor == 5


@pytest.mark.asyncio
async def test_cursor_tracks_maximum_across_polls():
    feed = Feed(ScriptedChecker([3, 1], [2, 7], [4], [], [7, 8, 6]), 1.0)
    seen_max = 0

    for _ in range(5):
        await feed.check_for_new_items()
        assert feed.cursor >= seen_max
        seen_max = feed.cursor

    assert feed.cursor == 8


@pytest.mark.asyncio
async def test_repeated_ids_are_never_emitted_twice():
    feed = Feed(ScriptedChecker([1, 2, 3], [1, 2, 3, 4], [4, 3, 2, 1]), 1.0)

    emitted = []
    for _ in range(3):
        emitted.extend(await feed.check_for_new_items())

    assert emitted == [1, 2, 3, 4]


@pytest.mark.asyncio
async def test_ids_below_cursor_are_skipped_even_if_never_seen():
    feed = Feed(ScriptedChecker([10], [5, 11]), 1.0)

    assert await feed.check_for_new_items() == [10]
    assert await feed.check_for_new_items() == [11]


@pytest.mark.asyncio
async def test_failed_poll_keeps_cursor(caplog):
    feed = Feed(ScriptedChecker([1, 2], SourceFetchError("boom"), [3]), 1.0)

    assert await feed.check_for_new_items() == [1, 2]
    assert await feed.check_for_new_items() == []
    assert feed.cursor == 2
    assert "Failed to check for new item ids" in caplog.text
    assert await feed.check_for_new_items() == [3]


@pytest.mark.asyncio
async def test_poll_loop_emits_new_ids_and_recovers_from_errors():
    checker = ScriptedChecker([2, 1], SourceFetchError("transient"), [3, 2])
    feed = Feed(checker, 0.01).start()

    try:
        assert await _collect(feed.new_items, 3) == [1, 2, 3]
    finally:
        feed.stop()
        await feed.wait_closed(timeout=2)

    assert feed.cursor == 3
    assert feed.new_items.closed


@pytest.mark.asyncio
async def test_first_poll_is_immediate():
    checker = ScriptedChecker([1])
    feed = Feed(checker, 60.0).start()

    try:
        assert await _collect(feed.new_items, 1, timeout=1.0) == [1]
    finally:
        feed.stop()
        await feed.wait_closed(timeout=2)


@pytest.mark.asyncio
async def test_stop_interrupts_sleep_and_closes_output():
    checker = ScriptedChecker([])
    feed = Feed(checker, 60.0).start()
    await asyncio.sleep(0.01)

    feed.stop()
    await feed.wait_closed(timeout=1)

    assert not feed.running
    with pytest.raises(ChannelClosedError):
        await feed.new_items.receive()


@pytest.mark.asyncio
async def test_stop_unblocks_pending_emission():
    feed = Feed(ScriptedChecker([1, 2, 3]), 60.0, channel_capacity=1).start()
    await asyncio.sleep(0.01)

    feed.stop()
    await feed.wait_closed(timeout=1)

    remaining = [item async for item in feed.new_items]
    assert remaining == [1]
    assert feed.cursor == 3


@pytest.mark.asyncio
async def test_stop_is_idempotent():
    feed = Feed(AsyncMock(list_item_ids=AsyncMock(return_value=[])), 1.0).start()

    feed.stop()
    feed.stop()
    await feed.wait_closed(timeout=1)

    assert feed.stopped
