"""One-directional bounded channel connecting pipeline stages."""

from __future__ import annotations

import asyncio
from typing import AsyncIterator, Awaitable, Generic, Optional, Tuple, TypeVar

from .exceptions import ChannelClosedError

T = TypeVar("T")


async def _first_of(operation: Awaitable[T], signal: asyncio.Event) -> Tuple[bool, Optional[T]]:
    """Await ``operation`` unless ``signal`` fires first.

    Returns ``(True, result)`` when the operation completed, ``(False, None)``
    when the signal won. The losing side is cancelled.
    """
    operation_task = asyncio.ensure_future(operation)
    signal_task = asyncio.ensure_future(signal.wait())
    try:
        await asyncio.wait({operation_task, signal_task}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        pending = [task for task in (operation_task, signal_task) if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    if operation_task.done() and not operation_task.cancelled():
        return True, operation_task.result()
    return False, None


class Channel(Generic[T]):
    """Bounded FIFO with close semantics.

    A single producer sends and closes; consumers receive until the channel is
    closed and drained. Sends and receives accept an optional cancellation
    event that unblocks them.
    """

    def __init__(self, capacity: int = 1) -> None:
        if capacity < 1:
            raise ValueError(f"Channel capacity must be at least 1 (got {capacity})")
        self._queue: asyncio.Queue[T] = asyncio.Queue(maxsize=capacity)
        self._closed = asyncio.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def close(self) -> None:
        """Close the channel. Buffered items stay receivable."""
        self._closed.set()

    async def send(self, item: T, cancel: Optional[asyncio.Event] = None) -> bool:
        """Block until ``item`` is buffered; return False if ``cancel`` fired first."""
        if self.closed:
            raise ChannelClosedError("send on closed channel")
        if cancel is None:
            await self._queue.put(item)
            return True
        if cancel.is_set():
            return False
        delivered, _ = await _first_of(self._queue.put(item), cancel)
        return delivered

    async def receive(self, cancel: Optional[asyncio.Event] = None) -> T:
        """Return the next item.

        Raises:
            ChannelClosedError: once the channel is closed and drained, or ``cancel`` fired
        """
        while True:
            if not self._queue.empty():
                return self._queue.get_nowait()
            if self.closed:
                raise ChannelClosedError("channel closed")
            if cancel is not None and cancel.is_set():
                raise ChannelClosedError("receive cancelled")

            waiters = [asyncio.ensure_future(self._queue.get()), asyncio.ensure_future(self._closed.wait())]
            if cancel is not None:
                waiters.append(asyncio.ensure_future(cancel.wait()))
            getter = waiters[0]
            try:
                await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
            finally:
                pending = [task for task in waiters if not task.done()]
                for task in pending:
                    task.cancel()
                if pending:
                    await asyncio.gather(*pending, return_exceptions=True)
            if getter.done() and not getter.cancelled():
                return getter.result()

    async def iterate(self, cancel: Optional[asyncio.Event] = None) -> AsyncIterator[T]:
        """Yield items until the channel is closed and drained or ``cancel`` fires."""
        while True:
            try:
                item = await self.receive(cancel)
            except ChannelClosedError:
                return
            yield item

    def __aiter__(self) -> AsyncIterator[T]:
        return self.iterate()

    def qsize(self) -> int:
        return self._queue.qsize()


__all__ = ["Channel"]
