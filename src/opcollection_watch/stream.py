"""Bounded producer/consumer event channel between a watch and its consumer."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import weakref
from typing import Optional

from .errors import ChannelClosed
from .models import CollectionEvent

logger = logging.getLogger(__name__)

DEFAULT_CHANNEL_CAPACITY = 2

_END_OF_STREAM = object()


class EventChannel:
    """
    Bounded, ordered queue of collection events.

    ``send`` suspends while the buffer is full instead of dropping events, and
    raises ``ChannelClosed`` once the consumer has gone away. ``close`` never
    suspends, so a cancelled producer can always finish.
    """

    def __init__(self, capacity: int = DEFAULT_CHANNEL_CAPACITY):
        if capacity <= 0:
            raise ValueError("capacity must be > 0")
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize=capacity)
        self._producer_closed = False
        self._consumer_closed = False

    @property
    def capacity(self) -> int:
        return self._queue.maxsize

    @property
    def consumer_closed(self) -> bool:
        return self._consumer_closed

    @property
    def producer_closed(self) -> bool:
        return self._producer_closed

    def pending(self) -> int:
        return self._queue.qsize()

    async def send(self, event: CollectionEvent) -> None:
        if self._consumer_closed:
            raise ChannelClosed("event stream consumer is gone")
        if self._producer_closed:
            raise ChannelClosed("event stream already ended")
        await self._queue.put(event)
        # Woken by close_consumer() draining the buffer.
        if self._consumer_closed:
            raise ChannelClosed("event stream consumer is gone")

    def close(self) -> None:
        """End the stream from the producer side; queued events are still delivered."""
        if self._producer_closed:
            return
        self._producer_closed = True
        # A full buffer means the consumer is not waiting; receive() sees the
        # closed flag once it has drained the buffer.
        if not self._consumer_closed and not self._queue.full():
            self._queue.put_nowait(_END_OF_STREAM)

    def close_consumer(self) -> None:
        """Drop the consumer end; blocked and future sends fail with ChannelClosed."""
        self._consumer_closed = True
        while not self._queue.empty():
            self._queue.get_nowait()

    async def receive(self) -> Optional[CollectionEvent]:
        """Next event, or None once the stream has ended."""
        if self._consumer_closed:
            return None
        if self._producer_closed and self._queue.empty():
            self._consumer_closed = True
            return None
        item = await self._queue.get()
        if item is _END_OF_STREAM:
            self._consumer_closed = True
            return None
        return item  # type: ignore[return-value]


def _abandon(channel: EventChannel, task: Optional[asyncio.Task[None]]) -> None:
    channel.close_consumer()
    if task is None or task.done():
        return
    loop = task.get_loop()
    if not loop.is_closed():
        loop.call_soon_threadsafe(task.cancel)


class EventStream:
    """
    Async iterator over one watch's events.

    Finite only if the watch stops; cannot be restarted. Closing it, or
    dropping the last reference to it, stops the producer task as well.
    """

    def __init__(self, channel: EventChannel, task: Optional[asyncio.Task[None]] = None):
        self._channel = channel
        self._task = task
        self._finalizer = weakref.finalize(self, _abandon, channel, task)

    def __aiter__(self) -> "EventStream":
        return self

    async def __anext__(self) -> CollectionEvent:
        event = await self._channel.receive()
        if event is None:
            raise StopAsyncIteration
        return event

    async def __aenter__(self) -> "EventStream":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    @property
    def task(self) -> Optional[asyncio.Task[None]]:
        return self._task

    async def aclose(self) -> None:
        self._finalizer.detach()
        self._channel.close_consumer()
        task = self._task
        if task is None or task.done():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.debug("Event stream closed by consumer")
