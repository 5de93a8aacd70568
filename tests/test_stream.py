"""Bounded event channel and stream semantics."""

from __future__ import annotations

import asyncio
import gc

import pytest

from opcollection_watch.errors import ChannelClosed, RemoteNotFound
from opcollection_watch.models import CollectionFailure, SnapshotUpdate
from opcollection_watch.stream import EventChannel, EventStream
from opcollection_watch.testing import entry


def _snapshot(stamp: str) -> SnapshotUpdate:
    return SnapshotUpdate(operations=(entry("A", stamp),))


def test_capacity_must_be_positive() -> None:
    with pytest.raises(ValueError, match="capacity"):
        EventChannel(capacity=0)


@pytest.mark.asyncio
async def test_send_suspends_while_buffer_is_full() -> None:
    channel = EventChannel(capacity=1)
    await channel.send(_snapshot("v1"))

    pending = asyncio.create_task(channel.send(_snapshot("v2")))
    await asyncio.sleep(0)
    assert not pending.done()

    assert await channel.receive() == _snapshot("v1")
    await asyncio.wait_for(pending, timeout=1)
    assert await channel.receive() == _snapshot("v2")


@pytest.mark.asyncio
async def test_blocked_send_fails_when_consumer_closes() -> None:
    channel = EventChannel(capacity=1)
    await channel.send(_snapshot("v1"))
    pending = asyncio.create_task(channel.send(_snapshot("v2")))
    await asyncio.sleep(0)

    channel.close_consumer()

    with pytest.raises(ChannelClosed):
        await asyncio.wait_for(pending, timeout=1)
    with pytest.raises(ChannelClosed):
        await channel.send(_snapshot("v3"))


@pytest.mark.asyncio
async def test_producer_close_delivers_queued_events_then_ends() -> None:
    channel = EventChannel()
    failure = CollectionFailure(error=RemoteNotFound("gone"))
    await channel.send(_snapshot("v1"))
    await channel.send(failure)

    channel.close()
    assert channel.pending() == 2
    events = [event async for event in EventStream(channel)]

    assert events == [_snapshot("v1"), failure]
    assert await channel.receive() is None
    with pytest.raises(ChannelClosed):
        await channel.send(_snapshot("v2"))


@pytest.mark.asyncio
async def test_stream_aclose_cancels_producer_task() -> None:
    channel = EventChannel()
    task = asyncio.create_task(asyncio.Event().wait())
    stream = EventStream(channel, task)

    await stream.aclose()

    assert task.cancelled()
    assert channel.consumer_closed


@pytest.mark.asyncio
async def test_close_wakes_waiting_consumer() -> None:
    channel = EventChannel()
    waiting = asyncio.create_task(channel.receive())
    await asyncio.sleep(0)

    channel.close()

    assert await asyncio.wait_for(waiting, timeout=1) is None


@pytest.mark.asyncio
async def test_dropped_stream_closes_channel_and_cancels_task() -> None:
    channel = EventChannel()
    task = asyncio.create_task(asyncio.Event().wait())
    stream = EventStream(channel, task)

    del stream
    gc.collect()
    await asyncio.gather(task, return_exceptions=True)

    assert channel.consumer_closed
    assert task.cancelled()
