"""Poll-loop orchestration for one operation collection watch."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .cache import ChangeCache
from .client import CollectionClient, PlatformApiClient
from .config import MAX_COLLECTION_SIZE_FOR_POLLING, PlatformApiConfig
from .diff import compute_changed
from .errors import ChannelClosed, CollectionError, ConfigError
from .models import CollectionFailure, CollectionFound, OperationEntry, SnapshotUpdate
from .stream import DEFAULT_CHANNEL_CAPACITY, EventChannel, EventStream

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


class WatchState(str, Enum):
    STARTING = "starting"
    WATCHING = "watching"
    STOPPED = "stopped"


class CollectionPoller:
    """
    Drive one watch: a full fetch, then sleep/poll/diff/fetch/merge cycles.

    Errors on the initial fetch end the watch after one failure event. Errors
    during later cycles are reported and polling carries on at the next
    interval, which is the only retry there is. A snapshot over
    ``max_collection_size`` entries is emitted once and then polling stops.
    """

    def __init__(
        self,
        collection_id: str,
        client: CollectionClient,
        channel: EventChannel,
        *,
        poll_interval_seconds: float,
        sleep_fn: Optional[SleepFn] = None,
        max_cycles: Optional[int] = None,
        max_collection_size: int = MAX_COLLECTION_SIZE_FOR_POLLING,
        close_client: bool = False,
    ):
        if max_cycles is not None and max_cycles < 0:
            raise ConfigError("max_cycles must be >= 0 when provided.")
        self.collection_id = collection_id
        self.client = client
        self.channel = channel
        self.poll_interval_seconds = poll_interval_seconds
        self.max_cycles = max_cycles
        self.max_collection_size = max_collection_size
        self.cache = ChangeCache()
        self.state = WatchState.STARTING
        self.cycles = 0
        self._sleep = sleep_fn or asyncio.sleep
        self._close_client = close_client

    async def run(self) -> None:
        try:
            if await self._start():
                self.state = WatchState.WATCHING
                await self._watch()
        except ChannelClosed as exc:
            logger.debug(
                "Failed to push to collection stream, the consumer is likely shutting down: %s", exc
            )
        except asyncio.CancelledError:
            logger.debug("Collection watch for %s cancelled", self.collection_id)
            raise
        except Exception:
            logger.exception("Collection watch for %s failed unexpectedly", self.collection_id)
        finally:
            self.state = WatchState.STOPPED
            self.channel.close()
            if self._close_client:
                await self.client.aclose()

    async def _start(self) -> bool:
        """Initial full fetch; returns whether polling should follow."""
        try:
            result = await self.client.fetch_full(self.collection_id)
        except CollectionError as exc:
            await self._send_failure(exc, fatal=True)
            return False
        if not isinstance(result, CollectionFound):
            await self._send_failure(result.to_error(), fatal=True)
            return False

        self.cache.load(result.entries)  # type: ignore[arg-type]
        await self.channel.send(SnapshotUpdate(operations=self.cache.snapshot()))
        return not self._exceeds_ceiling(len(result.entries))

    async def _watch(self) -> None:
        while self.max_cycles is None or self.cycles < self.max_cycles:
            await self._sleep(self.poll_interval_seconds)
            self.cycles += 1
            try:
                operations = await self.poll_once()
            except CollectionError as exc:
                logger.warning(
                    "Operation collection %s poll failed: %s", self.collection_id, exc.message
                )
                await self._send_failure(exc, fatal=False)
                continue

            if operations is None:
                logger.debug("Operation collection %s unchanged", self.collection_id)
                continue

            await self.channel.send(SnapshotUpdate(operations=operations))
            if self._exceeds_ceiling(len(operations)):
                return

    async def poll_once(self) -> Optional[tuple[OperationEntry, ...]]:
        """
        Run one poll/diff/fetch/merge cycle.

        Returns the full snapshot when something changed and None otherwise.
        Raises the classified ``CollectionError`` on any remote failure.
        """
        result = await self.client.fetch_poll(self.collection_id)
        if not isinstance(result, CollectionFound):
            raise result.to_error()

        changed_ids = compute_changed(self.cache, result.entries)  # type: ignore[arg-type]
        if not changed_ids:
            logger.debug("No operation changed in collection %s", self.collection_id)
            return None

        logger.debug("Changed operation ids: %s", changed_ids)
        entries = await self.client.fetch_details(changed_ids)
        self.cache.merge(entries)
        return self.cache.snapshot()

    async def _send_failure(self, error: CollectionError, *, fatal: bool) -> None:
        await self.channel.send(CollectionFailure(error=error, fatal=fatal))

    def _exceeds_ceiling(self, operation_count: int) -> bool:
        if operation_count <= self.max_collection_size:
            return False
        logger.warning(
            "Operation Collection polling disabled. Collection has %d operations which exceeds the maximum of %d.",
            operation_count,
            self.max_collection_size,
        )
        return True


@dataclass(frozen=True)
class CollectionSource:
    """A single operation collection and the platform API settings to watch it with."""

    collection_id: str
    platform_api_config: PlatformApiConfig

    def into_stream(
        self,
        *,
        client: Optional[CollectionClient] = None,
        sleep_fn: Optional[SleepFn] = None,
        max_cycles: Optional[int] = None,
        channel_capacity: int = DEFAULT_CHANNEL_CAPACITY,
    ) -> EventStream:
        """
        Start watching in a background task and return its event stream.

        Must be called from a running event loop. A client built here is closed
        when the watch stops; a passed-in client stays owned by the caller.
        """
        channel = EventChannel(channel_capacity)
        poller = CollectionPoller(
            self.collection_id,
            client or PlatformApiClient(self.platform_api_config),
            channel,
            poll_interval_seconds=self.platform_api_config.poll_interval_seconds,
            sleep_fn=sleep_fn,
            max_cycles=max_cycles,
            close_client=client is None,
        )
        task = asyncio.create_task(poller.run(), name=f"collection-poller:{self.collection_id}")
        return EventStream(channel, task)
