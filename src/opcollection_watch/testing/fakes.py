"""Scripted collection client and sleep recorder reused by poller tests."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Union

from opcollection_watch.models import (
    CollectionFound,
    CollectionResult,
    OperationData,
    OperationEntry,
    PolledEntry,
)

ScriptStep = Union[CollectionResult, Exception]
DetailStep = Union[Sequence[OperationEntry], Exception]


def entry(entry_id: str, stamp: str, body: str | None = None) -> OperationEntry:
    """Operation entry whose body defaults to a query naming the id and stamp."""
    return OperationEntry(
        id=entry_id,
        last_updated_at=stamp,
        data=OperationData(body=body or f"query {entry_id} {{ {stamp} }}"),
    )


def polled(**stamps: str) -> CollectionFound:
    """Polling result from ``id=stamp`` keyword pairs."""
    return CollectionFound(
        entries=tuple(PolledEntry(id=entry_id, last_updated_at=stamp) for entry_id, stamp in stamps.items())
    )


@dataclass
class ScriptedCollectionClient:
    """
    Collection client that replays scripted responses in order.

    Exceptions in a script are raised instead of returned. Running out of
    script is a test bug and fails loudly.
    """

    full: list[ScriptStep] = field(default_factory=list)
    polls: list[ScriptStep] = field(default_factory=list)
    details: list[DetailStep] = field(default_factory=list)
    full_calls: list[str] = field(default_factory=list)
    poll_calls: list[str] = field(default_factory=list)
    detail_calls: list[list[str]] = field(default_factory=list)
    closed: bool = False

    async def fetch_full(self, collection_id: str) -> CollectionResult:
        self.full_calls.append(collection_id)
        return _next_step(self.full, "fetch_full")  # type: ignore[return-value]

    async def fetch_poll(self, collection_id: str) -> CollectionResult:
        self.poll_calls.append(collection_id)
        return _next_step(self.polls, "fetch_poll")  # type: ignore[return-value]

    async def fetch_details(self, entry_ids: Sequence[str]) -> list[OperationEntry]:
        self.detail_calls.append(list(entry_ids))
        return list(_next_step(self.details, "fetch_details"))  # type: ignore[arg-type]

    async def aclose(self) -> None:
        self.closed = True


@dataclass
class SleepRecorder:
    """Async sleep function that records requested sleeps without waiting."""

    calls: list[float] = field(default_factory=list)

    async def __call__(self, seconds: float) -> None:
        self.calls.append(float(seconds))


def _next_step(script: list, name: str) -> object:
    if not script:
        raise AssertionError(f"{name} script exhausted; test made an unexpected call.")
    step = script.pop(0)
    if isinstance(step, Exception):
        raise step
    return step
