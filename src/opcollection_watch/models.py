"""Data model contracts for cross-module use."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .errors import (
    CollectionError,
    RemoteNotFound,
    RemotePermissionDenied,
    RemoteValidationFailed,
)

Header = tuple[str, str]


@dataclass(frozen=True)
class OperationData:
    body: str
    variables: str | None = None
    headers: tuple[Header, ...] | None = None


@dataclass(frozen=True)
class OperationEntry:
    id: str
    last_updated_at: str
    data: OperationData


@dataclass(frozen=True)
class PolledEntry:
    """Lightweight poll row: id plus opaque version stamp, no detail."""

    id: str
    last_updated_at: str


@dataclass
class CacheRecord:
    last_updated_at: str
    data: OperationData | None = None


@dataclass(frozen=True)
class CollectionFound:
    entries: tuple[OperationEntry, ...] | tuple[PolledEntry, ...]


@dataclass(frozen=True)
class CollectionNotFound:
    message: str

    def to_error(self) -> CollectionError:
        return RemoteNotFound(self.message)


@dataclass(frozen=True)
class CollectionPermissionDenied:
    message: str

    def to_error(self) -> CollectionError:
        return RemotePermissionDenied(self.message)


@dataclass(frozen=True)
class CollectionValidationFailed:
    message: str

    def to_error(self) -> CollectionError:
        return RemoteValidationFailed(self.message)


CollectionResult = Union[
    CollectionFound,
    CollectionNotFound,
    CollectionPermissionDenied,
    CollectionValidationFailed,
]


@dataclass(frozen=True)
class SnapshotUpdate:
    """Complete view of every known operation, emitted on start and on change."""

    operations: tuple[OperationEntry, ...]


@dataclass(frozen=True)
class CollectionFailure:
    """Classified remote failure; ``fatal`` is set when no further events follow."""

    error: CollectionError
    fatal: bool = False


CollectionEvent = Union[SnapshotUpdate, CollectionFailure]
