"""In-memory change cache keyed by operation id."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from .models import CacheRecord, OperationEntry, PolledEntry


class ChangeCache:
    """
    Last observed version stamp and detail per operation id.

    Owned by exactly one poll loop; records keep first-seen order so snapshots
    are stable between emissions.
    """

    def __init__(self) -> None:
        self._records: dict[str, CacheRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._records

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def get(self, entry_id: str) -> CacheRecord | None:
        return self._records.get(entry_id)

    def load(self, entries: Iterable[OperationEntry]) -> None:
        """Populate from a full collection fetch."""
        for entry in entries:
            self._records[entry.id] = CacheRecord(last_updated_at=entry.last_updated_at, data=entry.data)

    def observe(self, entry: PolledEntry) -> bool:
        """Record a polled stamp and report whether the entry changed."""
        record = self._records.get(entry.id)
        if record is None:
            self._records[entry.id] = CacheRecord(last_updated_at=entry.last_updated_at)
            return True
        if record.last_updated_at == entry.last_updated_at:
            return False
        # Keep the previous detail until the entries fetch replaces it.
        record.last_updated_at = entry.last_updated_at
        return True

    def merge(self, entries: Iterable[OperationEntry]) -> None:
        self.load(entries)

    def snapshot(self) -> tuple[OperationEntry, ...]:
        """Every entry whose detail is known, in cache order."""
        return tuple(
            OperationEntry(id=entry_id, last_updated_at=record.last_updated_at, data=record.data)
            for entry_id, record in self._records.items()
            if record.data is not None
        )
