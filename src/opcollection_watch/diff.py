"""Changed-id detection between a polling result and the change cache."""

from __future__ import annotations

from collections.abc import Iterable

from .cache import ChangeCache
from .models import PolledEntry


def compute_changed(cache: ChangeCache, polled_entries: Iterable[PolledEntry]) -> list[str]:
    """
    Return ids that are new or whose version stamp moved, in poll order.

    Stamps are written to the cache before any detail fetch so a failed fetch
    cannot make the same transition show up again on the next poll. Ids the
    poll no longer returns stay cached.
    """
    changed: list[str] = []
    for entry in polled_entries:
        if cache.observe(entry) and entry.id not in changed:
            changed.append(entry.id)
    return changed
