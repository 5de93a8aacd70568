"""Test-only utilities for deterministic watch assertions."""

from .fakes import ScriptedCollectionClient, SleepRecorder, entry, polled

__all__ = [
    "ScriptedCollectionClient",
    "SleepRecorder",
    "entry",
    "polled",
]
