"""Import smoke tests for package modules."""

from importlib import import_module

import opcollection_watch


MODULES = [
    "opcollection_watch.cache",
    "opcollection_watch.client",
    "opcollection_watch.config",
    "opcollection_watch.diff",
    "opcollection_watch.errors",
    "opcollection_watch.logging",
    "opcollection_watch.models",
    "opcollection_watch.poller",
    "opcollection_watch.queries",
    "opcollection_watch.stream",
    "opcollection_watch.testing",
]


def test_core_modules_import_cleanly() -> None:
    for module in MODULES:
        assert import_module(module) is not None


def test_package_exports_resolve() -> None:
    for name in opcollection_watch.__all__:
        assert getattr(opcollection_watch, name) is not None
