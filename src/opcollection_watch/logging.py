"""Logging setup for processes that run collection watches."""

from __future__ import annotations

import logging

LOGGER_NAME = "opcollection_watch"

# httpx logs every request line at INFO; one per poll is noise.
_CHATTY_LOGGERS = ("httpx", "httpcore")


def configure_logging(debug: bool = False) -> None:
    """Configure root output and set watch and transport logger levels."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logging.getLogger(LOGGER_NAME).setLevel(logging.DEBUG if debug else logging.INFO)
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)
