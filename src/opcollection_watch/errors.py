"""Error taxonomy for stable module boundaries."""

from __future__ import annotations


class CollectionWatchError(Exception):
    """Base exception for opcollection-watch."""


class ConfigError(CollectionWatchError):
    """Raised when platform API configuration is invalid or missing."""


class ChannelClosed(CollectionWatchError):
    """Raised on send when the consumer has closed its end of the event stream."""


class CollectionError(CollectionWatchError):
    """Classified failure talking to the platform API about a collection."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RemoteNotFound(CollectionError):
    """The platform API reported that the collection does not exist."""


class RemotePermissionDenied(CollectionError):
    """The API key is not allowed to read the collection."""


class RemoteValidationFailed(CollectionError):
    """The platform API rejected the request arguments."""


class RemoteTransportFailure(CollectionError):
    """Network, timeout, status or payload decoding failure."""
