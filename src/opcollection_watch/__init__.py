"""Incremental change-detection watch for platform API operation collections."""

from ._version import __version__
from .cache import ChangeCache
from .client import CollectionClient, PlatformApiClient
from .config import (
    MAX_COLLECTION_SIZE_FOR_POLLING,
    PLATFORM_API_URL,
    PlatformApiConfig,
    load_platform_api_config,
)
from .diff import compute_changed
from .errors import (
    ChannelClosed,
    CollectionError,
    CollectionWatchError,
    ConfigError,
    RemoteNotFound,
    RemotePermissionDenied,
    RemoteTransportFailure,
    RemoteValidationFailed,
)
from .logging import configure_logging
from .models import (
    CacheRecord,
    CollectionEvent,
    CollectionFailure,
    CollectionFound,
    CollectionNotFound,
    CollectionPermissionDenied,
    CollectionResult,
    CollectionValidationFailed,
    OperationData,
    OperationEntry,
    PolledEntry,
    SnapshotUpdate,
)
from .poller import CollectionPoller, CollectionSource, WatchState
from .stream import EventChannel, EventStream

__all__ = [
    "CacheRecord",
    "ChangeCache",
    "ChannelClosed",
    "CollectionClient",
    "CollectionError",
    "CollectionEvent",
    "CollectionFailure",
    "CollectionFound",
    "CollectionNotFound",
    "CollectionPermissionDenied",
    "CollectionPoller",
    "CollectionResult",
    "CollectionSource",
    "CollectionValidationFailed",
    "CollectionWatchError",
    "ConfigError",
    "EventChannel",
    "EventStream",
    "MAX_COLLECTION_SIZE_FOR_POLLING",
    "OperationData",
    "OperationEntry",
    "PLATFORM_API_URL",
    "PlatformApiClient",
    "PlatformApiConfig",
    "PolledEntry",
    "RemoteNotFound",
    "RemotePermissionDenied",
    "RemoteTransportFailure",
    "RemoteValidationFailed",
    "SnapshotUpdate",
    "WatchState",
    "__version__",
    "compute_changed",
    "configure_logging",
    "load_platform_api_config",
]
