"""GraphQL documents and response parsers for the operation collection queries."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from .errors import RemoteTransportFailure
from .models import (
    CollectionFound,
    CollectionNotFound,
    CollectionPermissionDenied,
    CollectionResult,
    CollectionValidationFailed,
    OperationData,
    OperationEntry,
    PolledEntry,
)

_OPERATION_DATA_FIELDS = """
      operationData {
        currentOperationRevision {
          body
          headers {
            name
            value
          }
          variables
        }
      }
"""

_ERROR_MEMBERS = """
    ... on NotFoundError {
      message
    }
    ... on PermissionError {
      message
    }
    ... on ValidationError {
      message
    }
"""

OPERATION_COLLECTION_QUERY = (
    """
query OperationCollectionQuery($operationCollectionId: ID!) {
  operationCollection(id: $operationCollectionId) {
    __typename
    ... on OperationCollection {
      operations {
        id
        lastUpdatedAt
"""
    + _OPERATION_DATA_FIELDS
    + """
      }
    }
"""
    + _ERROR_MEMBERS
    + """
  }
}
"""
)

OPERATION_COLLECTION_POLLING_QUERY = (
    """
query OperationCollectionPollingQuery($operationCollectionId: ID!) {
  operationCollection(id: $operationCollectionId) {
    __typename
    ... on OperationCollection {
      operations {
        id
        lastUpdatedAt
      }
    }
"""
    + _ERROR_MEMBERS
    + """
  }
}
"""
)

OPERATION_COLLECTION_ENTRIES_QUERY = (
    """
query OperationCollectionEntriesQuery($collectionEntryIds: [ID!]!) {
  operationCollectionEntries(collectionEntryIds: $collectionEntryIds) {
    id
    lastUpdatedAt
"""
    + _OPERATION_DATA_FIELDS
    + """
  }
}
"""
)

_ERROR_VARIANTS: dict[str, Callable[[str], CollectionResult]] = {
    "NotFoundError": CollectionNotFound,
    "PermissionError": CollectionPermissionDenied,
    "ValidationError": CollectionValidationFailed,
}


def collection_variables(collection_id: str) -> dict[str, Any]:
    return {"operationCollectionId": collection_id}


def entries_variables(entry_ids: list[str]) -> dict[str, Any]:
    return {"collectionEntryIds": list(entry_ids)}


def parse_collection(data: Mapping[str, Any]) -> CollectionResult:
    """Parse a full ``operationCollection`` response, entries carry detail."""
    return _parse_collection_union(data, _parse_entry)


def parse_polling_collection(data: Mapping[str, Any]) -> CollectionResult:
    """Parse a polling ``operationCollection`` response, entries carry id and stamp only."""
    return _parse_collection_union(data, _parse_polled_entry)


def parse_collection_entries(data: Mapping[str, Any]) -> list[OperationEntry]:
    entries = _require(data, "operationCollectionEntries")
    if not isinstance(entries, list):
        raise RemoteTransportFailure("operationCollectionEntries is not a list")
    return [_parse_entry(entry) for entry in entries]


def _parse_collection_union(
    data: Mapping[str, Any],
    parse_item: Callable[[Mapping[str, Any]], Any],
) -> CollectionResult:
    collection = _require(data, "operationCollection")
    if not isinstance(collection, Mapping):
        raise RemoteTransportFailure("operationCollection is not an object")

    typename = collection.get("__typename")
    if typename == "OperationCollection":
        operations = _require(collection, "operations")
        if not isinstance(operations, list):
            raise RemoteTransportFailure("operationCollection.operations is not a list")
        return CollectionFound(entries=tuple(parse_item(item) for item in operations))

    variant = _ERROR_VARIANTS.get(str(typename))
    if variant is None:
        raise RemoteTransportFailure(f"unexpected operationCollection type {typename!r}")
    return variant(str(collection.get("message") or typename))


def _parse_polled_entry(raw: Mapping[str, Any]) -> PolledEntry:
    return PolledEntry(
        id=str(_require(raw, "id")),
        last_updated_at=str(_require(raw, "lastUpdatedAt")),
    )


def _parse_entry(raw: Mapping[str, Any]) -> OperationEntry:
    operation_data = _require(raw, "operationData")
    revision = _require(operation_data, "currentOperationRevision")
    raw_headers = revision.get("headers")
    headers = None
    if raw_headers is not None:
        headers = tuple((str(header["name"]), str(header["value"])) for header in raw_headers)
    variables = revision.get("variables")
    return OperationEntry(
        id=str(_require(raw, "id")),
        last_updated_at=str(_require(raw, "lastUpdatedAt")),
        data=OperationData(
            body=str(_require(revision, "body")),
            variables=None if variables is None else str(variables),
            headers=headers,
        ),
    )


def _require(raw: Any, key: str) -> Any:
    if not isinstance(raw, Mapping) or raw.get(key) is None:
        raise RemoteTransportFailure(f"response is missing '{key}'")
    return raw[key]
