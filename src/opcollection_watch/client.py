"""
Platform API client for operation collections.

Runs the three collection queries (full, polling, entries-by-id) as GraphQL
POSTs over one shared ``httpx.AsyncClient``. Remote typed errors come back as
``CollectionResult`` variants; everything else that goes wrong on the wire
raises ``RemoteTransportFailure``. No retries happen here.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Optional, Protocol

import httpx

from ._version import __version__
from .config import PlatformApiConfig
from .errors import CollectionError, RemoteTransportFailure
from .models import CollectionResult, OperationEntry
from .queries import (
    OPERATION_COLLECTION_ENTRIES_QUERY,
    OPERATION_COLLECTION_POLLING_QUERY,
    OPERATION_COLLECTION_QUERY,
    collection_variables,
    entries_variables,
    parse_collection,
    parse_collection_entries,
    parse_polling_collection,
)

logger = logging.getLogger(__name__)


class CollectionClient(Protocol):
    """The collection queries a watch depends on, plus teardown."""

    async def fetch_full(self, collection_id: str) -> CollectionResult: ...

    async def fetch_poll(self, collection_id: str) -> CollectionResult: ...

    async def fetch_details(self, entry_ids: Sequence[str]) -> list[OperationEntry]: ...

    async def aclose(self) -> None: ...


CLIENT_NAME_HEADER = "apollographql-client-name"
CLIENT_VERSION_HEADER = "apollographql-client-version"
API_KEY_HEADER = "x-api-key"


class PlatformApiClient:
    """Fetch operation collections from the platform GraphQL API."""

    def __init__(
        self,
        config: PlatformApiConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "PlatformApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.config.timeout_seconds,
                transport=self._transport,
            )
        return self._client

    def _headers(self) -> dict[str, str]:
        api_key = self.config.key.get_secret_value()
        try:
            api_key.encode("ascii")
        except UnicodeEncodeError as exc:
            # Do not echo the key itself.
            raise RemoteTransportFailure("API key is not a valid header value") from exc
        return {
            CLIENT_NAME_HEADER: self.config.client_name,
            CLIENT_VERSION_HEADER: __version__,
            API_KEY_HEADER: api_key,
        }

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch_full(self, collection_id: str) -> CollectionResult:
        data = await self._graphql_request(
            OPERATION_COLLECTION_QUERY,
            collection_variables(collection_id),
            operation_name="OperationCollectionQuery",
        )
        return _parse(parse_collection, data)

    async def fetch_poll(self, collection_id: str) -> CollectionResult:
        data = await self._graphql_request(
            OPERATION_COLLECTION_POLLING_QUERY,
            collection_variables(collection_id),
            operation_name="OperationCollectionPollingQuery",
        )
        return _parse(parse_polling_collection, data)

    async def fetch_details(self, entry_ids: Sequence[str]) -> list[OperationEntry]:
        data = await self._graphql_request(
            OPERATION_COLLECTION_ENTRIES_QUERY,
            entries_variables(list(entry_ids)),
            operation_name="OperationCollectionEntriesQuery",
        )
        return _parse(parse_collection_entries, data)

    async def _graphql_request(
        self,
        query: str,
        variables: dict[str, Any],
        *,
        operation_name: str,
    ) -> Mapping[str, Any]:
        client = self._get_client()
        try:
            response = await client.post(
                self.config.platform_api_url,
                json={"query": query, "variables": variables, "operationName": operation_name},
                headers=self._headers(),
            )
            response.raise_for_status()
            body = response.json()
        except httpx.TimeoutException as exc:
            raise RemoteTransportFailure(f"{operation_name} timed out: {exc}") from exc
        except httpx.HTTPStatusError as exc:
            raise RemoteTransportFailure(
                f"{operation_name} failed with HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise RemoteTransportFailure(f"{operation_name} request failed: {exc}") from exc
        except ValueError as exc:
            raise RemoteTransportFailure(f"{operation_name} returned invalid JSON: {exc}") from exc

        if not isinstance(body, Mapping):
            raise RemoteTransportFailure(f"{operation_name} returned a non-object body")

        data = body.get("data")
        if data is None:
            messages = [
                str(error.get("message"))
                for error in body.get("errors") or []
                if isinstance(error, Mapping) and error.get("message")
            ]
            detail = "; ".join(messages) if messages else "missing data"
            raise RemoteTransportFailure(detail)
        if not isinstance(data, Mapping):
            raise RemoteTransportFailure(f"{operation_name} returned non-object data")

        logger.debug("%s succeeded", operation_name)
        return data


def _parse(parser: Any, data: Mapping[str, Any]) -> Any:
    try:
        return parser(data)
    except CollectionError:
        raise
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise RemoteTransportFailure(f"malformed response payload: {exc}") from exc
