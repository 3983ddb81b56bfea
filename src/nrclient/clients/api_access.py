"""Client for NerdGraph API access key management."""

from __future__ import annotations

from types import TracebackType
from typing import Any

from ..config import ClientConfig
from ..errors import ApiAccessKeyMutationError, NotFoundError
from ..models.api_access import (
    ApiAccessCreateInput,
    ApiAccessDeletedKey,
    ApiAccessDeleteInput,
    ApiAccessKey,
    ApiAccessKeyError,
    ApiAccessKeySearchQuery,
    ApiAccessKeyType,
    ApiAccessUpdateInput,
)
from ..models.common import dump_payload
from ..nerdgraph import NerdGraphClient, dig

GRAPHQL_KEY_FIELDS = """
    id
    key
    name
    notes
    type
    ... on ApiAccessIngestKey {
      accountId
      ingestType
    }
    ... on ApiAccessUserKey {
      accountId
      userId
    }
"""

GRAPHQL_KEY_ERROR_FIELDS = """
    errors {
      message
      type
      ... on ApiAccessIngestKeyError {
        id
        ingestErrorType: errorType
        accountId
        ingestType
      }
      ... on ApiAccessUserKeyError {
        id
        userErrorType: errorType
        accountId
        userId
      }
    }
"""

MUTATION_CREATE_KEYS = (
    """mutation($keys: ApiAccessCreateInput!) {
  apiAccessCreateKeys(keys: $keys) {
    createdKeys {"""
    + GRAPHQL_KEY_FIELDS
    + "}"
    + GRAPHQL_KEY_ERROR_FIELDS
    + """}
}"""
)

QUERY_GET_KEY = (
    """query($id: ID!, $keyType: ApiAccessKeyType!) {
  actor {
    apiAccess {
      key(id: $id, keyType: $keyType) {"""
    + GRAPHQL_KEY_FIELDS
    + """}
    }
  }
}"""
)

QUERY_SEARCH_KEYS = (
    """query($query: ApiAccessKeySearchQuery!) {
  actor {
    apiAccess {
      keySearch(query: $query) {
        keys {"""
    + GRAPHQL_KEY_FIELDS
    + """}
      }
    }
  }
}"""
)

MUTATION_UPDATE_KEYS = (
    """mutation($keys: ApiAccessUpdateInput!) {
  apiAccessUpdateKeys(keys: $keys) {
    updatedKeys {"""
    + GRAPHQL_KEY_FIELDS
    + "}"
    + GRAPHQL_KEY_ERROR_FIELDS
    + """}
}"""
)

MUTATION_DELETE_KEYS = (
    """mutation($keys: ApiAccessDeleteInput!) {
  apiAccessDeleteKeys(keys: $keys) {
    deletedKeys {
      id
    }"""
    + GRAPHQL_KEY_ERROR_FIELDS
    + """}
}"""
)


class ApiAccessClient:
    """Create, look up, update and delete ingest and user API keys."""

    def __init__(self, config: ClientConfig, *, nerdgraph: NerdGraphClient | None = None) -> None:
        self.config = config
        self.nerdgraph = nerdgraph or NerdGraphClient(config)

    def close(self) -> None:
        self.nerdgraph.close()

    def __enter__(self) -> ApiAccessClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @staticmethod
    def _raise_for_errors(payload: dict[str, Any]) -> None:
        raw_errors = payload.get("errors") or []
        if raw_errors:
            raise ApiAccessKeyMutationError(
                [ApiAccessKeyError.model_validate(item) for item in raw_errors]
            )

    def create_keys(self, keys: ApiAccessCreateInput) -> list[ApiAccessKey]:
        """Create ingest and/or user keys, possibly across several accounts."""

        data = self.nerdgraph.query(MUTATION_CREATE_KEYS, {"keys": dump_payload(keys)})
        payload = data.get("apiAccessCreateKeys") or {}
        self._raise_for_errors(payload)
        return [ApiAccessKey.model_validate(item) for item in payload.get("createdKeys") or []]

    def get_key(self, key_id: str, key_type: ApiAccessKeyType | str) -> ApiAccessKey:
        key_type_value = ApiAccessKeyType(key_type).value
        data = self.nerdgraph.query(QUERY_GET_KEY, {"id": key_id, "keyType": key_type_value})
        key = dig(data, "actor", "apiAccess", "key")
        if not key:
            raise NotFoundError(f"no {key_type_value.lower()} key found for id {key_id}")
        return ApiAccessKey.model_validate(key)

    def search_keys(self, query: ApiAccessKeySearchQuery) -> list[ApiAccessKey]:
        """Return keys visible to the current user that match ``query``."""

        data = self.nerdgraph.query(QUERY_SEARCH_KEYS, {"query": dump_payload(query)})
        keys = dig(data, "actor", "apiAccess", "keySearch", "keys") or []
        return [ApiAccessKey.model_validate(item) for item in keys]

    def update_keys(self, keys: ApiAccessUpdateInput) -> list[ApiAccessKey]:
        data = self.nerdgraph.query(MUTATION_UPDATE_KEYS, {"keys": dump_payload(keys)})
        payload = data.get("apiAccessUpdateKeys") or {}
        self._raise_for_errors(payload)
        return [ApiAccessKey.model_validate(item) for item in payload.get("updatedKeys") or []]

    def delete_keys(self, keys: ApiAccessDeleteInput) -> list[ApiAccessDeletedKey]:
        data = self.nerdgraph.query(MUTATION_DELETE_KEYS, {"keys": dump_payload(keys)})
        payload = data.get("apiAccessDeleteKeys") or {}
        self._raise_for_errors(payload)
        return [
            ApiAccessDeletedKey.model_validate(item) for item in payload.get("deletedKeys") or []
        ]


__all__ = [
    "ApiAccessClient",
]
