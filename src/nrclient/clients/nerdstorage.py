"""Client for NerdStorage documents and collections.

NerdStorage documents live under a package id, a collection name and a
document id, and are scoped to an account, an entity or the current user.
Every request carries the package id in the ``NewRelic-Package-Id`` header.
"""

from __future__ import annotations

from types import TracebackType
from typing import Any

from ..config import ClientConfig
from ..errors import NotFoundError
from ..models.nerdstorage import (
    CollectionDocument,
    DeleteCollectionInput,
    DeleteDocumentInput,
    GetCollectionInput,
    GetDocumentInput,
    NerdStorageScope,
    WriteDocumentInput,
)
from ..nerdgraph import NerdGraphClient, dig

PACKAGE_ID_HEADER = "NewRelic-Package-Id"

QUERY_COLLECTION_ACCOUNT = """query($accountId: Int!, $collection: String!) {
  actor {
    account(id: $accountId) {
      nerdStorage {
        collection(collection: $collection) {
          id
          document
        }
      }
    }
  }
}"""

QUERY_COLLECTION_ENTITY = """query($entityGuid: EntityGuid!, $collection: String!) {
  actor {
    entity(guid: $entityGuid) {
      nerdStorage {
        collection(collection: $collection) {
          id
          document
        }
      }
    }
  }
}"""

QUERY_COLLECTION_USER = """query($collection: String!) {
  actor {
    nerdStorage {
      collection(collection: $collection) {
        id
        document
      }
    }
  }
}"""

QUERY_DOCUMENT_ACCOUNT = """query($accountId: Int!, $collection: String!, $documentId: String!) {
  actor {
    account(id: $accountId) {
      nerdStorage {
        document(collection: $collection, documentId: $documentId)
      }
    }
  }
}"""

QUERY_DOCUMENT_ENTITY = """query($entityGuid: EntityGuid!, $collection: String!, $documentId: String!) {
  actor {
    entity(guid: $entityGuid) {
      nerdStorage {
        document(collection: $collection, documentId: $documentId)
      }
    }
  }
}"""

QUERY_DOCUMENT_USER = """query($collection: String!, $documentId: String!) {
  actor {
    nerdStorage {
      document(collection: $collection, documentId: $documentId)
    }
  }
}"""

QUERY_USER_ID = """query {
  actor {
    user {
      id
    }
  }
}"""

MUTATION_WRITE_DOCUMENT = """mutation($collection: String!, $document: NerdStorageDocument!, $documentId: String!, $scope: NerdStorageScopeInput!) {
  nerdStorageWriteDocument(collection: $collection, document: $document, documentId: $documentId, scope: $scope)
}"""

MUTATION_DELETE_DOCUMENT = """mutation($collection: String!, $documentId: String!, $scope: NerdStorageScopeInput!) {
  nerdStorageDeleteDocument(collection: $collection, documentId: $documentId, scope: $scope) {
    deleted
  }
}"""

MUTATION_DELETE_COLLECTION = """mutation($collection: String!, $scope: NerdStorageScopeInput!) {
  nerdStorageDeleteCollection(collection: $collection, scope: $scope) {
    deleted
  }
}"""

_ACCOUNT_PATH = ("actor", "account", "nerdStorage")
_ENTITY_PATH = ("actor", "entity", "nerdStorage")
_USER_PATH = ("actor", "nerdStorage")


class NerdStorageClient:
    """Read, write and delete NerdStorage documents in any scope."""

    def __init__(self, config: ClientConfig, *, nerdgraph: NerdGraphClient | None = None) -> None:
        self.config = config
        self.nerdgraph = nerdgraph or NerdGraphClient(config)

    def close(self) -> None:
        self.nerdgraph.close()

    def __enter__(self) -> NerdStorageClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @staticmethod
    def _headers(package_id: str) -> dict[str, str]:
        return {PACKAGE_ID_HEADER: package_id}

    @staticmethod
    def _scope(scope: NerdStorageScope, scope_id: str | int) -> dict[str, str]:
        return {"id": str(scope_id), "name": scope.value}

    def _user_scope(self, package_id: str) -> dict[str, str]:
        data = self.nerdgraph.query(QUERY_USER_ID, headers=self._headers(package_id))
        user_id = dig(data, "actor", "user", "id")
        if user_id is None:
            raise NotFoundError("unable to resolve the current user id for NerdStorage")
        return self._scope(NerdStorageScope.ACTOR, user_id)

    # Reads

    def _get_collection(
        self,
        query: str,
        path: tuple[str, ...],
        variables: dict[str, Any],
        params: GetCollectionInput,
    ) -> list[CollectionDocument]:
        variables["collection"] = params.collection
        data = self.nerdgraph.query(query, variables, headers=self._headers(params.package_id))
        items = dig(data, *path, "collection") or []
        return [CollectionDocument.model_validate(item) for item in items]

    def _get_document(
        self,
        query: str,
        path: tuple[str, ...],
        variables: dict[str, Any],
        params: GetDocumentInput,
    ) -> Any:
        variables.update({"collection": params.collection, "documentId": params.document_id})
        data = self.nerdgraph.query(query, variables, headers=self._headers(params.package_id))
        return dig(data, *path, "document")

    def get_collection_with_account_scope(
        self, account_id: int, params: GetCollectionInput
    ) -> list[CollectionDocument]:
        return self._get_collection(
            QUERY_COLLECTION_ACCOUNT, _ACCOUNT_PATH, {"accountId": account_id}, params
        )

    def get_collection_with_entity_scope(
        self, entity_guid: str, params: GetCollectionInput
    ) -> list[CollectionDocument]:
        return self._get_collection(
            QUERY_COLLECTION_ENTITY, _ENTITY_PATH, {"entityGuid": entity_guid}, params
        )

    def get_collection_with_user_scope(
        self, params: GetCollectionInput
    ) -> list[CollectionDocument]:
        return self._get_collection(QUERY_COLLECTION_USER, _USER_PATH, {}, params)

    def get_document_with_account_scope(self, account_id: int, params: GetDocumentInput) -> Any:
        """Return the stored JSON document, or ``None`` when it does not exist."""

        return self._get_document(
            QUERY_DOCUMENT_ACCOUNT, _ACCOUNT_PATH, {"accountId": account_id}, params
        )

    def get_document_with_entity_scope(self, entity_guid: str, params: GetDocumentInput) -> Any:
        return self._get_document(
            QUERY_DOCUMENT_ENTITY, _ENTITY_PATH, {"entityGuid": entity_guid}, params
        )

    def get_document_with_user_scope(self, params: GetDocumentInput) -> Any:
        return self._get_document(QUERY_DOCUMENT_USER, _USER_PATH, {}, params)

    # Writes

    def _write_document(self, scope: dict[str, str], params: WriteDocumentInput) -> Any:
        data = self.nerdgraph.query(
            MUTATION_WRITE_DOCUMENT,
            {
                "collection": params.collection,
                "document": params.document,
                "documentId": params.document_id,
                "scope": scope,
            },
            headers=self._headers(params.package_id),
        )
        return data.get("nerdStorageWriteDocument")

    def _delete_document(self, scope: dict[str, str], params: DeleteDocumentInput) -> bool:
        data = self.nerdgraph.query(
            MUTATION_DELETE_DOCUMENT,
            {"collection": params.collection, "documentId": params.document_id, "scope": scope},
            headers=self._headers(params.package_id),
        )
        deleted = dig(data, "nerdStorageDeleteDocument", "deleted") or 0
        return int(deleted) > 0

    def _delete_collection(self, scope: dict[str, str], params: DeleteCollectionInput) -> bool:
        data = self.nerdgraph.query(
            MUTATION_DELETE_COLLECTION,
            {"collection": params.collection, "scope": scope},
            headers=self._headers(params.package_id),
        )
        deleted = dig(data, "nerdStorageDeleteCollection", "deleted") or 0
        return int(deleted) > 0

    def write_document_with_account_scope(
        self, account_id: int, params: WriteDocumentInput
    ) -> Any:
        return self._write_document(self._scope(NerdStorageScope.ACCOUNT, account_id), params)

    def write_document_with_entity_scope(
        self, entity_guid: str, params: WriteDocumentInput
    ) -> Any:
        return self._write_document(self._scope(NerdStorageScope.ENTITY, entity_guid), params)

    def write_document_with_user_scope(self, params: WriteDocumentInput) -> Any:
        return self._write_document(self._user_scope(params.package_id), params)

    def delete_document_with_account_scope(
        self, account_id: int, params: DeleteDocumentInput
    ) -> bool:
        return self._delete_document(self._scope(NerdStorageScope.ACCOUNT, account_id), params)

    def delete_document_with_entity_scope(
        self, entity_guid: str, params: DeleteDocumentInput
    ) -> bool:
        return self._delete_document(self._scope(NerdStorageScope.ENTITY, entity_guid), params)

    def delete_document_with_user_scope(self, params: DeleteDocumentInput) -> bool:
        return self._delete_document(self._user_scope(params.package_id), params)

    def delete_collection_with_account_scope(
        self, account_id: int, params: DeleteCollectionInput
    ) -> bool:
        return self._delete_collection(self._scope(NerdStorageScope.ACCOUNT, account_id), params)

    def delete_collection_with_entity_scope(
        self, entity_guid: str, params: DeleteCollectionInput
    ) -> bool:
        return self._delete_collection(self._scope(NerdStorageScope.ENTITY, entity_guid), params)

    def delete_collection_with_user_scope(self, params: DeleteCollectionInput) -> bool:
        return self._delete_collection(self._user_scope(params.package_id), params)


__all__ = [
    "MUTATION_DELETE_COLLECTION",
    "MUTATION_DELETE_DOCUMENT",
    "MUTATION_WRITE_DOCUMENT",
    "NerdStorageClient",
    "PACKAGE_ID_HEADER",
]
