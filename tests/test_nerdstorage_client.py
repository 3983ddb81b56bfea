from __future__ import annotations

import json

import httpx
import pytest

from nrclient.clients.nerdstorage import (
    MUTATION_WRITE_DOCUMENT,
    PACKAGE_ID_HEADER,
    NerdStorageClient,
)
from nrclient.errors import NotFoundError
from nrclient.models.nerdstorage import (
    DeleteCollectionInput,
    DeleteDocumentInput,
    GetCollectionInput,
    GetDocumentInput,
    WriteDocumentInput,
)

NERDGRAPH_URL = "https://api.newrelic.com/graphql"
PACKAGE_ID = "ecaeb5e6-6bbd-4f12-8c37-000000000000"


def _ok(data: dict[str, object]) -> httpx.Response:
    return httpx.Response(200, json={"data": data})


def _body(route, index: int = 0) -> dict[str, object]:
    return json.loads(route.calls[index].request.content)


def test_get_collection_with_account_scope(respx_mock, client_config) -> None:
    route = respx_mock.post(NERDGRAPH_URL).mock(
        return_value=_ok(
            {
                "actor": {
                    "account": {
                        "nerdStorage": {
                            "collection": [
                                {"id": "doc-1", "document": {"a": 1}},
                                {"id": "doc-2", "document": {"b": 2}},
                            ]
                        }
                    }
                }
            }
        )
    )

    documents = NerdStorageClient(client_config).get_collection_with_account_scope(
        1234, GetCollectionInput(package_id=PACKAGE_ID, collection="prefs")
    )

    assert [doc.id for doc in documents] == ["doc-1", "doc-2"]
    assert documents[1].document == {"b": 2}
    request = route.calls[0].request
    assert request.headers[PACKAGE_ID_HEADER] == PACKAGE_ID
    assert _body(route)["variables"] == {"accountId": 1234, "collection": "prefs"}


def test_get_collection_with_entity_scope_empty(respx_mock, client_config) -> None:
    route = respx_mock.post(NERDGRAPH_URL).mock(
        return_value=_ok({"actor": {"entity": {"nerdStorage": {"collection": None}}}})
    )

    documents = NerdStorageClient(client_config).get_collection_with_entity_scope(
        "entity-guid", GetCollectionInput(package_id=PACKAGE_ID, collection="prefs")
    )

    assert documents == []
    assert _body(route)["variables"] == {"entityGuid": "entity-guid", "collection": "prefs"}


def test_get_document_with_user_scope(respx_mock, client_config) -> None:
    route = respx_mock.post(NERDGRAPH_URL).mock(
        return_value=_ok({"actor": {"nerdStorage": {"document": {"theme": "dark"}}}})
    )

    document = NerdStorageClient(client_config).get_document_with_user_scope(
        GetDocumentInput(package_id=PACKAGE_ID, collection="prefs", document_id="ui")
    )

    assert document == {"theme": "dark"}
    assert _body(route)["variables"] == {"collection": "prefs", "documentId": "ui"}


def test_get_document_missing_returns_none(respx_mock, client_config) -> None:
    respx_mock.post(NERDGRAPH_URL).mock(
        return_value=_ok({"actor": {"account": {"nerdStorage": {"document": None}}}})
    )

    document = NerdStorageClient(client_config).get_document_with_account_scope(
        1234, GetDocumentInput(package_id=PACKAGE_ID, collection="prefs", document_id="ui")
    )

    assert document is None


def test_write_document_with_account_scope(respx_mock, client_config) -> None:
    route = respx_mock.post(NERDGRAPH_URL).mock(
        return_value=_ok({"nerdStorageWriteDocument": {"theme": "dark"}})
    )

    written = NerdStorageClient(client_config).write_document_with_account_scope(
        1234,
        WriteDocumentInput(
            package_id=PACKAGE_ID, collection="prefs", document_id="ui", document={"theme": "dark"}
        ),
    )

    assert written == {"theme": "dark"}
    body = _body(route)
    assert body["query"] == MUTATION_WRITE_DOCUMENT
    assert body["variables"] == {
        "collection": "prefs",
        "document": {"theme": "dark"},
        "documentId": "ui",
        "scope": {"id": "1234", "name": "ACCOUNT"},
    }


def test_write_document_with_user_scope_looks_up_user(respx_mock, client_config) -> None:
    route = respx_mock.post(NERDGRAPH_URL).mock(
        side_effect=[
            _ok({"actor": {"user": {"id": 42}}}),
            _ok({"nerdStorageWriteDocument": {"x": 1}}),
        ]
    )

    NerdStorageClient(client_config).write_document_with_user_scope(
        WriteDocumentInput(
            package_id=PACKAGE_ID, collection="prefs", document_id="ui", document={"x": 1}
        )
    )

    assert route.call_count == 2
    assert _body(route, 1)["variables"]["scope"] == {"id": "42", "name": "ACTOR"}
    assert route.calls[1].request.headers[PACKAGE_ID_HEADER] == PACKAGE_ID


def test_user_scope_without_user_id_raises(respx_mock, client_config) -> None:
    respx_mock.post(NERDGRAPH_URL).mock(return_value=_ok({"actor": {"user": None}}))

    with pytest.raises(NotFoundError):
        NerdStorageClient(client_config).delete_document_with_user_scope(
            DeleteDocumentInput(package_id=PACKAGE_ID, collection="prefs", document_id="ui")
        )


def test_delete_document_with_entity_scope(respx_mock, client_config) -> None:
    route = respx_mock.post(NERDGRAPH_URL).mock(
        return_value=_ok({"nerdStorageDeleteDocument": {"deleted": 1}})
    )

    deleted = NerdStorageClient(client_config).delete_document_with_entity_scope(
        "entity-guid",
        DeleteDocumentInput(package_id=PACKAGE_ID, collection="prefs", document_id="ui"),
    )

    assert deleted is True
    assert _body(route)["variables"]["scope"] == {"id": "entity-guid", "name": "ENTITY"}


def test_delete_collection_reports_nothing_deleted(respx_mock, client_config) -> None:
    respx_mock.post(NERDGRAPH_URL).mock(
        return_value=_ok({"nerdStorageDeleteCollection": {"deleted": 0}})
    )

    deleted = NerdStorageClient(client_config).delete_collection_with_account_scope(
        1234, DeleteCollectionInput(package_id=PACKAGE_ID, collection="prefs")
    )

    assert deleted is False
