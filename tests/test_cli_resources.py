from __future__ import annotations

import json
from pathlib import Path

from nrclient.cli import app
from nrclient.errors import ApiAccessKeyMutationError
from nrclient.models.api_access import (
    ApiAccessDeletedKey,
    ApiAccessKey,
    ApiAccessKeyError,
    ApiAccessKeyType,
)
from nrclient.models.nerdstorage import CollectionDocument
from nrclient.models.workloads import Workload


class _Recorder:
    instances: list["_Recorder"]

    def __init__(self, config) -> None:
        self.config = config
        self.calls: list[tuple[str, tuple[object, ...]]] = []
        type(self).instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc: object) -> None:
        return None


class StubApiAccessClient(_Recorder):
    instances: list["StubApiAccessClient"] = []

    def search_keys(self, query):
        self.calls.append(("search", (query,)))
        return [ApiAccessKey(id="k1", name="ingest", type=ApiAccessKeyType.INGEST)]

    def get_key(self, key_id, key_type):
        self.calls.append(("get", (key_id, key_type)))
        return ApiAccessKey(id=key_id, type=key_type)

    def create_keys(self, keys):
        self.calls.append(("create", (keys,)))
        if not keys.ingest and not keys.user:
            raise ApiAccessKeyMutationError(
                [ApiAccessKeyError(type="INVALID", message="nothing to create")]
            )
        return [ApiAccessKey(id="new-1")]

    def update_keys(self, keys):
        self.calls.append(("update", (keys,)))
        return [ApiAccessKey(id="k1")]

    def delete_keys(self, keys):
        self.calls.append(("delete", (keys,)))
        return [ApiAccessDeletedKey(id=key) for key in keys.ingest_key_ids + keys.user_key_ids]


class StubWorkloadsClient(_Recorder):
    instances: list["StubWorkloadsClient"] = []

    def list_workloads(self, account_id):
        self.calls.append(("list", (account_id,)))
        return [Workload(id=1, guid="guid-1", name="checkout")]

    def get_workload(self, account_id, workload_id):
        self.calls.append(("get", (account_id, workload_id)))
        return Workload(id=workload_id, guid="guid-1", name="checkout")

    def create_workload(self, account_id, workload):
        self.calls.append(("create", (account_id, workload)))
        return Workload(guid="guid-new", name=workload.name)

    def duplicate_workload(self, account_id, source_guid, workload=None):
        self.calls.append(("duplicate", (account_id, source_guid, workload)))
        return Workload(guid="guid-copy")

    def update_workload(self, guid, workload):
        self.calls.append(("update", (guid, workload)))
        return Workload(guid=guid)

    def delete_workload(self, guid):
        self.calls.append(("delete", (guid,)))
        return Workload(guid=guid)


class StubNerdStorageClient(_Recorder):
    instances: list["StubNerdStorageClient"] = []

    def __getattr__(self, name: str):
        def record(*args):
            self.calls.append((name, args))
            if name.startswith("get_collection"):
                return [CollectionDocument(id="doc-1", document={"a": 1})]
            if name.startswith("get_document"):
                return None if args[-1].document_id == "missing" else {"a": 1}
            if name.startswith("write_document"):
                return args[-1].document
            return True

        return record


def _install(monkeypatch, target: str, stub: type[_Recorder]) -> None:
    stub.instances = []
    monkeypatch.setattr(target, stub)


def test_keys_commands(cli_runner, monkeypatch) -> None:
    _install(monkeypatch, "nrclient.cli.keys.ApiAccessClient", StubApiAccessClient)

    result = cli_runner.invoke(app, ["keys", "search", "--type", "INGEST", "--account-id", "1"])
    assert result.exit_code == 0, result.output
    query = StubApiAccessClient.instances[0].calls[0][1][0]
    assert query.types == [ApiAccessKeyType.INGEST]
    assert query.scope.account_ids == [1]

    result = cli_runner.invoke(app, ["keys", "get", "k1", "--type", "USER"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"id": "k1", "type": "USER"}

    payload = json.dumps({"user": [{"accountId": 1, "userId": 2, "name": "ci"}]})
    result = cli_runner.invoke(app, ["keys", "create", "--payload", payload])
    assert result.exit_code == 0, result.output
    assert "new-1" in result.output

    result = cli_runner.invoke(app, ["keys", "delete", "--user-id", "k9"])
    assert result.exit_code == 0, result.output
    deleted = StubApiAccessClient.instances[-1].calls[0][1][0]
    assert deleted.user_key_ids == ["k9"]


def test_keys_create_reports_mutation_errors(cli_runner, monkeypatch) -> None:
    _install(monkeypatch, "nrclient.cli.keys.ApiAccessClient", StubApiAccessClient)

    result = cli_runner.invoke(app, ["keys", "create", "--payload", "{}"])

    assert result.exit_code == 1
    assert "INVALID: nothing to create" in result.output


def test_keys_update_from_yaml_file(cli_runner, monkeypatch, tmp_path: Path) -> None:
    _install(monkeypatch, "nrclient.cli.keys.ApiAccessClient", StubApiAccessClient)
    spec = tmp_path / "keys.yaml"
    spec.write_text("ingest:\n  - keyId: k1\n    notes: rotated\n", encoding="utf-8")

    result = cli_runner.invoke(app, ["keys", "update", "--file", str(spec)])

    assert result.exit_code == 0, result.output
    keys = StubApiAccessClient.instances[0].calls[0][1][0]
    assert keys.ingest[0].key_id == "k1"
    assert keys.ingest[0].notes == "rotated"


def test_keys_delete_requires_ids(cli_runner, monkeypatch) -> None:
    _install(monkeypatch, "nrclient.cli.keys.ApiAccessClient", StubApiAccessClient)

    result = cli_runner.invoke(app, ["keys", "delete"])

    assert result.exit_code != 0


def test_workloads_commands(cli_runner, monkeypatch) -> None:
    _install(monkeypatch, "nrclient.cli.workloads.WorkloadsClient", StubWorkloadsClient)
    monkeypatch.setenv("NEW_RELIC_ACCOUNT_ID", "1234")

    result = cli_runner.invoke(app, ["workloads", "list"])
    assert result.exit_code == 0, result.output
    assert "checkout" in result.output
    assert StubWorkloadsClient.instances[0].calls == [("list", (1234,))]

    result = cli_runner.invoke(app, ["workloads", "get", "1", "--account-id", "99"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["guid"] == "guid-1"

    result = cli_runner.invoke(
        app, ["workloads", "create", "--name", "new", "--entity-guid", "g1"]
    )
    assert result.exit_code == 0, result.output
    _, (account_id, workload) = StubWorkloadsClient.instances[2].calls[0]
    assert account_id == 1234
    assert workload.entity_guids == ["g1"]

    result = cli_runner.invoke(app, ["workloads", "duplicate", "guid-1", "--name", "copy"])
    assert result.exit_code == 0, result.output
    assert StubWorkloadsClient.instances[3].calls[0][1][2].name == "copy"

    result = cli_runner.invoke(
        app, ["workloads", "update", "guid-1", "--payload", '{"name": "renamed"}']
    )
    assert result.exit_code == 0, result.output
    assert StubWorkloadsClient.instances[4].calls[0][1][1].name == "renamed"

    result = cli_runner.invoke(app, ["workloads", "delete", "guid-1"])
    assert result.exit_code == 0, result.output
    assert StubWorkloadsClient.instances[5].calls == [("delete", ("guid-1",))]


def test_workloads_create_requires_name_or_payload(cli_runner, monkeypatch) -> None:
    _install(monkeypatch, "nrclient.cli.workloads.WorkloadsClient", StubWorkloadsClient)

    result = cli_runner.invoke(app, ["workloads", "create", "--account-id", "1"])

    assert result.exit_code != 0
    assert not StubWorkloadsClient.instances


def test_storage_scopes(cli_runner, monkeypatch) -> None:
    _install(monkeypatch, "nrclient.cli.storage.NerdStorageClient", StubNerdStorageClient)
    base = ["--package-id", "pkg", "--collection", "prefs"]

    result = cli_runner.invoke(app, ["storage", "get-collection", *base, "--account-id", "1"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == [{"id": "doc-1", "document": {"a": 1}}]
    assert StubNerdStorageClient.instances[0].calls[0][0] == "get_collection_with_account_scope"

    result = cli_runner.invoke(
        app,
        ["storage", "write-document", *base, "--document-id", "ui", "--payload", '{"a": 1}'],
    )
    assert result.exit_code == 0, result.output
    assert StubNerdStorageClient.instances[1].calls[0][0] == "write_document_with_user_scope"

    result = cli_runner.invoke(
        app, ["storage", "delete-collection", *base, "--entity-guid", "guid-1"]
    )
    assert result.exit_code == 0, result.output
    assert StubNerdStorageClient.instances[2].calls[0][0] == "delete_collection_with_entity_scope"


def test_storage_missing_document_exits_non_zero(cli_runner, monkeypatch) -> None:
    _install(monkeypatch, "nrclient.cli.storage.NerdStorageClient", StubNerdStorageClient)

    result = cli_runner.invoke(
        app,
        ["storage", "get-document", "--package-id", "pkg", "--collection", "c", "--document-id", "missing"],
    )

    assert result.exit_code == 1
    assert "Document not found" in result.output


def test_storage_rejects_two_scopes(cli_runner, monkeypatch) -> None:
    _install(monkeypatch, "nrclient.cli.storage.NerdStorageClient", StubNerdStorageClient)

    result = cli_runner.invoke(
        app,
        [
            "storage",
            "delete-document",
            "--package-id",
            "pkg",
            "--collection",
            "c",
            "--document-id",
            "d",
            "--account-id",
            "1",
            "--entity-guid",
            "g",
        ],
    )

    assert result.exit_code != 0
    assert not StubNerdStorageClient.instances
