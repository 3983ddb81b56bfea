from __future__ import annotations

import json

import pytest

from nrclient.cli import app
from nrclient.errors import HttpError, NotFoundError
from nrclient.models.alerts import IncidentPreferenceType, Policy, QueryPolicy


class StubAlertsClient:
    instances: list["StubAlertsClient"] = []

    def __init__(self, config) -> None:
        self.config = config
        self.calls: list[tuple[str, object]] = []
        self.closed = False
        StubAlertsClient.instances.append(self)

    def __enter__(self) -> "StubAlertsClient":
        return self

    def __exit__(self, *exc: object) -> None:
        self.closed = True

    def list_policies(self, name=None):
        self.calls.append(("list", name))
        return [Policy(id=1, name="web", incident_preference=IncidentPreferenceType.PER_POLICY)]

    def get_policy(self, policy_id):
        self.calls.append(("get", policy_id))
        if policy_id == 404:
            raise NotFoundError("no alert policy found for id 404")
        return Policy(id=policy_id, name="web")

    def create_policy(self, policy):
        self.calls.append(("create", policy))
        return Policy(id=5, name=policy.name)

    def update_policy(self, policy):
        self.calls.append(("update", policy))
        if policy.id == 500:
            raise HttpError(500, "Internal Server Error", details={"error": "boom"})
        return policy

    def delete_policy(self, policy_id):
        self.calls.append(("delete", policy_id))
        return Policy(id=policy_id)

    def delete_policy_mutation(self, account_id, policy_id):
        self.calls.append(("delete_mutation", (account_id, policy_id)))
        return QueryPolicy(id=policy_id, account_id=account_id)

    def query_policy_search(self, account_id, criteria=None):
        self.calls.append(("search", (account_id, criteria)))
        return [QueryPolicy(id=7, name="graph", account_id=account_id)]

    def query_policy(self, account_id, policy_id):
        self.calls.append(("query", (account_id, policy_id)))
        return QueryPolicy(id=policy_id, name="graph", account_id=account_id)


@pytest.fixture(autouse=True)
def stub_client(monkeypatch):
    StubAlertsClient.instances.clear()
    monkeypatch.setattr("nrclient.cli.alerts.AlertsClient", StubAlertsClient)
    return StubAlertsClient


def test_list_passes_name_filter(cli_runner) -> None:
    result = cli_runner.invoke(app, ["alerts", "list", "--name", "web"])

    assert result.exit_code == 0, result.output
    assert "web" in result.output
    client = StubAlertsClient.instances[0]
    assert client.calls == [("list", "web")]
    assert client.config.personal_api_key == "test-key"
    assert client.closed is True


def test_get_prints_json(cli_runner) -> None:
    result = cli_runner.invoke(app, ["alerts", "get", "3"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"id": 3, "name": "web"}


def test_get_missing_policy_exits_non_zero(cli_runner) -> None:
    result = cli_runner.invoke(app, ["alerts", "get", "404"])

    assert result.exit_code == 1
    assert "no alert policy found" in result.output


def test_create_builds_policy(cli_runner) -> None:
    result = cli_runner.invoke(
        app, ["alerts", "create", "--name", "new", "--incident-preference", "PER_CONDITION"]
    )

    assert result.exit_code == 0, result.output
    name, policy = StubAlertsClient.instances[0].calls[0]
    assert name == "create"
    assert policy.incident_preference is IncidentPreferenceType.PER_CONDITION
    assert "id=5" in result.output


def test_update_http_error_renders_details(cli_runner) -> None:
    result = cli_runner.invoke(app, ["alerts", "update", "500", "--name", "x"])

    assert result.exit_code == 1
    assert "HTTP 500" in result.output
    assert "boom" in result.output


def test_delete_rest_and_graphql(cli_runner, monkeypatch) -> None:
    result = cli_runner.invoke(app, ["alerts", "delete", "9"])
    assert result.exit_code == 0, result.output
    assert StubAlertsClient.instances[0].calls == [("delete", 9)]

    monkeypatch.setenv("NEW_RELIC_ACCOUNT_ID", "1234")
    result = cli_runner.invoke(app, ["alerts", "delete", "9", "--graphql"])
    assert result.exit_code == 0, result.output
    assert StubAlertsClient.instances[1].calls == [("delete_mutation", (1234, 9))]


def test_search_with_ids(cli_runner) -> None:
    result = cli_runner.invoke(
        app, ["alerts", "search", "--account-id", "1234", "--id", "1", "--id", "2"]
    )

    assert result.exit_code == 0, result.output
    _, (account_id, criteria) = StubAlertsClient.instances[0].calls[0]
    assert account_id == 1234
    assert criteria.ids == [1, 2]


def test_query_without_account_id_fails(cli_runner) -> None:
    result = cli_runner.invoke(app, ["alerts", "query", "7"])

    assert result.exit_code != 0
    assert not StubAlertsClient.instances


def test_query_reads_account_from_env(cli_runner, monkeypatch) -> None:
    monkeypatch.setenv("NEW_RELIC_ACCOUNT_ID", "555")

    result = cli_runner.invoke(app, ["alerts", "query", "7"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["accountId"] == 555
