"""Client for NerdGraph workload collections."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

from ..config import ClientConfig
from ..errors import NotFoundError
from ..models.workloads import (
    Workload,
    WorkloadCreateInput,
    WorkloadDuplicateInput,
    WorkloadUpdateInput,
)
from ..models.common import dump_payload
from ..nerdgraph import NerdGraphClient, dig

logger = logging.getLogger(__name__)

GRAPHQL_WORKLOAD_FIELDS = """
    account {
      id
      name
    }
    createdAt
    createdBy {
      email
      gravatar
      id
      name
    }
    entities {
      guid
    }
    entitySearchQueries {
      createdAt
      createdBy {
        email
        gravatar
        id
        name
      }
      id
      name
      query
      updatedAt
    }
    entitySearchQuery
    guid
    id
    name
    permalink
    scopeAccounts {
      accountIds
    }
    updatedAt
"""

QUERY_LIST_WORKLOADS = (
    """query($accountId: Int!) {
  actor {
    account(id: $accountId) {
      workload {
        collections {"""
    + GRAPHQL_WORKLOAD_FIELDS
    + """}
      }
    }
  }
}"""
)

QUERY_GET_WORKLOAD = (
    """query($accountId: Int!, $id: Int!) {
  actor {
    account(id: $accountId) {
      workload {
        collection(id: $id) {"""
    + GRAPHQL_WORKLOAD_FIELDS
    + """}
      }
    }
  }
}"""
)

MUTATION_CREATE_WORKLOAD = (
    """mutation($accountId: Int!, $workload: WorkloadCreateInput!) {
  workloadCreate(accountId: $accountId, workload: $workload) {"""
    + GRAPHQL_WORKLOAD_FIELDS
    + """}
}"""
)

MUTATION_DUPLICATE_WORKLOAD = (
    """mutation($accountId: Int!, $sourceGuid: EntityGuid!, $workload: WorkloadDuplicateInput) {
  workloadDuplicate(accountId: $accountId, sourceGuid: $sourceGuid, workload: $workload) {"""
    + GRAPHQL_WORKLOAD_FIELDS
    + """}
}"""
)

MUTATION_UPDATE_WORKLOAD = (
    """mutation($guid: EntityGuid!, $workload: WorkloadUpdateInput!) {
  workloadUpdate(guid: $guid, workload: $workload) {"""
    + GRAPHQL_WORKLOAD_FIELDS
    + """}
}"""
)

MUTATION_DELETE_WORKLOAD = (
    """mutation($guid: EntityGuid!) {
  workloadDelete(guid: $guid) {"""
    + GRAPHQL_WORKLOAD_FIELDS
    + """}
}"""
)


class WorkloadsClient:
    """Manage workloads: groups of entities scoped to one or more accounts."""

    def __init__(self, config: ClientConfig, *, nerdgraph: NerdGraphClient | None = None) -> None:
        self.config = config
        self.nerdgraph = nerdgraph or NerdGraphClient(config)

    def close(self) -> None:
        self.nerdgraph.close()

    def __enter__(self) -> WorkloadsClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @staticmethod
    def _workload(payload: Any, action: str) -> Workload:
        if not isinstance(payload, dict):
            raise NotFoundError(f"NerdGraph returned no workload for {action}")
        return Workload.model_validate(payload)

    def list_workloads(self, account_id: int) -> list[Workload]:
        data = self.nerdgraph.query(QUERY_LIST_WORKLOADS, {"accountId": account_id})
        collections = dig(data, "actor", "account", "workload", "collections") or []
        logger.debug("Account %s has %d workload(s)", account_id, len(collections))
        return [Workload.model_validate(item) for item in collections]

    def get_workload(self, account_id: int, workload_id: int) -> Workload:
        """Return a workload by its numeric id within ``account_id``.

        Raises:
            NotFoundError: NerdGraph returned a null collection.
        """

        data = self.nerdgraph.query(
            QUERY_GET_WORKLOAD, {"accountId": account_id, "id": workload_id}
        )
        collection = dig(data, "actor", "account", "workload", "collection")
        if not collection:
            raise NotFoundError(f"no workload found for id {workload_id} in account {account_id}")
        return Workload.model_validate(collection)

    def create_workload(self, account_id: int, workload: WorkloadCreateInput) -> Workload:
        data = self.nerdgraph.query(
            MUTATION_CREATE_WORKLOAD,
            {"accountId": account_id, "workload": dump_payload(workload)},
        )
        return self._workload(data.get("workloadCreate"), "create")

    def duplicate_workload(
        self,
        account_id: int,
        source_guid: str,
        workload: WorkloadDuplicateInput | None = None,
    ) -> Workload:
        """Copy the workload ``source_guid`` into ``account_id``, optionally renaming it."""

        variables: dict[str, Any] = {"accountId": account_id, "sourceGuid": source_guid}
        if workload is not None:
            variables["workload"] = dump_payload(workload)
        data = self.nerdgraph.query(MUTATION_DUPLICATE_WORKLOAD, variables)
        return self._workload(data.get("workloadDuplicate"), "duplicate")

    def update_workload(self, guid: str, workload: WorkloadUpdateInput) -> Workload:
        data = self.nerdgraph.query(
            MUTATION_UPDATE_WORKLOAD, {"guid": guid, "workload": dump_payload(workload)}
        )
        return self._workload(data.get("workloadUpdate"), "update")

    def delete_workload(self, guid: str) -> Workload:
        data = self.nerdgraph.query(MUTATION_DELETE_WORKLOAD, {"guid": guid})
        return self._workload(data.get("workloadDelete"), "delete")


__all__ = [
    "MUTATION_CREATE_WORKLOAD",
    "MUTATION_DELETE_WORKLOAD",
    "MUTATION_DUPLICATE_WORKLOAD",
    "MUTATION_UPDATE_WORKLOAD",
    "QUERY_GET_WORKLOAD",
    "QUERY_LIST_WORKLOADS",
    "WorkloadsClient",
]
