"""Client helpers for alert policies over REST v2 and NerdGraph."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, cast

import httpx

from ..config import ClientConfig
from ..errors import NotFoundError
from ..http_client import HttpClient
from ..models.alerts import (
    AlertsPoliciesSearchCriteriaInput,
    Policy,
    QueryPolicy,
    QueryPolicyCreateInput,
    QueryPolicyUpdateInput,
)
from ..models.common import dump_payload
from ..nerdgraph import NerdGraphClient, dig
from ..pager import LinkHeaderPager

logger = logging.getLogger(__name__)

POLICIES_PATH = "alerts_policies.json"

GRAPHQL_POLICY_FIELDS = """
    id
    name
    incidentPreference
    accountId
"""

QUERY_POLICY = (
    """query($accountID: Int!, $policyID: ID!) {
  actor {
    account(id: $accountID) {
      alerts {
        policy(id: $policyID) {"""
    + GRAPHQL_POLICY_FIELDS
    + """}
      }
    }
  }
}"""
)

QUERY_POLICY_SEARCH = (
    """query($accountID: Int!, $cursor: String, $criteria: AlertsPoliciesSearchCriteriaInput) {
  actor {
    account(id: $accountID) {
      alerts {
        policiesSearch(cursor: $cursor, searchCriteria: $criteria) {
          nextCursor
          totalCount
          policies {"""
    + GRAPHQL_POLICY_FIELDS
    + """}
        }
      }
    }
  }
}"""
)

MUTATION_CREATE_POLICY = (
    """mutation CreatePolicy($accountID: Int!, $policy: AlertsPolicyInput!) {
  alertsPolicyCreate(accountId: $accountID, policy: $policy) {"""
    + GRAPHQL_POLICY_FIELDS
    + """}
}"""
)

MUTATION_UPDATE_POLICY = (
    """mutation UpdatePolicy($accountID: Int!, $policyID: ID!, $policy: AlertsPolicyUpdateInput!) {
  alertsPolicyUpdate(accountId: $accountID, id: $policyID, policy: $policy) {"""
    + GRAPHQL_POLICY_FIELDS
    + """}
}"""
)

MUTATION_DELETE_POLICY = """mutation DeletePolicy($accountID: Int!, $policyID: ID!) {
  alertsPolicyDelete(accountId: $accountID, id: $policyID) {
    id
  }
}"""


class AlertsClient:
    """Client for alert policy management.

    REST methods use the v2 API at :meth:`ClientConfig.rest_url`; the
    ``*_mutation``/``query_*`` methods go through NerdGraph.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        http: HttpClient | None = None,
        nerdgraph: NerdGraphClient | None = None,
    ) -> None:
        self.config = config
        self._http = http
        self._nerdgraph = nerdgraph
        self.pager = LinkHeaderPager()

    @property
    def http(self) -> HttpClient:
        if self._http is None:
            self._http = HttpClient(
                self.config.rest_url(),
                default_headers=self.config.rest_headers(),
                timeout=self.config.timeout,
                max_retries=self.config.max_retries,
            )
        return self._http

    @property
    def nerdgraph(self) -> NerdGraphClient:
        if self._nerdgraph is None:
            self._nerdgraph = NerdGraphClient(self.config)
        return self._nerdgraph

    def close(self) -> None:
        """Close whichever transports were opened."""

        if self._http is not None:
            self._http.close()
        if self._nerdgraph is not None:
            self._nerdgraph.close()

    def __enter__(self) -> AlertsClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @staticmethod
    def _parse_response_dict(resp: httpx.Response) -> dict[str, Any]:
        if not resp.text:
            return {}
        data = resp.json()
        return cast(dict[str, Any], data) if isinstance(data, dict) else {}

    def _policy_from_response(self, resp: httpx.Response) -> Policy:
        data = self._parse_response_dict(resp)
        return Policy.model_validate(data.get("policy") or {})

    @staticmethod
    def _query_policy(payload: Any, action: str) -> QueryPolicy:
        if not isinstance(payload, dict):
            raise NotFoundError(f"NerdGraph returned no alert policy for {action}")
        return QueryPolicy.model_validate(payload)

    def list_policies(self, name: str | None = None) -> list[Policy]:
        """Return every alert policy, following ``Link: rel="next"`` pages.

        Args:
            name: Optional ``filter[name]`` applied server-side. It is sent with
                every page request, merged into the query of the next link.
        """

        policies: list[Policy] = []
        next_url: str | None = POLICIES_PATH
        params: dict[str, Any] | None = {"filter[name]": name} if name else None
        pages = 0

        while next_url:
            resp = self.http.get(next_url, params=params)
            data = self._parse_response_dict(resp)
            for item in data.get("policies") or []:
                if isinstance(item, dict):
                    policies.append(Policy.model_validate(item))
            pages += 1
            next_url = self.pager.parse(resp).next

        logger.debug("Fetched %d alert policies across %d page(s)", len(policies), pages)
        return policies

    def get_policy(self, policy_id: int) -> Policy:
        """Return the policy with ``policy_id``.

        Raises:
            NotFoundError: No policy in the full listing has the id.
        """

        for policy in self.list_policies():
            if policy.id == policy_id:
                return policy
        raise NotFoundError(f"no alert policy found for id {policy_id}")

    def create_policy(self, policy: Policy | dict[str, Any]) -> Policy:
        resp = self.http.post(POLICIES_PATH, json={"policy": dump_payload(policy)})
        return self._policy_from_response(resp)

    def update_policy(self, policy: Policy) -> Policy:
        if policy.id is None:
            raise ValueError("update_policy requires a policy with an id")
        resp = self.http.put(
            f"alerts_policies/{policy.id}.json",
            json={"policy": dump_payload(policy)},
        )
        return self._policy_from_response(resp)

    def delete_policy(self, policy_id: int) -> Policy:
        resp = self.http.delete(f"alerts_policies/{policy_id}.json")
        return self._policy_from_response(resp)

    def create_policy_mutation(
        self, account_id: int, policy: QueryPolicyCreateInput
    ) -> QueryPolicy:
        data = self.nerdgraph.query(
            MUTATION_CREATE_POLICY,
            {"accountID": account_id, "policy": dump_payload(policy)},
        )
        return self._query_policy(data.get("alertsPolicyCreate"), "create")

    def update_policy_mutation(
        self, account_id: int, policy_id: int, policy: QueryPolicyUpdateInput
    ) -> QueryPolicy:
        data = self.nerdgraph.query(
            MUTATION_UPDATE_POLICY,
            {
                "accountID": account_id,
                "policyID": str(policy_id),
                "policy": dump_payload(policy),
            },
        )
        return self._query_policy(data.get("alertsPolicyUpdate"), "update")

    def query_policy(self, account_id: int, policy_id: int) -> QueryPolicy:
        """Fetch a single policy from NerdGraph by account and policy id."""

        data = self.nerdgraph.query(
            QUERY_POLICY, {"accountID": account_id, "policyID": str(policy_id)}
        )
        policy = dig(data, "actor", "account", "alerts", "policy")
        if not policy:
            raise NotFoundError(
                f"no alert policy found for id {policy_id} in account {account_id}"
            )
        return QueryPolicy.model_validate(policy)

    def query_policy_search(
        self,
        account_id: int,
        criteria: AlertsPoliciesSearchCriteriaInput | None = None,
    ) -> list[QueryPolicy]:
        """Search NerdGraph for policies, following ``nextCursor`` until exhausted."""

        policies: list[QueryPolicy] = []
        search_criteria = dump_payload(criteria) if criteria is not None else {}
        cursor: str | None = None

        while True:
            data = self.nerdgraph.query(
                QUERY_POLICY_SEARCH,
                {"accountID": account_id, "cursor": cursor, "criteria": search_criteria},
            )
            search = dig(data, "actor", "account", "alerts", "policiesSearch") or {}
            for item in search.get("policies") or []:
                policies.append(QueryPolicy.model_validate(item))
            cursor = search.get("nextCursor") or None
            if cursor is None:
                break

        return policies

    def delete_policy_mutation(self, account_id: int, policy_id: int) -> QueryPolicy:
        """Delete a policy through NerdGraph and return the deleted id."""

        data = self.nerdgraph.query(
            MUTATION_DELETE_POLICY, {"accountID": account_id, "policyID": str(policy_id)}
        )
        deleted = data.get("alertsPolicyDelete") or {}
        return QueryPolicy(id=deleted.get("id", policy_id), account_id=account_id)


__all__ = [
    "AlertsClient",
    "MUTATION_CREATE_POLICY",
    "MUTATION_DELETE_POLICY",
    "MUTATION_UPDATE_POLICY",
    "QUERY_POLICY",
    "QUERY_POLICY_SEARCH",
]
