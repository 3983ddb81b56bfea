"""Re-export typed models for the nrclient SDK."""

from __future__ import annotations

from .alerts import (
    AlertsPoliciesSearchCriteriaInput,
    IncidentPreferenceType,
    Policy,
    QueryPolicy,
    QueryPolicyCreateInput,
    QueryPolicyInput,
    QueryPolicyUpdateInput,
)
from .api_access import (
    ApiAccessCreateIngestKeyInput,
    ApiAccessCreateInput,
    ApiAccessCreateUserKeyInput,
    ApiAccessDeletedKey,
    ApiAccessDeleteInput,
    ApiAccessIngestKeyType,
    ApiAccessKey,
    ApiAccessKeyError,
    ApiAccessKeySearchQuery,
    ApiAccessKeySearchScope,
    ApiAccessKeyType,
    ApiAccessUpdateInput,
    ApiAccessUpdateKeyInput,
)
from .nerdstorage import (
    CollectionDocument,
    DeleteCollectionInput,
    DeleteDocumentInput,
    GetCollectionInput,
    GetDocumentInput,
    NerdStorageScope,
    WriteDocumentInput,
)
from .workloads import (
    Workload,
    WorkloadCreateInput,
    WorkloadDuplicateInput,
    WorkloadEntitySearchQueryInput,
    WorkloadScopeAccountsInput,
    WorkloadUpdateInput,
)

__all__ = [
    "AlertsPoliciesSearchCriteriaInput",
    "IncidentPreferenceType",
    "Policy",
    "QueryPolicy",
    "QueryPolicyCreateInput",
    "QueryPolicyInput",
    "QueryPolicyUpdateInput",
    "ApiAccessCreateIngestKeyInput",
    "ApiAccessCreateInput",
    "ApiAccessCreateUserKeyInput",
    "ApiAccessDeletedKey",
    "ApiAccessDeleteInput",
    "ApiAccessIngestKeyType",
    "ApiAccessKey",
    "ApiAccessKeyError",
    "ApiAccessKeySearchQuery",
    "ApiAccessKeySearchScope",
    "ApiAccessKeyType",
    "ApiAccessUpdateInput",
    "ApiAccessUpdateKeyInput",
    "CollectionDocument",
    "DeleteCollectionInput",
    "DeleteDocumentInput",
    "GetCollectionInput",
    "GetDocumentInput",
    "NerdStorageScope",
    "WriteDocumentInput",
    "Workload",
    "WorkloadCreateInput",
    "WorkloadDuplicateInput",
    "WorkloadEntitySearchQueryInput",
    "WorkloadScopeAccountsInput",
    "WorkloadUpdateInput",
]
