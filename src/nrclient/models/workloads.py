"""Typed models for NerdGraph workloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import epoch_millis_to_datetime


class WorkloadUser(BaseModel):
    id: int | None = None
    email: str | None = None
    name: str | None = None
    gravatar: str | None = None

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class WorkloadAccountRef(BaseModel):
    id: int | None = None
    name: str | None = None

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class WorkloadEntityRef(BaseModel):
    guid: str | None = None

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class WorkloadEntitySearchQuery(BaseModel):
    id: int | None = None
    name: str | None = None
    query: str | None = None
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")
    created_by: WorkloadUser | None = Field(default=None, alias="createdBy")

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _parse_epoch(cls, value: Any) -> Any:
        return epoch_millis_to_datetime(value)


class WorkloadScopeAccounts(BaseModel):
    account_ids: list[int] = Field(default_factory=list, alias="accountIds")

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class Workload(BaseModel):
    """A workload collection grouping entities across accounts."""

    id: int | None = None
    guid: str | None = None
    name: str | None = None
    permalink: str | None = None
    account: WorkloadAccountRef | None = None
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")
    created_by: WorkloadUser | None = Field(default=None, alias="createdBy")
    entities: list[WorkloadEntityRef] = Field(default_factory=list)
    entity_search_queries: list[WorkloadEntitySearchQuery] = Field(
        default_factory=list, alias="entitySearchQueries"
    )
    entity_search_query: str | None = Field(default=None, alias="entitySearchQuery")
    scope_accounts: WorkloadScopeAccounts | None = Field(default=None, alias="scopeAccounts")

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _parse_epoch(cls, value: Any) -> Any:
        return epoch_millis_to_datetime(value)

    @field_validator("entities", "entity_search_queries", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class WorkloadEntitySearchQueryInput(BaseModel):
    name: str | None = None
    query: str

    model_config = ConfigDict(populate_by_name=True)


class WorkloadScopeAccountsInput(BaseModel):
    account_ids: list[int] = Field(default_factory=list, alias="accountIds")

    model_config = ConfigDict(populate_by_name=True)


class WorkloadCreateInput(BaseModel):
    name: str
    entity_guids: list[str] | None = Field(default=None, alias="entityGuids")
    entity_search_queries: list[WorkloadEntitySearchQueryInput] | None = Field(
        default=None, alias="entitySearchQueries"
    )
    scope_accounts: WorkloadScopeAccountsInput | None = Field(default=None, alias="scopeAccounts")

    model_config = ConfigDict(populate_by_name=True)


class WorkloadUpdateInput(BaseModel):
    name: str | None = None
    entity_guids: list[str] | None = Field(default=None, alias="entityGuids")
    entity_search_queries: list[WorkloadEntitySearchQueryInput] | None = Field(
        default=None, alias="entitySearchQueries"
    )
    scope_accounts: WorkloadScopeAccountsInput | None = Field(default=None, alias="scopeAccounts")

    model_config = ConfigDict(populate_by_name=True)


class WorkloadDuplicateInput(BaseModel):
    name: str | None = None

    model_config = ConfigDict(populate_by_name=True)


__all__ = [
    "Workload",
    "WorkloadAccountRef",
    "WorkloadCreateInput",
    "WorkloadDuplicateInput",
    "WorkloadEntityRef",
    "WorkloadEntitySearchQuery",
    "WorkloadEntitySearchQueryInput",
    "WorkloadScopeAccounts",
    "WorkloadScopeAccountsInput",
    "WorkloadUpdateInput",
    "WorkloadUser",
]
