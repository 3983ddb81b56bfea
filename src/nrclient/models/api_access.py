"""Typed models for NerdGraph API access keys."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ApiAccessKeyType(str, Enum):
    INGEST = "INGEST"
    USER = "USER"


class ApiAccessIngestKeyType(str, Enum):
    BROWSER = "BROWSER"
    LICENSE = "LICENSE"


class ApiAccessKey(BaseModel):
    """An ingest or user key; variant-specific fields are optional."""

    id: str | None = None
    key: str | None = None
    name: str | None = None
    notes: str | None = None
    type: ApiAccessKeyType | None = None
    account_id: int | None = Field(default=None, alias="accountId")
    ingest_type: ApiAccessIngestKeyType | None = Field(default=None, alias="ingestType")
    user_id: int | None = Field(default=None, alias="userId")

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class ApiAccessKeyError(BaseModel):
    """Per-key failure reported inside a mutation payload."""

    message: str | None = None
    type: str | None = None
    id: str | None = None
    account_id: int | None = Field(default=None, alias="accountId")
    ingest_type: ApiAccessIngestKeyType | None = Field(default=None, alias="ingestType")
    user_id: int | None = Field(default=None, alias="userId")
    ingest_error_type: str | None = Field(default=None, alias="ingestErrorType")
    user_error_type: str | None = Field(default=None, alias="userErrorType")

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    @property
    def error_type(self) -> str | None:
        return self.ingest_error_type or self.user_error_type


class ApiAccessDeletedKey(BaseModel):
    id: str

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class ApiAccessCreateIngestKeyInput(BaseModel):
    account_id: int = Field(alias="accountId")
    ingest_type: ApiAccessIngestKeyType = Field(alias="ingestType")
    name: str | None = None
    notes: str | None = None

    model_config = ConfigDict(populate_by_name=True)


class ApiAccessCreateUserKeyInput(BaseModel):
    account_id: int = Field(alias="accountId")
    user_id: int = Field(alias="userId")
    name: str | None = None
    notes: str | None = None

    model_config = ConfigDict(populate_by_name=True)


class ApiAccessCreateInput(BaseModel):
    ingest: list[ApiAccessCreateIngestKeyInput] = Field(default_factory=list)
    user: list[ApiAccessCreateUserKeyInput] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class ApiAccessUpdateKeyInput(BaseModel):
    key_id: str = Field(alias="keyId")
    name: str | None = None
    notes: str | None = None

    model_config = ConfigDict(populate_by_name=True)


class ApiAccessUpdateInput(BaseModel):
    ingest: list[ApiAccessUpdateKeyInput] = Field(default_factory=list)
    user: list[ApiAccessUpdateKeyInput] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class ApiAccessDeleteInput(BaseModel):
    ingest_key_ids: list[str] = Field(default_factory=list, alias="ingestKeyIds")
    user_key_ids: list[str] = Field(default_factory=list, alias="userKeyIds")

    model_config = ConfigDict(populate_by_name=True)


class ApiAccessKeySearchScope(BaseModel):
    account_ids: list[int] | None = Field(default=None, alias="accountIds")
    ingest_types: list[ApiAccessIngestKeyType] | None = Field(default=None, alias="ingestTypes")
    user_ids: list[int] | None = Field(default=None, alias="userIds")

    model_config = ConfigDict(populate_by_name=True)


class ApiAccessKeySearchQuery(BaseModel):
    scope: ApiAccessKeySearchScope | None = None
    types: list[ApiAccessKeyType] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


__all__ = [
    "ApiAccessCreateIngestKeyInput",
    "ApiAccessCreateInput",
    "ApiAccessCreateUserKeyInput",
    "ApiAccessDeleteInput",
    "ApiAccessDeletedKey",
    "ApiAccessIngestKeyType",
    "ApiAccessKey",
    "ApiAccessKeyError",
    "ApiAccessKeySearchQuery",
    "ApiAccessKeySearchScope",
    "ApiAccessKeyType",
    "ApiAccessUpdateInput",
    "ApiAccessUpdateKeyInput",
]
