"""Typed models for alert policies (REST v2 and NerdGraph)."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .common import datetime_to_epoch_millis, epoch_millis_to_datetime


class IncidentPreferenceType(str, Enum):
    """Rollup settings controlling how violations are grouped into incidents."""

    PER_POLICY = "PER_POLICY"
    PER_CONDITION = "PER_CONDITION"
    PER_CONDITION_AND_TARGET = "PER_CONDITION_AND_TARGET"


class Policy(BaseModel):
    """Alert policy as returned by ``/alerts_policies.json``."""

    id: int | None = None
    name: str | None = None
    incident_preference: IncidentPreferenceType | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _parse_epoch(cls, value: Any) -> Any:
        return epoch_millis_to_datetime(value)

    @field_serializer("created_at", "updated_at")
    def _dump_epoch(self, value: datetime | None) -> int | None:
        return datetime_to_epoch_millis(value)


class QueryPolicy(BaseModel):
    """Alert policy as returned by NerdGraph; ``id`` arrives as a string."""

    id: int
    name: str | None = None
    incident_preference: IncidentPreferenceType | None = Field(
        default=None, alias="incidentPreference"
    )
    account_id: int | None = Field(default=None, alias="accountId")

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class QueryPolicyInput(BaseModel):
    name: str
    incident_preference: IncidentPreferenceType = Field(alias="incidentPreference")

    model_config = ConfigDict(populate_by_name=True)


class QueryPolicyCreateInput(QueryPolicyInput):
    pass


class QueryPolicyUpdateInput(QueryPolicyInput):
    pass


class AlertsPoliciesSearchCriteriaInput(BaseModel):
    ids: list[int] | None = None

    model_config = ConfigDict(populate_by_name=True)

    @field_serializer("ids")
    def _dump_ids(self, value: list[int] | None) -> list[str] | None:
        # NerdGraph types policy ids as ID (string).
        return [str(item) for item in value] if value is not None else None


__all__ = [
    "AlertsPoliciesSearchCriteriaInput",
    "IncidentPreferenceType",
    "Policy",
    "QueryPolicy",
    "QueryPolicyCreateInput",
    "QueryPolicyInput",
    "QueryPolicyUpdateInput",
]
