"""Typed models for NerdStorage documents and collections."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NerdStorageScope(str, Enum):
    ACCOUNT = "ACCOUNT"
    ACTOR = "ACTOR"
    ENTITY = "ENTITY"


class GetCollectionInput(BaseModel):
    package_id: str = Field(alias="packageId")
    collection: str

    model_config = ConfigDict(populate_by_name=True)


class DeleteCollectionInput(GetCollectionInput):
    pass


class GetDocumentInput(BaseModel):
    package_id: str = Field(alias="packageId")
    collection: str
    document_id: str = Field(alias="documentId")

    model_config = ConfigDict(populate_by_name=True)


class DeleteDocumentInput(GetDocumentInput):
    pass


class WriteDocumentInput(GetDocumentInput):
    """Document payload; ``document`` may be any JSON-serialisable value."""

    document: Any = None


class CollectionDocument(BaseModel):
    id: str
    document: Any = None

    model_config = ConfigDict(populate_by_name=True, extra="allow")


__all__ = [
    "CollectionDocument",
    "DeleteCollectionInput",
    "DeleteDocumentInput",
    "GetCollectionInput",
    "GetDocumentInput",
    "NerdStorageScope",
    "WriteDocumentInput",
]
