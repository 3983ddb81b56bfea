"""CLI commands for NerdStorage documents and collections.

Every command targets the account scope with ``--account-id``, the entity
scope with ``--entity-guid``, or the current user when neither is given.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer

from ..clients.nerdstorage import NerdStorageClient
from ..models.nerdstorage import (
    DeleteCollectionInput,
    DeleteDocumentInput,
    GetCollectionInput,
    GetDocumentInput,
    WriteDocumentInput,
)
from .common import console, get_client_config, handle_cli_errors, load_payload, print_json

app = typer.Typer(help="Read and write NerdStorage documents.")

PACKAGE_OPTION = typer.Option(..., "--package-id", help="Nerdpack UUID owning the data.")
COLLECTION_OPTION = typer.Option(..., "--collection", help="Collection name.")
DOCUMENT_OPTION = typer.Option(..., "--document-id", help="Document id.")
ACCOUNT_OPTION = typer.Option(None, "--account-id", help="Use the account scope.")
ENTITY_OPTION = typer.Option(None, "--entity-guid", help="Use the entity scope.")


def _build_client(ctx: typer.Context) -> NerdStorageClient:
    return NerdStorageClient(get_client_config(ctx))


def _check_scope(account_id: int | None, entity_guid: str | None) -> None:
    if account_id is not None and entity_guid:
        raise typer.BadParameter("Use either --account-id or --entity-guid, not both.")


@app.command("get-collection")
@handle_cli_errors
def get_collection(
    ctx: typer.Context,
    package_id: str = PACKAGE_OPTION,
    collection: str = COLLECTION_OPTION,
    account_id: int | None = ACCOUNT_OPTION,
    entity_guid: str | None = ENTITY_OPTION,
) -> None:
    """Print every document in a collection."""

    _check_scope(account_id, entity_guid)
    params = GetCollectionInput(package_id=package_id, collection=collection)
    with _build_client(ctx) as client:
        if account_id is not None:
            documents = client.get_collection_with_account_scope(account_id, params)
        elif entity_guid:
            documents = client.get_collection_with_entity_scope(entity_guid, params)
        else:
            documents = client.get_collection_with_user_scope(params)
    print_json([doc.model_dump(mode="json") for doc in documents])


@app.command("get-document")
@handle_cli_errors
def get_document(
    ctx: typer.Context,
    package_id: str = PACKAGE_OPTION,
    collection: str = COLLECTION_OPTION,
    document_id: str = DOCUMENT_OPTION,
    account_id: int | None = ACCOUNT_OPTION,
    entity_guid: str | None = ENTITY_OPTION,
) -> None:
    """Print a single document."""

    _check_scope(account_id, entity_guid)
    params = GetDocumentInput(
        package_id=package_id, collection=collection, document_id=document_id
    )
    with _build_client(ctx) as client:
        if account_id is not None:
            document = client.get_document_with_account_scope(account_id, params)
        elif entity_guid:
            document = client.get_document_with_entity_scope(entity_guid, params)
        else:
            document = client.get_document_with_user_scope(params)
    if document is None:
        console.print("[yellow]Document not found.[/yellow]")
        raise typer.Exit(1)
    print_json(document)


@app.command("write-document")
@handle_cli_errors
def write_document(
    ctx: typer.Context,
    package_id: str = PACKAGE_OPTION,
    collection: str = COLLECTION_OPTION,
    document_id: str = DOCUMENT_OPTION,
    payload: str | None = typer.Option(None, help="Document body as a JSON object."),
    file: Path | None = typer.Option(None, exists=True, help="JSON or YAML file."),
    account_id: int | None = ACCOUNT_OPTION,
    entity_guid: str | None = ENTITY_OPTION,
) -> None:
    """Create or replace a document."""

    _check_scope(account_id, entity_guid)
    body: dict[str, Any] = load_payload(payload, file)
    params = WriteDocumentInput(
        package_id=package_id, collection=collection, document_id=document_id, document=body
    )
    with _build_client(ctx) as client:
        if account_id is not None:
            written = client.write_document_with_account_scope(account_id, params)
        elif entity_guid:
            written = client.write_document_with_entity_scope(entity_guid, params)
        else:
            written = client.write_document_with_user_scope(params)
    print_json(written)


@app.command("delete-document")
@handle_cli_errors
def delete_document(
    ctx: typer.Context,
    package_id: str = PACKAGE_OPTION,
    collection: str = COLLECTION_OPTION,
    document_id: str = DOCUMENT_OPTION,
    account_id: int | None = ACCOUNT_OPTION,
    entity_guid: str | None = ENTITY_OPTION,
) -> None:
    """Delete a document."""

    _check_scope(account_id, entity_guid)
    params = DeleteDocumentInput(
        package_id=package_id, collection=collection, document_id=document_id
    )
    with _build_client(ctx) as client:
        if account_id is not None:
            deleted = client.delete_document_with_account_scope(account_id, params)
        elif entity_guid:
            deleted = client.delete_document_with_entity_scope(entity_guid, params)
        else:
            deleted = client.delete_document_with_user_scope(params)
    if deleted:
        console.print(f"[green]Deleted document[/green] {document_id}")
    else:
        console.print(f"[yellow]Nothing deleted for[/yellow] {document_id}")


@app.command("delete-collection")
@handle_cli_errors
def delete_collection(
    ctx: typer.Context,
    package_id: str = PACKAGE_OPTION,
    collection: str = COLLECTION_OPTION,
    account_id: int | None = ACCOUNT_OPTION,
    entity_guid: str | None = ENTITY_OPTION,
) -> None:
    """Delete a collection and every document in it."""

    _check_scope(account_id, entity_guid)
    params = DeleteCollectionInput(package_id=package_id, collection=collection)
    with _build_client(ctx) as client:
        if account_id is not None:
            deleted = client.delete_collection_with_account_scope(account_id, params)
        elif entity_guid:
            deleted = client.delete_collection_with_entity_scope(entity_guid, params)
        else:
            deleted = client.delete_collection_with_user_scope(params)
    if deleted:
        console.print(f"[green]Deleted collection[/green] {collection}")
    else:
        console.print(f"[yellow]Nothing deleted for[/yellow] {collection}")


__all__ = [
    "app",
    "delete_collection",
    "delete_document",
    "get_collection",
    "get_document",
    "write_document",
]
