"""CLI commands for NerdGraph API access keys."""

from __future__ import annotations

from pathlib import Path

import typer

from ..clients.api_access import ApiAccessClient
from ..models.api_access import (
    ApiAccessCreateInput,
    ApiAccessDeleteInput,
    ApiAccessKey,
    ApiAccessKeySearchQuery,
    ApiAccessKeySearchScope,
    ApiAccessKeyType,
    ApiAccessUpdateInput,
)
from .common import console, get_client_config, handle_cli_errors, load_payload, print_json

app = typer.Typer(help="Manage ingest and user API keys.")


def _build_client(ctx: typer.Context) -> ApiAccessClient:
    return ApiAccessClient(get_client_config(ctx))


def _print_key(key: ApiAccessKey) -> None:
    kind = key.type.value if key.type else "-"
    console.print(f"[bold]{key.id}[/bold]  {kind}  {key.name or ''}")


@app.command("search")
@handle_cli_errors
def search_keys(
    ctx: typer.Context,
    key_types: list[ApiAccessKeyType] = typer.Option(
        [], "--type", help="Key types to include (INGEST, USER). Defaults to both."
    ),
    account_ids: list[int] = typer.Option([], "--account-id", help="Restrict to these accounts."),
) -> None:
    """Search keys visible to the current user."""

    query = ApiAccessKeySearchQuery(
        types=key_types or [ApiAccessKeyType.INGEST, ApiAccessKeyType.USER],
        scope=ApiAccessKeySearchScope(account_ids=account_ids) if account_ids else None,
    )
    with _build_client(ctx) as client:
        keys = client.search_keys(query)
    if not keys:
        console.print("[yellow]No keys found.[/yellow]")
        return
    for key in keys:
        _print_key(key)


@app.command("get")
@handle_cli_errors
def get_key(
    ctx: typer.Context,
    key_id: str = typer.Argument(..., help="Key identifier."),
    key_type: ApiAccessKeyType = typer.Option(..., "--type", help="INGEST or USER."),
) -> None:
    """Show a single key."""

    with _build_client(ctx) as client:
        key = client.get_key(key_id, key_type)
    print_json(key.model_dump(mode="json", by_alias=True, exclude_none=True))


@app.command("create")
@handle_cli_errors
def create_keys(
    ctx: typer.Context,
    payload: str | None = typer.Option(None, help="JSON with 'ingest' and/or 'user' lists."),
    file: Path | None = typer.Option(None, exists=True, help="JSON or YAML file."),
) -> None:
    """Create keys described by a payload."""

    keys = ApiAccessCreateInput.model_validate(load_payload(payload, file))
    with _build_client(ctx) as client:
        created = client.create_keys(keys)
    for key in created:
        console.print(f"[green]Created key[/green] id={key.id}")


@app.command("update")
@handle_cli_errors
def update_keys(
    ctx: typer.Context,
    payload: str | None = typer.Option(None, help="JSON with 'ingest' and/or 'user' lists."),
    file: Path | None = typer.Option(None, exists=True, help="JSON or YAML file."),
) -> None:
    """Rename or re-annotate keys."""

    keys = ApiAccessUpdateInput.model_validate(load_payload(payload, file))
    with _build_client(ctx) as client:
        updated = client.update_keys(keys)
    for key in updated:
        console.print(f"[green]Updated key[/green] id={key.id}")


@app.command("delete")
@handle_cli_errors
def delete_keys(
    ctx: typer.Context,
    ingest_ids: list[str] = typer.Option([], "--ingest-id", help="Ingest key id to delete."),
    user_ids: list[str] = typer.Option([], "--user-id", help="User key id to delete."),
) -> None:
    """Delete keys by id."""

    if not ingest_ids and not user_ids:
        raise typer.BadParameter("Pass at least one --ingest-id or --user-id.")
    with _build_client(ctx) as client:
        deleted = client.delete_keys(
            ApiAccessDeleteInput(ingest_key_ids=ingest_ids, user_key_ids=user_ids)
        )
    for key in deleted:
        console.print(f"[green]Deleted key[/green] id={key.id}")


__all__ = ["app", "create_keys", "delete_keys", "get_key", "search_keys", "update_keys"]
