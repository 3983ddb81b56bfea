"""CLI commands for workloads."""

from __future__ import annotations

from pathlib import Path

import typer

from ..cli_utils import resolve_account_id_from_context
from ..clients.workloads import WorkloadsClient
from ..models.workloads import (
    Workload,
    WorkloadCreateInput,
    WorkloadDuplicateInput,
    WorkloadUpdateInput,
)
from .common import console, get_client_config, handle_cli_errors, load_payload, print_json

app = typer.Typer(help="Manage workloads.")


def _build_client(ctx: typer.Context) -> WorkloadsClient:
    return WorkloadsClient(get_client_config(ctx))


def _dump(workload: Workload) -> dict:
    return workload.model_dump(mode="json", by_alias=True, exclude_none=True)


@app.command("list")
@handle_cli_errors
def list_workloads(
    ctx: typer.Context,
    account_id: int | None = typer.Option(None, "--account-id", help="Account ID."),
) -> None:
    """List the workloads defined in an account."""

    account = resolve_account_id_from_context(ctx, account_id)
    with _build_client(ctx) as client:
        workloads = client.list_workloads(account)
    if not workloads:
        console.print("[yellow]No workloads found.[/yellow]")
        return
    for workload in workloads:
        console.print(f"[bold]{workload.id}[/bold]  {workload.guid}  {workload.name or ''}")


@app.command("get")
@handle_cli_errors
def get_workload(
    ctx: typer.Context,
    workload_id: int = typer.Argument(..., help="Numeric workload id."),
    account_id: int | None = typer.Option(None, "--account-id", help="Account ID."),
) -> None:
    """Show a single workload."""

    account = resolve_account_id_from_context(ctx, account_id)
    with _build_client(ctx) as client:
        workload = client.get_workload(account, workload_id)
    print_json(_dump(workload))


@app.command("create")
@handle_cli_errors
def create_workload(
    ctx: typer.Context,
    name: str | None = typer.Option(None, help="Workload name when no payload is given."),
    entity_guids: list[str] = typer.Option([], "--entity-guid", help="Entity GUID to include."),
    payload: str | None = typer.Option(None, help="Full workload definition as JSON."),
    file: Path | None = typer.Option(None, exists=True, help="JSON or YAML file."),
    account_id: int | None = typer.Option(None, "--account-id", help="Account ID."),
) -> None:
    """Create a workload from options or a payload."""

    if payload or file:
        workload = WorkloadCreateInput.model_validate(load_payload(payload, file))
    elif name:
        workload = WorkloadCreateInput(name=name, entity_guids=entity_guids or None)
    else:
        raise typer.BadParameter("Provide --name or a --payload/--file definition.")
    account = resolve_account_id_from_context(ctx, account_id)
    with _build_client(ctx) as client:
        created = client.create_workload(account, workload)
    console.print(f"[green]Created workload[/green] guid={created.guid}")


@app.command("duplicate")
@handle_cli_errors
def duplicate_workload(
    ctx: typer.Context,
    source_guid: str = typer.Argument(..., help="GUID of the workload to copy."),
    name: str | None = typer.Option(None, help="Name for the copy."),
    account_id: int | None = typer.Option(None, "--account-id", help="Target account ID."),
) -> None:
    """Copy an existing workload."""

    account = resolve_account_id_from_context(ctx, account_id)
    duplicate = WorkloadDuplicateInput(name=name) if name else None
    with _build_client(ctx) as client:
        created = client.duplicate_workload(account, source_guid, duplicate)
    console.print(f"[green]Duplicated workload[/green] guid={created.guid}")


@app.command("update")
@handle_cli_errors
def update_workload(
    ctx: typer.Context,
    guid: str = typer.Argument(..., help="Workload GUID."),
    payload: str | None = typer.Option(None, help="Fields to update as JSON."),
    file: Path | None = typer.Option(None, exists=True, help="JSON or YAML file."),
) -> None:
    """Update a workload."""

    workload = WorkloadUpdateInput.model_validate(load_payload(payload, file))
    with _build_client(ctx) as client:
        updated = client.update_workload(guid, workload)
    console.print(f"[green]Updated workload[/green] guid={updated.guid}")


@app.command("delete")
@handle_cli_errors
def delete_workload(
    ctx: typer.Context,
    guid: str = typer.Argument(..., help="Workload GUID."),
) -> None:
    """Delete a workload."""

    with _build_client(ctx) as client:
        deleted = client.delete_workload(guid)
    console.print(f"[green]Deleted workload[/green] guid={deleted.guid or guid}")


__all__ = [
    "app",
    "create_workload",
    "delete_workload",
    "duplicate_workload",
    "get_workload",
    "list_workloads",
    "update_workload",
]
