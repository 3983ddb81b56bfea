"""CLI commands for alert policies."""

from __future__ import annotations

import typer

from ..cli_utils import resolve_account_id_from_context
from ..clients.alerts import AlertsClient
from ..models.alerts import (
    AlertsPoliciesSearchCriteriaInput,
    IncidentPreferenceType,
    Policy,
    QueryPolicy,
)
from .common import console, get_client_config, handle_cli_errors, print_json

app = typer.Typer(help="Manage alert policies.")


def _build_client(ctx: typer.Context) -> AlertsClient:
    return AlertsClient(get_client_config(ctx))


def _print_policy_summary(policy: Policy | QueryPolicy) -> None:
    preference = policy.incident_preference.value if policy.incident_preference else "-"
    console.print(f"[bold]{policy.id}[/bold]  {policy.name}  incident_preference={preference}")


@app.command("list")
@handle_cli_errors
def list_policies(
    ctx: typer.Context,
    name: str | None = typer.Option(None, help="Only return policies matching this name."),
) -> None:
    """List alert policies (REST, all pages)."""

    with _build_client(ctx) as client:
        policies = client.list_policies(name=name)
    if not policies:
        console.print("[yellow]No policies found.[/yellow]")
        return
    for policy in policies:
        _print_policy_summary(policy)


@app.command("get")
@handle_cli_errors
def get_policy(
    ctx: typer.Context,
    policy_id: int = typer.Argument(..., help="Policy identifier."),
) -> None:
    """Show a single alert policy."""

    with _build_client(ctx) as client:
        policy = client.get_policy(policy_id)
    print_json(policy.model_dump(mode="json", exclude_none=True))


@app.command("create")
@handle_cli_errors
def create_policy(
    ctx: typer.Context,
    name: str = typer.Option(..., help="Policy name."),
    incident_preference: IncidentPreferenceType = typer.Option(
        IncidentPreferenceType.PER_POLICY, help="Incident rollup preference."
    ),
) -> None:
    """Create an alert policy."""

    with _build_client(ctx) as client:
        created = client.create_policy(
            Policy(name=name, incident_preference=incident_preference)
        )
    console.print(f"[green]Created policy[/green] id={created.id}")


@app.command("update")
@handle_cli_errors
def update_policy(
    ctx: typer.Context,
    policy_id: int = typer.Argument(..., help="Policy identifier."),
    name: str = typer.Option(..., help="New policy name."),
    incident_preference: IncidentPreferenceType = typer.Option(
        IncidentPreferenceType.PER_POLICY, help="Incident rollup preference."
    ),
) -> None:
    """Update an alert policy."""

    with _build_client(ctx) as client:
        updated = client.update_policy(
            Policy(id=policy_id, name=name, incident_preference=incident_preference)
        )
    console.print(f"[green]Updated policy[/green] id={updated.id}")


@app.command("delete")
@handle_cli_errors
def delete_policy(
    ctx: typer.Context,
    policy_id: int = typer.Argument(..., help="Policy identifier."),
    graphql: bool = typer.Option(
        False, "--graphql", help="Delete through NerdGraph instead of REST."
    ),
    account_id: int | None = typer.Option(None, "--account-id", help="Account ID (NerdGraph)."),
) -> None:
    """Delete an alert policy."""

    with _build_client(ctx) as client:
        if graphql:
            account = resolve_account_id_from_context(ctx, account_id)
            deleted_id = client.delete_policy_mutation(account, policy_id).id
        else:
            deleted_id = client.delete_policy(policy_id).id or policy_id
    console.print(f"[green]Deleted policy[/green] id={deleted_id}")


@app.command("search")
@handle_cli_errors
def search_policies(
    ctx: typer.Context,
    account_id: int | None = typer.Option(None, "--account-id", help="Account ID."),
    ids: list[int] = typer.Option([], "--id", help="Restrict to these policy IDs."),
) -> None:
    """Search policies through NerdGraph, following every cursor."""

    account = resolve_account_id_from_context(ctx, account_id)
    criteria = AlertsPoliciesSearchCriteriaInput(ids=ids) if ids else None
    with _build_client(ctx) as client:
        policies = client.query_policy_search(account, criteria)
    if not policies:
        console.print("[yellow]No policies found.[/yellow]")
        return
    for policy in policies:
        _print_policy_summary(policy)


@app.command("query")
@handle_cli_errors
def query_policy(
    ctx: typer.Context,
    policy_id: int = typer.Argument(..., help="Policy identifier."),
    account_id: int | None = typer.Option(None, "--account-id", help="Account ID."),
) -> None:
    """Fetch a single policy through NerdGraph."""

    account = resolve_account_id_from_context(ctx, account_id)
    with _build_client(ctx) as client:
        policy = client.query_policy(account, policy_id)
    print_json(policy.model_dump(mode="json", by_alias=True, exclude_none=True))


__all__ = [
    "app",
    "create_policy",
    "delete_policy",
    "get_policy",
    "list_policies",
    "query_policy",
    "search_policies",
    "update_policy",
]
