"""Commands for inspecting and mutating stored nrclient profiles."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

import typer
from rich import print

from ..config import ConfigStore, Profile, normalize_region
from .common import handle_cli_errors

app = typer.Typer(help="Profiles & configuration")


MASK_PLACEHOLDER = "<hidden>"
SENSITIVE_KEYS = frozenset({"personal_api_key", "admin_api_key"})


@app.command("list")
@handle_cli_errors
def profile_list() -> None:
    """Show all saved profiles, highlighting the default profile."""

    cfg = ConfigStore().load()
    for name in sorted(cfg.profiles):
        star = "*" if cfg.default_profile == name else " "
        print(f"{star} {name}")


@app.command("show")
@handle_cli_errors
def profile_show(name: str = typer.Argument(..., help="Profile name")) -> None:
    """Display the stored configuration for a profile with keys masked."""

    cfg = ConfigStore().load()
    profile = cfg.profiles.get(name)
    if not profile:
        raise typer.BadParameter(f"Profile '{name}' not found")
    print(_mask_sensitive_fields(asdict(profile)))


@app.command("add")
@handle_cli_errors
def profile_add(
    name: str = typer.Argument(..., help="Profile name"),
    api_key: str | None = typer.Option(
        None, "--api-key", help="Personal (user) API key used for NerdGraph."
    ),
    admin_api_key: str | None = typer.Option(
        None, "--admin-api-key", help="Admin API key used for REST v2 calls."
    ),
    region: str = typer.Option("US", help="Data center region (US or EU)."),
    account_id: int | None = typer.Option(None, "--account-id", help="Default account ID."),
    set_default: bool = typer.Option(False, "--default", help="Make this the default profile."),
) -> None:
    """Create or replace a profile."""

    if not api_key and not admin_api_key:
        raise typer.BadParameter("Provide --api-key and/or --admin-api-key.")
    profile = Profile(
        name=name,
        personal_api_key=api_key,
        admin_api_key=admin_api_key,
        region=normalize_region(region),
        account_id=account_id,
    )
    cfg = ConfigStore().add_or_update_profile(profile, set_default=set_default)
    suffix = " (default)" if cfg.default_profile == name else ""
    print(f"Saved profile {name}{suffix}")


@app.command("use")
@handle_cli_errors
def profile_use(name: str = typer.Argument(..., help="Profile name")) -> None:
    """Set the default profile."""

    try:
        ConfigStore().set_default_profile(name)
    except KeyError as exc:
        raise typer.BadParameter(f"Profile '{name}' not found") from exc
    print(f"Default profile set to {name}")


@app.command("delete")
@handle_cli_errors
def profile_delete(name: str = typer.Argument(..., help="Profile name")) -> None:
    """Remove a stored profile."""

    try:
        ConfigStore().delete_profile(name)
    except KeyError as exc:
        raise typer.BadParameter(f"Profile '{name}' not found") from exc
    print(f"Deleted profile {name}")


def _mask_sensitive_fields(data: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``data`` with sensitive keys masked."""

    masked = dict(data)
    for key in masked:
        if key in SENSITIVE_KEYS and masked[key] not in (None, ""):
            masked[key] = MASK_PLACEHOLDER
    return masked


__all__ = [
    "app",
    "profile_add",
    "profile_delete",
    "profile_list",
    "profile_show",
    "profile_use",
]
