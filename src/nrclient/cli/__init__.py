from __future__ import annotations

import logging

import typer

from . import alerts, keys, profile, storage, workloads

app = typer.Typer(help="New Relic client CLI")


def _register_sub_app(name: str, sub_app: typer.Typer) -> None:
    app.add_typer(sub_app, name=name)


_register_sub_app("profile", profile.app)
_register_sub_app("alerts", alerts.app)
_register_sub_app("keys", keys.app)
_register_sub_app("workloads", workloads.app)
_register_sub_app("storage", storage.app)


@app.callback()
def common(
    ctx: typer.Context,
    profile_name: str | None = typer.Option(
        None, "--profile", envvar="NRCLIENT_PROFILE", help="Profile to use instead of the default."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log HTTP traffic."),
) -> None:
    """Initialize shared Typer context state."""

    ctx.ensure_object(dict)
    ctx.obj.setdefault("profile", profile_name)
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


__all__ = ["alerts", "app", "keys", "profile", "storage", "workloads"]
