from __future__ import annotations

import json
import os
from collections.abc import Callable
from functools import wraps
from pathlib import Path
from typing import Any, ParamSpec, TypeVar, cast

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from ..cli_utils import active_profile, get_config_from_context
from ..config import ClientConfig, ConfigData, ConfigStore, EncryptedConfigError
from ..errors import HttpError, NrClientError

console = Console()


def _render_http_error(exc: HttpError) -> None:
    console.print(f"[red]Error:[/red] {escape(str(exc))}")
    details = getattr(exc, "details", None)
    if details:
        snippet = details
        if isinstance(details, (dict, list)):
            snippet = json.dumps(details, indent=2)
        console.print(str(snippet), markup=False)


CommandParams = ParamSpec("CommandParams")
CommandReturn = TypeVar("CommandReturn")


def handle_cli_errors(
    func: Callable[CommandParams, CommandReturn],
) -> Callable[CommandParams, CommandReturn]:
    @wraps(func)
    def wrapper(*args: CommandParams.args, **kwargs: CommandParams.kwargs) -> CommandReturn:
        try:
            return func(*args, **kwargs)
        except typer.BadParameter:
            raise
        except typer.Exit:
            raise
        except HttpError as exc:
            _render_http_error(exc)
            raise typer.Exit(1) from None
        except EncryptedConfigError as exc:
            console.print(f"[red]Error:[/red] {escape(str(exc))}")
            console.print(
                "Restore the original key by exporting NRCLIENT_CONFIG_ENCRYPTION_KEY before rerunning the command."
            )
            raise typer.Exit(1) from None
        except ValidationError as exc:
            console.print(f"[red]Error:[/red] Invalid payload: {escape(str(exc))}")
            raise typer.Exit(1) from None
        except NrClientError as exc:
            console.print(f"[red]Error:[/red] {escape(str(exc))}")
            raise typer.Exit(1) from None
        except Exception as exc:
            if os.getenv("NRCLIENT_DEBUG"):
                raise
            console.print(f"[red]Error:[/red] Unexpected failure: {escape(str(exc))}")
            console.print("Set NRCLIENT_DEBUG=1 for a stack trace.")
            raise typer.Exit(1) from exc

    return wrapper


def resolve_client_config(
    config: ConfigData | None = None, *, profile_name: str | None = None
) -> ClientConfig:
    """Build a :class:`ClientConfig` for CLI commands.

    Resolution order is:

    1. ``NEW_RELIC_API_KEY`` / ``NEW_RELIC_ADMIN_API_KEY`` environment variables.
    2. The named profile, or the default profile, from the config store.

    ``NEW_RELIC_REGION`` overrides the region in both cases.
    """

    personal_key = os.getenv("NEW_RELIC_API_KEY")
    admin_key = os.getenv("NEW_RELIC_ADMIN_API_KEY")
    region = os.getenv("NEW_RELIC_REGION")
    if personal_key or admin_key:
        return ClientConfig(
            personal_api_key=personal_key or None,
            admin_api_key=admin_key or None,
            region=region or "US",
        )

    cfg = config or ConfigStore().load()
    profile = active_profile(cfg, profile_name)
    if profile is None:
        raise typer.BadParameter("No NEW_RELIC_API_KEY and no default profile configured.")
    return profile.to_client_config(region=region)


def get_client_config(ctx: typer.Context) -> ClientConfig:
    ctx_obj = cast(dict[str, Any], ctx.ensure_object(dict))
    existing = ctx_obj.get("client_config")
    if isinstance(existing, ClientConfig):
        return existing

    config: ConfigData | None = None
    if not (os.getenv("NEW_RELIC_API_KEY") or os.getenv("NEW_RELIC_ADMIN_API_KEY")):
        config = get_config_from_context(ctx)
    client_config = resolve_client_config(config, profile_name=ctx_obj.get("profile"))
    ctx_obj["client_config"] = client_config
    return client_config


def load_payload(payload: str | None, file: Path | None) -> dict[str, Any]:
    """Return a JSON object from ``--payload`` or a JSON/YAML ``--file``."""

    if payload and file:
        raise typer.BadParameter("Use either --payload or --file, not both.")
    if file is not None:
        text = file.read_text(encoding="utf-8")
        if file.suffix.lower() in {".yaml", ".yml"}:
            data = yaml.safe_load(text)
        else:
            data = _loads(text)
    elif payload:
        data = _loads(payload)
    else:
        raise typer.BadParameter("Provide a JSON object via --payload or --file.")
    if not isinstance(data, dict):
        raise typer.BadParameter("Payload must be a JSON or YAML object.")
    return cast(dict[str, Any], data)


def _loads(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"Invalid JSON payload: {exc}") from exc


def print_json(data: Any) -> None:
    console.print(
        json.dumps(data, indent=2, default=str), markup=False, highlight=False, soft_wrap=True
    )


__all__ = [
    "console",
    "get_client_config",
    "handle_cli_errors",
    "load_payload",
    "print_json",
    "resolve_client_config",
]
