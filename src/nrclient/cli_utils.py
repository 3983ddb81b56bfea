from __future__ import annotations

import os

import typer

from .config import ConfigData, ConfigStore, Profile


def _ensure_config(config: ConfigData | None) -> ConfigData:
    return config or ConfigStore().load()


def active_profile(config: ConfigData, name: str | None = None) -> Profile | None:
    """Return the named profile, falling back to the default profile."""

    profile_name = name or config.default_profile
    if not profile_name:
        return None
    return config.profiles.get(profile_name)


def resolve_account_id(
    option_value: int | None,
    *,
    config: ConfigData | None = None,
    profile_name: str | None = None,
) -> int:
    """Return the effective account id for a CLI command."""

    if option_value is not None:
        return option_value

    env_value = os.getenv("NEW_RELIC_ACCOUNT_ID")
    if env_value:
        try:
            return int(env_value)
        except ValueError as exc:
            raise typer.BadParameter(
                f"NEW_RELIC_ACCOUNT_ID must be an integer, got {env_value!r}"
            ) from exc

    profile = active_profile(_ensure_config(config), profile_name)
    if profile is not None and profile.account_id is not None:
        return profile.account_id

    raise typer.BadParameter(
        "Account ID is not configured. Pass --account-id, export NEW_RELIC_ACCOUNT_ID, or run "
        "`nrc profile add NAME --account-id <id>`."
    )


def get_config_from_context(ctx: typer.Context, *, store: ConfigStore | None = None) -> ConfigData:
    """Return a cached :class:`ConfigData` instance stored on ``ctx``."""

    ctx.ensure_object(dict)
    existing = ctx.obj.get("config") if ctx.obj else None
    if isinstance(existing, ConfigData):
        return existing

    cfg_store = store or ConfigStore()
    cfg = cfg_store.load()
    ctx.obj["config"] = cfg
    return cfg


def resolve_account_id_from_context(
    ctx: typer.Context, option_value: int | None, *, store: ConfigStore | None = None
) -> int:
    """Resolve the account id using cached CLI configuration."""

    if option_value is not None:
        return option_value
    if os.getenv("NEW_RELIC_ACCOUNT_ID"):
        return resolve_account_id(None, config=ConfigData())
    cfg = get_config_from_context(ctx, store=store)
    profile_name = ctx.obj.get("profile") if ctx.obj else None
    return resolve_account_id(option_value, config=cfg, profile_name=profile_name)
