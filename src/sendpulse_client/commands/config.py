"""Config commands -- view and modify global configuration and profiles.

Provides the ``sendpulse config`` sub-command group for reading, updating,
and resetting the user's global configuration file
(:class:`~sendpulse_client.models.GlobalConfig`), and for listing, showing
and deleting stored :class:`~sendpulse_client.models.Profile` files.
"""

from __future__ import annotations

from typing import Optional

import typer

from sendpulse_client.output import error, format_response, get_output, info, success, suggest


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show current configuration.

    Prints the config directory path followed by the full configuration
    (table or JSON, depending on the active output mode).

    Example::

        sendpulse config show
        sendpulse --json config show
    """
    from sendpulse_client.config import get_config_dir, load_global_config

    config = load_global_config()
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'output.format')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys. The value is coerced to match the
    existing field's type (bool or str) and the updated config is validated
    against :class:`~sendpulse_client.models.GlobalConfig` before saving.

    Args:
        key: Dot-separated config key path (e.g. ``output.format``).
        value: String value to set.

    Raises:
        typer.Exit: With code 2 if the key path is invalid or validation
            fails.

    Example::

        sendpulse config set default_profile marketing
        sendpulse config set output.format json
    """
    from sendpulse_client.config import load_global_config, save_global_config
    from sendpulse_client.models import GlobalConfig

    config = load_global_config()
    data = config.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    current = target[final_key]
    if isinstance(current, bool):
        coerced: object = value.lower() in ("true", "1", "yes")
    else:
        coerced = value

    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(ctx: typer.Context) -> None:
    """Reset configuration to defaults.

    Asks for confirmation unless ``--force`` is active.

    Example::

        sendpulse config reset
        sendpulse --force config reset
    """
    from sendpulse_client.config import save_global_config
    from sendpulse_client.models import GlobalConfig

    if not _forced(ctx):
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")


@config_app.command("profiles")
def config_profiles() -> None:
    """List stored profiles with their credential sources.

    Profiles that fail to load are shown with an ``error`` status.

    Example::

        sendpulse config profiles
    """
    from sendpulse_client.config import list_profiles, load_global_config, load_profile
    from sendpulse_client.exceptions import ConfigError

    profiles = list_profiles()
    if not profiles:
        info("No profiles configured.")
        suggest("Create one: sendpulse init")
        return

    default = load_global_config().default_profile
    headers = ["Profile", "Default", "Base URL", "Client ID Source", "Secret Source"]
    rows: list[list[str]] = []
    for name in profiles:
        try:
            profile = load_profile(name)
        except ConfigError:
            rows.append([name, "", "error", "-", "-"])
            continue
        rows.append([
            name,
            "*" if name == default else "",
            profile.base_url,
            profile.client_id_source,
            profile.client_secret_source,
        ])

    get_output().print_table(headers, rows, title="Configured Profiles")


@config_app.command("profile")
def config_profile(
    ctx: typer.Context,
    profile_name: Optional[str] = typer.Argument(
        None, help="Profile name (defaults to the active profile)."
    ),
) -> None:
    """Show one profile's settings.

    Example::

        sendpulse config profile marketing
    """
    from sendpulse_client.config import load_profile, resolve_config
    from sendpulse_client.exceptions import ConfigError

    try:
        if profile_name is None:
            _, profile = resolve_config(cli_profile=_root_profile(ctx))
            if profile is None:
                error("No active profile.")
                suggest("Create one: sendpulse init")
                raise typer.Exit(code=2)
        else:
            profile = load_profile(profile_name)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=2) from None

    format_response(profile.model_dump(mode="json"))


@config_app.command("delete")
def config_delete(
    ctx: typer.Context,
    profile_name: str = typer.Argument(help="Profile name to delete."),
) -> None:
    """Delete a stored profile and its persisted token.

    Asks for confirmation unless ``--force`` is active. When the profile was
    the global default, the default is cleared.

    Example::

        sendpulse config delete marketing
    """
    from sendpulse_client.auth.credential_store import token_path
    from sendpulse_client.config import (
        delete_profile,
        load_global_config,
        profile_exists,
        save_global_config,
    )

    if not profile_exists(profile_name):
        error(f'Profile "{profile_name}" not found.')
        raise typer.Exit(code=2)

    if not _forced(ctx):
        confirmed = typer.confirm(f'Delete profile "{profile_name}"?')
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    delete_profile(profile_name)
    stored_token = token_path(profile_name)
    if stored_token.is_file():
        stored_token.unlink()

    config = load_global_config()
    if config.default_profile == profile_name:
        config.default_profile = None
        save_global_config(config)

    success(f'Profile "{profile_name}" deleted.')


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _root_obj(ctx: typer.Context) -> dict:
    return ctx.find_root().obj or {}


def _forced(ctx: typer.Context) -> bool:
    return bool(_root_obj(ctx).get("force", False))


def _root_profile(ctx: typer.Context) -> Optional[str]:
    return _root_obj(ctx).get("profile")
