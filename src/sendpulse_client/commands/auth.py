"""Auth commands -- manage the persisted bearer token.

SendPulse authenticates with the OAuth2 client-credentials grant; the
resulting bearer token is cached per profile by
:class:`~sendpulse_client.auth.credential_store.CredentialStore`. The
``sendpulse auth`` sub-command group exchanges credentials on demand,
shows what is stored, and clears it.

Typical workflow::

    sendpulse auth token marketing    # exchange the key pair, store the token
    sendpulse auth status marketing   # inspect the stored token
    sendpulse auth clear marketing    # forget it
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import typer

from sendpulse_client.output import error, get_output, info, success, suggest

if TYPE_CHECKING:
    from sendpulse_client.auth.credential_store import TokenEntry


auth_app = typer.Typer(no_args_is_help=True)


@auth_app.command("token")
def auth_token(
    ctx: typer.Context,
    profile_name: Optional[str] = typer.Argument(
        None, help="Profile name (defaults to the active profile)."
    ),
    show: bool = typer.Option(
        False, "--show", help="Print the full token to stdout."
    ),
) -> None:
    """Exchange the profile's key pair for a bearer token.

    Always performs a fresh exchange. The token is stored for the profile
    unless the profile disables ``persist_token``.

    Raises:
        typer.Exit: With code 3 if the exchange fails, or the code of the
            configuration error.

    Example::

        sendpulse auth token
        sendpulse auth token marketing --show
    """
    from sendpulse_client.app import create_api
    from sendpulse_client.exceptions import SendPulseError
    from sendpulse_client.exit_codes import EXIT_AUTH_FAILURE

    obj = ctx.find_root().obj or {}
    try:
        api = create_api(profile_name or obj.get("profile"), obj.get("base_url"))
    except SendPulseError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    try:
        obtained = api.client.token_manager.refresh()
        token = api.client.store.token or ""
        stored_at = api.client.store.path
    finally:
        api.close()

    if not obtained:
        error("Token exchange failed. Check the API user id and secret.")
        raise typer.Exit(code=EXIT_AUTH_FAILURE)

    success(f"Obtained access token {_preview(token)}")
    if stored_at is not None:
        info(f"Stored at {stored_at}")
    if show:
        get_output().print_data(token)


@auth_app.command("status")
def auth_status(
    ctx: typer.Context,
    profile_name: Optional[str] = typer.Argument(
        None, help="Profile name (defaults to the active profile)."
    ),
) -> None:
    """Show the stored bearer token for a profile.

    Example::

        sendpulse auth status marketing
    """
    name = _resolve_profile_name(ctx, profile_name)
    entry = _load_entry(name)
    if entry is None:
        info(f'No stored token for "{name}".')
        suggest(f"Obtain one: sendpulse auth token {name}")
        return

    headers = ["Field", "Value"]
    rows = [
        ["Profile", name],
        ["Client ID", entry.client_id],
        ["Token", _preview(entry.access_token)],
        ["Obtained At", entry.obtained_at.isoformat()],
    ]
    get_output().print_table(headers, rows, title="Stored Token")


@auth_app.command("clear")
def auth_clear(
    ctx: typer.Context,
    profile_name: Optional[str] = typer.Argument(
        None, help="Profile name (defaults to the active profile)."
    ),
) -> None:
    """Delete the stored bearer token for a profile.

    Asks for confirmation unless the ``--force`` flag is active.

    Example::

        sendpulse auth clear marketing
        sendpulse --force auth clear marketing
    """
    from sendpulse_client.auth.credential_store import token_path

    name = _resolve_profile_name(ctx, profile_name)
    path = token_path(name)
    if not path.is_file():
        info(f'No stored token for "{name}".')
        return

    force = (ctx.find_root().obj or {}).get("force", False)
    if not force:
        confirmed = typer.confirm(f'Clear stored token for "{name}"?')
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    path.unlink()
    success(f'Stored token cleared for "{name}".')


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _preview(token: str) -> str:
    return token[:8] + "..." if len(token) > 8 else token


def _resolve_profile_name(ctx: typer.Context, profile_name: Optional[str]) -> str:
    """Return *profile_name*, or the active profile's name.

    Raises:
        typer.Exit: With code 2 if no profile is named or active.
    """
    from sendpulse_client.config import resolve_config
    from sendpulse_client.exceptions import ConfigError

    if profile_name:
        return profile_name

    obj = ctx.find_root().obj or {}
    try:
        _, profile = resolve_config(cli_profile=obj.get("profile"))
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=2) from None
    if profile is None:
        error("No active profile.")
        suggest("Create one: sendpulse init")
        raise typer.Exit(code=2)
    return profile.name


def _load_entry(profile_name: str) -> Optional[TokenEntry]:
    """Read the stored :class:`~sendpulse_client.auth.credential_store.TokenEntry`, if any."""
    import json

    from sendpulse_client.auth.credential_store import TokenEntry, token_path

    path = token_path(profile_name)
    if not path.is_file():
        return None
    try:
        return TokenEntry.model_validate(json.loads(path.read_text(encoding="utf-8")))
    except ValueError:
        error(f"Stored token for \"{profile_name}\" is unreadable: {path}")
        return None
