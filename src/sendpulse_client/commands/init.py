"""Init command -- create a profile for a SendPulse account.

Implements the ``sendpulse init`` top-level command, the typical entry
point for first-time setup. It records where the API user id and secret
are read from (never the values themselves), saves a
:class:`~sendpulse_client.models.Profile`, and optionally writes a
project-local ``sendpulse.json`` selecting it.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from sendpulse_client.output import error, info, success, suggest


def init_command(
    name: str = typer.Option(
        "default", "--name", "-n", help="Profile name."
    ),
    client_id_source: str = typer.Option(
        "env:SENDPULSE_CLIENT_ID",
        "--client-id-source",
        help="Where to read the API user id: env:VAR, file:/path or prompt.",
    ),
    client_secret_source: str = typer.Option(
        "env:SENDPULSE_CLIENT_SECRET",
        "--client-secret-source",
        help="Where to read the API secret: env:VAR, file:/path or prompt.",
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="Override base URL."
    ),
    persist_token: bool = typer.Option(
        True,
        "--persist-token/--no-persist-token",
        help="Reuse the bearer token across invocations.",
    ),
    project: bool = typer.Option(
        False, "--project", help="Write ./sendpulse.json selecting this profile."
    ),
) -> None:
    """Create a profile for a SendPulse account.

    The first profile created also becomes the global default.

    Args:
        name: Profile name.
        client_id_source: Credential source for the API user id.
        client_secret_source: Credential source for the API secret.
        base_url: Override for the API base URL.
        persist_token: Whether the bearer token is stored between runs.
        project: Also write a project-local ``sendpulse.json``.

    Raises:
        typer.Exit: With code 2 if a credential source is malformed.

    Example::

        sendpulse init
        sendpulse init --name marketing --client-secret-source file:~/.sp-secret
    """
    from sendpulse_client.config import (
        load_global_config,
        profile_exists,
        save_global_config,
        save_profile,
    )
    from sendpulse_client.models import DEFAULT_BASE_URL, Profile

    for source in (client_id_source, client_secret_source):
        if not _valid_source(source):
            error(f"Invalid credential source: {source}")
            suggest("Use env:VAR_NAME, file:/path/to/file or prompt")
            raise typer.Exit(code=2)

    if profile_exists(name):
        info(f'Profile "{name}" already exists and will be overwritten.')

    profile = Profile(
        name=name,
        base_url=base_url or DEFAULT_BASE_URL,
        client_id_source=client_id_source,
        client_secret_source=client_secret_source,
        persist_token=persist_token,
    )
    save_profile(profile)

    global_config = load_global_config()
    if global_config.default_profile is None:
        global_config.default_profile = name
        save_global_config(global_config)
        info(f'"{name}" is now the default profile.')

    if project:
        project_config_path = Path("sendpulse.json")
        project_config_path.write_text(
            json.dumps({"default_profile": name}, indent=2) + "\n"
        )
        info(f"Wrote {project_config_path}")

    success(f'Profile "{name}" created.')
    suggest(f"Check credentials: sendpulse auth token {name}")


def _valid_source(source: str) -> bool:
    return source == "prompt" or (
        source.startswith(("env:", "file:")) and len(source.split(":", 1)[1]) > 0
    )
