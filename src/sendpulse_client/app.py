"""Typer application factory and CLI entry point for sendpulse_client.

This module wires together the top-level Typer application, registers the
built-in sub-commands (``init``, ``auth``, ``config``) and one command group
per SendPulse API area, generated from
:data:`~sendpulse_client.endpoints.ENDPOINTS`.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers, registers commands and
invokes the Typer app. Unhandled exceptions are written to a crash log under
the data directory.

Each generated command builds a :class:`~sendpulse_client.sendpulse.SendPulse`
from the active profile (see :func:`create_api`), calls the matching method,
prints the result's ``data`` and exits with the code matching the result
(see :func:`~sendpulse_client.exceptions.error_for_result`).

See Also:
    :mod:`sendpulse_client.config`: Profile and global configuration resolution.
    :mod:`sendpulse_client.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

import typer

from sendpulse_client import __version__
from sendpulse_client.exit_codes import EXIT_GENERIC_FAILURE

if TYPE_CHECKING:
    from sendpulse_client.output import OutputFormat
    from sendpulse_client.sendpulse import SendPulse


app = typer.Typer(
    name="sendpulse",
    help="Command-line client for the SendPulse REST API.",
    no_args_is_help=True,
    add_completion=True,
    rich_markup_mode="rich",
)

_registered = False


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"sendpulse {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    profile: Optional[str] = typer.Option(
        None, "--profile", "-p", help="Profile name to use."
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="Override the API base URL."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Skip confirmations."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~sendpulse_client.output.OutputManager`
    from CLI flags, and stores shared options (``profile``, ``base_url``,
    ``force``) in the Typer context so that sub-commands can read them via
    ``ctx.obj``.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        profile: Profile name override (highest precedence).
        base_url: API base URL override (highest precedence).
        json_output: Force JSON output format.
        plain_output: Force plain-text output format.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output.
        force: Skip interactive confirmations.
    """
    from sendpulse_client.output import OutputFormat, OutputManager, set_output

    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        fmt = _configured_format()

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["profile"] = profile
    ctx.obj["base_url"] = base_url
    ctx.obj["force"] = force
    ctx.obj["verbose"] = verbose


def _configured_format() -> OutputFormat:
    """The ``output.format`` of the global config, ``auto`` if it cannot be read.

    A broken config file is reported by the command that reads it.
    """
    from sendpulse_client.config import load_global_config
    from sendpulse_client.exceptions import ConfigError
    from sendpulse_client.output import OutputFormat

    try:
        return OutputFormat(load_global_config().output.format)
    except ConfigError:
        return OutputFormat.AUTO


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path.

    Args:
        exc: The unhandled exception to log.

    Returns:
        Absolute path to the written crash log file.
    """
    from sendpulse_client.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


# ------------------------------------------------------------------ #
# API construction
# ------------------------------------------------------------------ #


def create_api(
    profile_name: Optional[str] = None,
    base_url: Optional[str] = None,
) -> SendPulse:
    """Build a :class:`~sendpulse_client.sendpulse.SendPulse` for the CLI.

    See :func:`~sendpulse_client.config.resolve_connection` for where the
    credentials come from.

    Raises:
        ConfigError: If no credentials can be found.
    """
    from sendpulse_client.config import resolve_connection
    from sendpulse_client.sendpulse import SendPulse

    conn = resolve_connection(profile_name, base_url)
    return SendPulse(
        conn.credentials.client_id,
        conn.credentials.client_secret,
        base_url=conn.base_url,
        request_config=conn.request,
        profile_name=conn.token_profile,
    )


def _run_endpoint(ctx: typer.Context, name: str, kwargs: dict[str, Any]) -> None:
    """Callback invoked by the generated API commands.

    Calls ``SendPulse.<name>(**kwargs)``, prints the response data and
    exits non-zero when the result is an error.
    """
    from sendpulse_client.exceptions import SendPulseError
    from sendpulse_client.output import error, get_output

    obj = ctx.find_root().obj or {}

    try:
        api = create_api(obj.get("profile"), obj.get("base_url"))
    except SendPulseError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    try:
        result = getattr(api, name)(**kwargs)
    finally:
        api.close()

    failure = get_output().render_result(name, result)
    if failure is not None:
        raise typer.Exit(code=failure.exit_code)


def register_commands() -> typer.Typer:
    """Attach the built-in and generated commands to :data:`app` once."""
    global _registered
    if _registered:
        return app

    from sendpulse_client.commands.auth import auth_app
    from sendpulse_client.commands.config import config_app
    from sendpulse_client.commands.init import init_command
    from sendpulse_client.endpoints import ENDPOINTS, GROUPS
    from sendpulse_client.generator import build_command_tree

    app.command("init")(init_command)
    app.add_typer(auth_app, name="auth", help="Bearer token management.")
    app.add_typer(config_app, name="config", help="Configuration and profiles.")
    build_command_tree(ENDPOINTS, GROUPS, request_callback=_run_endpoint, app=app)

    _registered = True
    return app


def main() -> None:
    """CLI entry point invoked by the ``sendpulse`` console script.

    Performs the following sequence:

    1. Install signal handlers for clean Ctrl-C behaviour.
    2. Register built-in and generated sub-commands.
    3. Invoke the Typer application.

    Unhandled :class:`~sendpulse_client.exceptions.SendPulseError` instances
    cause a clean exit with the error's ``exit_code``. All other exceptions
    produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        register_commands()
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from sendpulse_client.exceptions import SendPulseError
        from sendpulse_client.output import error

        if isinstance(exc, SendPulseError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
