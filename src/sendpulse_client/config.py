"""Where the CLI finds its SendPulse account and how it talks to it.

Files live in two directories:

* the config directory (``$XDG_CONFIG_HOME/sendpulse`` on Linux and BSD,
  ``~/.sendpulse`` elsewhere) holds ``config.json``
  (:class:`~sendpulse_client.models.GlobalConfig`) and one
  ``profiles/<name>.json`` per account
  (:class:`~sendpulse_client.models.Profile`);
* the data directory (``$XDG_DATA_HOME/sendpulse`` or ``~/.sendpulse/data``)
  holds cached bearer tokens and crash logs.

A ``sendpulse.json`` in the working directory may pin a
``default_profile`` for one project.

:func:`resolve_connection` turns the ``--profile`` / ``--base-url`` flags
into a :class:`~sendpulse_client.models.Connection`. Without any profile it
falls back to the ``SENDPULSE_CLIENT_ID`` and ``SENDPULSE_CLIENT_SECRET``
environment variables, the way the SendPulse SDKs are usually configured
in CI jobs.
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Any, Optional

from sendpulse_client.exceptions import ConfigError
from sendpulse_client.models import (
    DEFAULT_BASE_URL,
    Connection,
    Credentials,
    GlobalConfig,
    Profile,
)

ENV_PROFILE = "SENDPULSE_PROFILE"
ENV_BASE_URL = "SENDPULSE_BASE_URL"
ENV_CLIENT_ID = "SENDPULSE_CLIENT_ID"
ENV_CLIENT_SECRET = "SENDPULSE_CLIENT_SECRET"

_DIR_NAME = "sendpulse"
_PROJECT_FILE = "sendpulse.json"


# --- Directories ---


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def _xdg_dir(env_var: str, *default: str) -> Path:
    root = os.environ.get(env_var) or Path.home().joinpath(*default)
    return Path(root) / _DIR_NAME


def get_config_dir() -> Path:
    if _is_xdg_platform():
        return _ensure_dir(_xdg_dir("XDG_CONFIG_HOME", ".config"))
    return _ensure_dir(Path.home() / f".{_DIR_NAME}")


def get_data_dir() -> Path:
    """Directory for cached tokens and crash logs."""
    if _is_xdg_platform():
        return _ensure_dir(_xdg_dir("XDG_DATA_HOME", ".local", "share"))
    return _ensure_dir(Path.home() / f".{_DIR_NAME}" / "data")


def get_profiles_dir() -> Path:
    return _ensure_dir(get_config_dir() / "profiles")


# --- File helpers ---


def atomic_write(path: Path, data: str, mode: Optional[int] = None) -> None:
    """Replace *path* with *data* through a rename.

    The temporary file is created beside *path* so the rename stays on one
    filesystem. *mode* is applied before anything is written; token files
    use ``0o600``. On failure the temporary file is removed and the error
    propagates.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = tempfile.NamedTemporaryFile(
        "w",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
        encoding="utf-8",
    )
    try:
        with tmp:
            if mode is not None:
                os.chmod(tmp.name, mode)
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp.name, path)
    except BaseException:
        Path(tmp.name).unlink(missing_ok=True)
        raise


def _write_json(path: Path, data: Any) -> None:
    atomic_write(path, json.dumps(data, indent=2) + "\n")


def _read_json(path: Path, what: str) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise ConfigError(f"Invalid {what} at {path}: {exc}") from exc


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / "config.json"


def load_global_config() -> GlobalConfig:
    """Return the stored global config, or the defaults when there is none.

    Raises:
        ConfigError: If ``config.json`` is not valid JSON or has bad fields.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    data = _read_json(path, "global config")
    try:
        return GlobalConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    _write_json(_global_config_path(), config.model_dump(mode="json"))


# --- Profiles ---


def _profile_path(name: str) -> Path:
    return get_profiles_dir() / f"{name}.json"


def list_profiles() -> list[str]:
    return sorted(p.stem for p in get_profiles_dir().glob("*.json") if p.is_file())


def profile_exists(name: str) -> bool:
    return _profile_path(name).is_file()


def load_profile(name: str) -> Profile:
    """Read the account profile *name*.

    Raises:
        ConfigError: If the profile is missing or does not validate.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    data = _read_json(path, f"profile '{name}'")
    try:
        return Profile.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid profile '{name}' at {path}: {exc}") from exc


def save_profile(profile: Profile) -> None:
    _write_json(_profile_path(profile.name), profile.model_dump(mode="json"))


def delete_profile(name: str) -> None:
    """Remove profile *name*; its cached token is left to the caller.

    Raises:
        ConfigError: If the profile does not exist.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    path.unlink()


def load_project_config() -> Optional[dict[str, Any]]:
    """Return ``./sendpulse.json`` as a dict, or ``None`` when absent.

    Raises:
        ConfigError: If the file is not valid JSON.
    """
    path = Path.cwd() / _PROJECT_FILE
    if not path.is_file():
        return None
    return _read_json(path, "project config")


# --- Resolution ---


def _active_profile_name(cli_profile: Optional[str], global_cfg: GlobalConfig) -> Optional[str]:
    project = load_project_config() or {}
    for candidate in (
        cli_profile,
        os.environ.get(ENV_PROFILE),
        project.get("default_profile"),
        global_cfg.default_profile,
    ):
        if candidate:
            return candidate

    if global_cfg.auto_select_single_profile:
        stored = list_profiles()
        if len(stored) == 1:
            return stored[0]
    return None


def resolve_config(
    cli_profile: Optional[str] = None,
    cli_base_url: Optional[str] = None,
) -> tuple[GlobalConfig, Optional[Profile]]:
    """Return the global config and the active profile, if any.

    The profile name comes from, in order: ``--profile``,
    ``SENDPULSE_PROFILE``, ``default_profile`` in ``./sendpulse.json``,
    ``default_profile`` in the global config. When none names one and a
    single profile is stored, it is used (``auto_select_single_profile``).

    The profile's ``base_url`` is overridden by ``--base-url``, then by
    ``SENDPULSE_BASE_URL``.

    Raises:
        ConfigError: If a named profile is missing or a file is invalid.
    """
    global_cfg = load_global_config()
    name = _active_profile_name(cli_profile, global_cfg)
    if name is None:
        return global_cfg, None

    profile = load_profile(name)
    override = cli_base_url or os.environ.get(ENV_BASE_URL)
    if override:
        profile.base_url = override
    return global_cfg, profile


def resolve_connection(
    cli_profile: Optional[str] = None,
    cli_base_url: Optional[str] = None,
) -> Connection:
    """Work out the credentials and endpoint for one CLI invocation.

    With an active profile its credential sources are read and its token
    is cached under the profile name (unless ``persist_token`` is off).
    Without one, the key pair comes from ``SENDPULSE_CLIENT_ID`` and
    ``SENDPULSE_CLIENT_SECRET`` and the token is kept in memory.

    Raises:
        ConfigError: If no credentials can be found.
    """
    _, profile = resolve_config(cli_profile, cli_base_url)
    if profile is not None:
        return Connection(
            credentials=resolve_credentials(profile),
            base_url=profile.base_url,
            request=profile.request,
            token_profile=profile.name if profile.persist_token else None,
        )

    client_id = os.environ.get(ENV_CLIENT_ID)
    client_secret = os.environ.get(ENV_CLIENT_SECRET)
    if not client_id or not client_secret:
        raise ConfigError(
            f"No profile configured and {ENV_CLIENT_ID} / {ENV_CLIENT_SECRET} "
            "are not set. Run: sendpulse init"
        )
    return Connection(
        credentials=Credentials(client_id=client_id, client_secret=client_secret),
        base_url=cli_base_url or os.environ.get(ENV_BASE_URL) or DEFAULT_BASE_URL,
    )


# --- Credential sources ---


def resolve_credential(source: str, label: str = "credential") -> str:
    """Read one half of the key pair from its source descriptor.

    ``env:NAME`` reads an environment variable, ``file:PATH`` reads a file
    (``~`` expanded, surrounding whitespace stripped) and ``prompt`` asks on
    the terminal for *label*.

    Raises:
        ConfigError: If the source is unknown or yields nothing.
    """
    kind, _, ref = source.partition(":")

    if kind == "env":
        value = os.environ.get(ref)
        if value is None:
            raise ConfigError(f"Environment variable '{ref}' is not set (source: {source})")
        return value

    if kind == "file":
        path = Path(ref).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError(f"Cannot prompt for the {label}: stdin is not a TTY")
        return getpass.getpass(f"SendPulse {label}: ")

    raise ConfigError(f"Unknown credential source format: {source}")


def resolve_credentials(profile: Profile) -> Credentials:
    """Read the API user id and secret of *profile*.

    Raises:
        ConfigError: If a source fails or either value is empty.
    """
    client_id = resolve_credential(profile.client_id_source, "API user id")
    client_secret = resolve_credential(profile.client_secret_source, "API secret")
    if not client_id or not client_secret:
        raise ConfigError(f"Empty client id or secret for profile '{profile.name}'")
    return Credentials(client_id=client_id, client_secret=client_secret)
