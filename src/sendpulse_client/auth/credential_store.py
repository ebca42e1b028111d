"""Storage for the API key pair and the current bearer token.

:class:`CredentialStore` is a plain holder: it keeps the immutable
:class:`~sendpulse_client.models.Credentials` and the mutable token value,
and nothing else decides anything here. Only
:class:`~sendpulse_client.auth.token_manager.TokenManager` writes the token.

When constructed with a ``profile_name`` the store also persists the token
to ``~/.local/share/sendpulse/credentials/<profile>.json`` (XDG) or the
platform-equivalent directory, so that consecutive CLI invocations reuse
one token instead of exchanging credentials every time. Token files go through
:func:`~sendpulse_client.config.atomic_write` with mode ``0o600``.
"""

from __future__ import annotations

import hashlib
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from sendpulse_client.config import atomic_write, get_data_dir
from sendpulse_client.models import Credentials
from sendpulse_client.output import get_output


class TokenEntry(BaseModel):
    """A persisted bearer token.

    Attributes:
        access_token: The token value returned by the credentials grant.
        client_id: The API user id the token was issued for. A stored token
            whose id does not match the current credentials is ignored.
        obtained_at: UTC time of the exchange.
    """

    access_token: str = Field(description="Bearer token value")
    client_id: str = Field(description="API user id the token belongs to")
    obtained_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the token was obtained",
    )


def placeholder_token(credentials: Credentials) -> str:
    """Return the non-functional seed token for *credentials*.

    Upper-case hex MD5 of ``"<client_id>::<client_secret>"``. The API always
    rejects it with 401, which drives the first real exchange.
    """
    raw = f"{credentials.client_id}::{credentials.client_secret}".encode("utf-8")
    return hashlib.md5(raw).hexdigest().upper()


def _credentials_dir() -> Path:
    """Return the credentials directory, creating it if needed."""
    path = get_data_dir() / "credentials"
    path.mkdir(parents=True, exist_ok=True)
    return path


def token_path(profile_name: str) -> Path:
    """Return the token file path for *profile_name* (which may not exist)."""
    return _credentials_dir() / f"{profile_name}.json"


class CredentialStore:
    """Holds the key pair and current token, optionally persisted per profile.

    Args:
        credentials: The API key pair.
        profile_name: When given, the token is loaded from and saved to this
            profile's credential file.

    Example::

        store = CredentialStore(Credentials(client_id="id", client_secret="s"))
        store.token          # placeholder until the first exchange
        store.token = "abc"  # done by the token manager
    """

    def __init__(
        self,
        credentials: Credentials,
        profile_name: Optional[str] = None,
    ) -> None:
        self._credentials = credentials
        self._profile_name = profile_name
        self._path: Optional[Path] = (
            token_path(profile_name) if profile_name else None
        )

        stored = self.load()
        if stored is not None and stored.client_id == credentials.client_id:
            self._token: Optional[str] = stored.access_token
        else:
            self._token = placeholder_token(credentials)

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    @property
    def path(self) -> Optional[Path]:
        """The token file for this profile, or ``None`` when not persisted."""
        return self._path

    @property
    def token(self) -> Optional[str]:
        """The current bearer token."""
        return self._token

    @token.setter
    def token(self, value: Optional[str]) -> None:
        self._token = value
        if self._path is not None and value:
            try:
                self.save(TokenEntry(access_token=value, client_id=self._credentials.client_id))
            except OSError as exc:
                get_output().log_exception(f"Could not persist token to {self._path}", exc)

    # ------------------------------------------------------------------ #
    # Persistence
    # ------------------------------------------------------------------ #

    def save(self, entry: TokenEntry) -> None:
        """Persist a token entry atomically with ``0o600`` permissions.

        No-op when the store is not bound to a profile.

        Raises:
            OSError: If the file cannot be written.
        """
        if self._path is None:
            return
        text = json.dumps(entry.model_dump(mode="json"), indent=2) + "\n"
        atomic_write(self._path, text, mode=0o600)

    def load(self) -> Optional[TokenEntry]:
        """Load the persisted token entry.

        Returns:
            The stored :class:`TokenEntry`, or ``None`` if the store is not
            persisted, the file does not exist, or it cannot be parsed.
        """
        if self._path is None or not self._path.is_file():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            return TokenEntry.model_validate(data)
        except (json.JSONDecodeError, ValueError, OSError):
            return None

    def clear(self) -> None:
        """Forget the token: reset to the placeholder and delete the file."""
        self._token = placeholder_token(self._credentials)
        if self._path is not None and self._path.is_file():
            self._path.unlink()
