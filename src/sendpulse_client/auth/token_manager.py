"""Bearer token acquisition via the OAuth2 client-credentials grant.

:class:`TokenManager` performs the non-interactive Client Credentials
grant (:rfc:`6749` section 4.4) against SendPulse's ``oauth/access_token``
endpoint, exchanging the API user id and secret for a bearer token that it
stores in the :class:`~sendpulse_client.auth.credential_store.CredentialStore`.

There is no expiry tracking: SendPulse signals an expired token with HTTP
401, and :class:`~sendpulse_client.client.sync_client.SyncClient` reacts by
calling :meth:`TokenManager.refresh` once and resending.

Refreshes are serialised with a lock. A caller that saw a stale token which
another thread has already replaced skips its own exchange.
"""

from __future__ import annotations

import json
import threading
from typing import TYPE_CHECKING, Optional

from sendpulse_client.auth.credential_store import CredentialStore
from sendpulse_client.exceptions import TransportError
from sendpulse_client.models import Encoding, HTTPMethod, RequestDescriptor
from sendpulse_client.output import get_output

if TYPE_CHECKING:
    from sendpulse_client.client.transport import Transport

TOKEN_PATH = "oauth/access_token"


class TokenManager:
    """Obtain and replace the bearer token held by a credential store.

    Args:
        store: Holds the key pair and receives the new token.
        transport: Used for the token exchange, without auth.
    """

    def __init__(self, store: CredentialStore, transport: Transport) -> None:
        self._store = store
        self._transport = transport
        self._lock = threading.Lock()

    @property
    def token(self) -> Optional[str]:
        return self._store.token

    def refresh(self, stale_token: Optional[str] = None) -> bool:
        """Exchange the credentials for a new bearer token.

        Args:
            stale_token: The token the caller saw rejected. When the stored
                token no longer equals it, another caller already refreshed
                and this call returns ``True`` without a request.

        Returns:
            ``True`` if a token was obtained (or already replaced),
            ``False`` on any failure. The previous token is kept on failure.
        """
        with self._lock:
            if stale_token is not None and self._store.token != stale_token:
                get_output().debug("Token already refreshed by another caller")
                return True
            return self._exchange()

    def _exchange(self) -> bool:
        credentials = self._store.credentials
        descriptor = RequestDescriptor(
            path=TOKEN_PATH,
            method=HTTPMethod.POST,
            params={
                "grant_type": "client_credentials",
                "client_id": credentials.client_id,
                "client_secret": credentials.client_secret,
            },
            encoding=Encoding.FORM,
            use_auth=False,
        )

        try:
            raw = self._transport.send(descriptor)
        except TransportError as exc:
            get_output().log_exception("Token request failed", exc)
            return False

        if raw.status_code != 200:
            get_output().warning(f"Token request failed with status {raw.status_code}")
            return False

        try:
            token_data = json.loads(raw.body)
        except ValueError as exc:
            get_output().log_exception("Token response is not valid JSON", exc)
            return False

        access_token = token_data.get("access_token") if isinstance(token_data, dict) else None
        if not access_token:
            get_output().warning("Token response missing 'access_token' field")
            return False

        self._store.token = str(access_token)
        get_output().debug("Obtained a new access token")
        return True
