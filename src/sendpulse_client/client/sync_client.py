"""Synchronous request coordinator with refresh-and-resend on HTTP 401.

This module provides :class:`SyncClient`, the single entry point through
which every SendPulse operation reaches the network. It owns:

- a :class:`~sendpulse_client.client.transport.Transport` over
  :class:`httpx.Client`,
- a :class:`~sendpulse_client.auth.credential_store.CredentialStore` holding
  the key pair and current token,
- a :class:`~sendpulse_client.auth.token_manager.TokenManager` that replaces
  the token.

For each call :meth:`SyncClient.request` sends the descriptor once. A 401
triggers one token refresh and one resend of the same descriptor; a second
401 is returned like any other error. Connection failures become a result
with ``http_status_code == 0``. The returned value is always a
:class:`~sendpulse_client.models.SendPulseResponse`.
"""

from __future__ import annotations

from typing import Optional

import httpx

from sendpulse_client.auth.credential_store import CredentialStore, placeholder_token
from sendpulse_client.auth.token_manager import TokenManager
from sendpulse_client.client.response import error_result, normalize
from sendpulse_client.client.transport import Transport
from sendpulse_client.exceptions import TransportError
from sendpulse_client.models import (
    DEFAULT_BASE_URL,
    Credentials,
    RequestConfig,
    RequestDescriptor,
    SendPulseResponse,
)
from sendpulse_client.output import get_output


class SyncClient:
    """Blocking SendPulse client with one-shot retry after token refresh.

    Args:
        credentials: The API user id and secret.
        base_url: API root.
        request_config: Timeout and TLS settings for the transport.
        profile_name: When set, the bearer token is persisted for this
            profile and reused by later instances.
        transport: Optional :mod:`httpx` transport (e.g.
            :class:`httpx.MockTransport`) for the underlying client.

    Example::

        with SyncClient(Credentials(client_id="id", client_secret="s")) as client:
            result = client.request(RequestDescriptor(path="senders"))
    """

    def __init__(
        self,
        credentials: Credentials,
        base_url: str = DEFAULT_BASE_URL,
        request_config: Optional[RequestConfig] = None,
        profile_name: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._store = CredentialStore(credentials, profile_name=profile_name)
        self._transport = Transport(
            base_url=base_url,
            request_config=request_config,
            token_provider=lambda: self._store.token,
            transport=transport,
        )
        self._token_manager = TokenManager(self._store, self._transport)

    @property
    def store(self) -> CredentialStore:
        return self._store

    @property
    def token_manager(self) -> TokenManager:
        return self._token_manager

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> SyncClient:
        # Pre-authenticate unless a real token was restored from disk.
        if self._store.token == placeholder_token(self._store.credentials):
            self._token_manager.refresh()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        self._transport.close()

    # ------------------------------------------------------------------ #
    # Request coordination
    # ------------------------------------------------------------------ #

    def request(self, descriptor: RequestDescriptor) -> SendPulseResponse:
        """Send *descriptor*, refreshing the token and resending once on 401.

        Args:
            descriptor: The request to send. It is reused unchanged for the
                resend.

        Returns:
            The normalized result of the final attempt, or an error result
            with status ``0`` when the transport failed.
        """
        refreshed = False
        while True:
            sent_with = self._store.token
            try:
                raw = self._transport.send(descriptor)
            except TransportError as exc:
                get_output().log_exception("Request failed", exc)
                return error_result(f"Connection failed: {exc}")

            if raw.status_code == 401 and descriptor.use_auth and not refreshed:
                refreshed = True
                get_output().debug("Received 401, refreshing access token")
                # The resend happens whether or not the refresh succeeded.
                self._token_manager.refresh(stale_token=sent_with)
                continue

            return normalize(raw.status_code, raw.body)
