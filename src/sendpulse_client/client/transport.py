"""Single-shot HTTP transport over :class:`httpx.Client`.

:class:`Transport` issues exactly one request per
:meth:`~Transport.send` call and returns the raw status and body, whatever
the status. It never retries and never interprets the body; those concerns
belong to :class:`~sendpulse_client.client.sync_client.SyncClient` and
:mod:`~sendpulse_client.client.response`.
"""

from __future__ import annotations

from typing import Callable, Optional

import httpx

from sendpulse_client.client.encoder import encode
from sendpulse_client.exceptions import TransportError
from sendpulse_client.models import (
    DEFAULT_BASE_URL,
    Encoding,
    HTTPMethod,
    RawResponse,
    RequestConfig,
    RequestDescriptor,
)
from sendpulse_client.output import get_output

TokenProvider = Callable[[], Optional[str]]


class Transport:
    """Blocking HTTP transport bound to one SendPulse base URL.

    GET requests carry their parameters FORM-encoded in the query string.
    Other verbs send the encoded body with a ``Content-Type`` matching the
    descriptor's encoding. The bearer header is attached when the descriptor
    requires auth and the token provider yields a value.

    Args:
        base_url: API root, e.g. ``https://api.sendpulse.com``.
        request_config: Timeout and TLS settings.
        token_provider: Zero-argument callable returning the current bearer
            token, or ``None``.
        transport: Optional :mod:`httpx` transport, e.g.
            :class:`httpx.MockTransport` in tests.

    Example::

        with Transport(token_provider=lambda: store.token) as t:
            raw = t.send(RequestDescriptor(path="addressbooks"))
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        request_config: Optional[RequestConfig] = None,
        token_provider: Optional[TokenProvider] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        config = request_config or RequestConfig()
        self._base_url = base_url.rstrip("/")
        self._token_provider = token_provider
        self._client = httpx.Client(
            timeout=config.timeout,
            verify=config.verify_ssl,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> Transport:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------ #
    # Sending
    # ------------------------------------------------------------------ #

    def build_url(self, descriptor: RequestDescriptor) -> str:
        """Return the absolute URL for *descriptor*, including any GET query."""
        url = f"{self._base_url}/{descriptor.path.lstrip('/')}"
        if descriptor.method == HTTPMethod.GET and descriptor.params:
            query = encode(descriptor.params, Encoding.FORM)
            if query:
                url = f"{url}?{query}"
        return url

    def send(self, descriptor: RequestDescriptor) -> RawResponse:
        """Issue one HTTP request for *descriptor*.

        Returns:
            The status code and full body text, for success and error
            statuses alike.

        Raises:
            TransportError: When no response was received (DNS failure,
                refused connection, timeout, protocol error).
        """
        url = self.build_url(descriptor)
        headers = {"Accept": "application/json"}

        if descriptor.use_auth and self._token_provider is not None:
            token = self._token_provider()
            if token:
                headers["Authorization"] = f"Bearer {token}"

        content: Optional[str] = None
        if descriptor.method != HTTPMethod.GET:
            content = encode(descriptor.params, descriptor.encoding)
            headers["Content-Type"] = descriptor.encoding.content_type

        get_output().debug(f"{descriptor.method.value} {url}")

        try:
            response = self._client.request(
                descriptor.method.value,
                url,
                headers=headers,
                content=content.encode("utf-8") if content is not None else None,
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"{descriptor.method.value} {url}: {exc}") from exc

        get_output().debug(f"HTTP {response.status_code} {response.reason_phrase or ''}")
        return RawResponse(status_code=response.status_code, body=response.text)
