"""Shared test fixtures for sendpulse_client.

Provides isolated config environments, fake HTTP servers built on
:class:`httpx.MockTransport`, output state management, and a CLI runner.
These fixtures are automatically discovered by pytest and available to all
test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Optional
from urllib.parse import parse_qs

import httpx
import pytest

from sendpulse_client.models import Credentials, Profile, RequestConfig
from sendpulse_client.output import OutputFormat, OutputManager, reset_output, set_output


BASE_URL = "https://api.sendpulse.test"
CLIENT_ID = "test-id"
CLIENT_SECRET = "test-secret"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    Resetting forces a fresh manager to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Fake SendPulse server
# ---------------------------------------------------------------------------


class FakeSendPulse:
    """Scriptable stand-in for the SendPulse API, served via MockTransport.

    The token endpoint issues ``token-1``, ``token-2``, ... on each grant.
    Other routes answer from :attr:`routes` (``"METHOD path"`` to a status
    and JSON body, or a callable taking the request). Authenticated routes
    return 401 unless the bearer token is in :attr:`valid_tokens`.

    Every request is recorded in :attr:`requests`.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[str, Any] = {}
        self.valid_tokens: set[str] = set()
        self.issued = 0
        self.token_status = 200
        self.require_auth = True

    # -- helpers used by tests -------------------------------------------

    def route(self, method: str, path: str, body: Any = None, status: int = 200) -> None:
        self.routes[f"{method} {path}"] = (status, body)

    @property
    def api_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path != "/oauth/access_token"]

    @property
    def token_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == "/oauth/access_token"]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    @staticmethod
    def form_of(request: httpx.Request) -> dict[str, list[str]]:
        """Decode a form-encoded request body."""
        return parse_qs(request.content.decode("utf-8"), keep_blank_values=True)

    @staticmethod
    def json_of(request: httpx.Request) -> Any:
        return json.loads(request.content.decode("utf-8"))

    # -- request handling ------------------------------------------------

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.lstrip("/")

        if path == "oauth/access_token":
            if self.token_status != 200:
                return httpx.Response(self.token_status, json={"error": "invalid_client"})
            self.issued += 1
            token = f"token-{self.issued}"
            self.valid_tokens.add(token)
            return httpx.Response(
                200,
                json={"access_token": token, "token_type": "Bearer", "expires_in": 3600},
            )

        if self.require_auth:
            auth = request.headers.get("Authorization", "")
            if auth.removeprefix("Bearer ") not in self.valid_tokens:
                return httpx.Response(401, json={"error": "invalid_token"})

        entry = self.routes.get(f"{request.method} {path}")
        if entry is None:
            return httpx.Response(404, json={"error_code": 404, "message": "Not found"})
        if callable(entry):
            return entry(request)
        status, body = entry
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)


@pytest.fixture
def fake_api() -> FakeSendPulse:
    """A fresh fake SendPulse server."""
    return FakeSendPulse()


@pytest.fixture
def make_api(fake_api: FakeSendPulse) -> Callable[..., Any]:
    """Factory for :class:`~sendpulse_client.sendpulse.SendPulse` bound to *fake_api*."""
    from sendpulse_client.sendpulse import SendPulse

    created: list[SendPulse] = []

    def _make(profile_name: Optional[str] = None) -> SendPulse:
        api = SendPulse(
            CLIENT_ID,
            CLIENT_SECRET,
            base_url=BASE_URL,
            profile_name=profile_name,
            transport=fake_api.transport(),
        )
        created.append(api)
        return api

    yield _make
    for api in created:
        api.close()


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(client_id=CLIENT_ID, client_secret=CLIENT_SECRET)


# ---------------------------------------------------------------------------
# Profile fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_profile() -> Profile:
    """A profile reading its key pair from test environment variables."""
    return Profile(
        name="test-account",
        base_url=BASE_URL,
        client_id_source="env:TEST_SP_ID",
        client_secret_source="env:TEST_SP_SECRET",
        request=RequestConfig(timeout=5),
    )


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    so that tests never touch real user config. Clears all SENDPULSE_*
    environment variables and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("sendpulse_client.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in [
        "SENDPULSE_PROFILE",
        "SENDPULSE_BASE_URL",
        "SENDPULSE_CLIENT_ID",
        "SENDPULSE_CLIENT_SECRET",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.JSON, no_color=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
