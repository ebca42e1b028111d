"""End-to-end tests of the ``sendpulse`` CLI against a fake server."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from sendpulse_client import __version__
from sendpulse_client.app import create_api, register_commands
from sendpulse_client.auth.credential_store import token_path
from sendpulse_client.config import load_global_config, load_profile, profile_exists, save_profile
from sendpulse_client.models import Profile
from sendpulse_client.sendpulse import SendPulse


@pytest.fixture
def cli(isolated_config: Path):
    return register_commands()


@pytest.fixture
def patched_api(monkeypatch: pytest.MonkeyPatch, fake_api):
    """Route every CLI-built client to *fake_api*."""

    def _create(profile_name=None, base_url=None) -> SendPulse:
        return SendPulse(
            "cli-id",
            "cli-secret",
            base_url="https://api.sendpulse.test",
            profile_name=profile_name,
            transport=fake_api.transport(),
        )

    monkeypatch.setattr("sendpulse_client.app.create_api", _create)
    return fake_api


class TestRootOptions:
    def test_version(self, cli, cli_runner) -> None:
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert f"sendpulse {__version__}" in result.output

    def test_help_lists_builtin_and_api_groups(self, cli, cli_runner) -> None:
        result = cli_runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for name in ("init", "auth", "config", "addressbooks", "smtp", "viber"):
            assert name in result.output

    def test_register_is_idempotent(self, cli) -> None:
        assert register_commands() is cli


class TestApiCommands:
    def test_success_prints_json(self, cli, cli_runner, patched_api) -> None:
        patched_api.route("GET", "addressbooks", [{"id": 1, "name": "news"}])

        result = cli_runner.invoke(cli, ["--json", "-q", "addressbooks", "list", "--limit", "5"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == [{"id": 1, "name": "news"}]
        assert patched_api.api_requests[-1].url.query == b"limit=5"

    def test_local_validation_exits_2(self, cli, cli_runner, patched_api) -> None:
        result = cli_runner.invoke(cli, ["--no-color", "addressbooks", "get", "0"])

        assert result.exit_code == 2
        assert "Empty book id" in result.output
        assert patched_api.requests == []

    def test_not_found_exits_4(self, cli, cli_runner, patched_api) -> None:
        result = cli_runner.invoke(cli, ["--json", "addressbooks", "get", "77"])
        assert result.exit_code == 4
        assert "Not found" in result.output

    def test_server_error_exits_5(self, cli, cli_runner, patched_api) -> None:
        patched_api.route("GET", "senders", {"message": "oops"}, status=502)
        result = cli_runner.invoke(cli, ["senders", "list"])
        assert result.exit_code == 5

    def test_rejected_credentials_exit_3(self, cli, cli_runner, patched_api) -> None:
        patched_api.token_status = 401
        result = cli_runner.invoke(cli, ["senders", "list"])
        assert result.exit_code == 3

    def test_connection_failure_exits_6(self, cli, cli_runner, monkeypatch) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        monkeypatch.setattr(
            "sendpulse_client.app.create_api",
            lambda profile_name=None, base_url=None: SendPulse(
                "id", "secret", transport=httpx.MockTransport(handler)
            ),
        )
        result = cli_runner.invoke(cli, ["--no-color", "senders", "list"])
        assert result.exit_code == 6
        assert "Connection failed" in result.output

    def test_json_option_reaches_request(self, cli, cli_runner, patched_api) -> None:
        patched_api.route("POST", "smtp/emails", {"result": True})
        email = {"subject": "Hi", "text": "Hello", "to": [{"email": "a@x.io"}]}

        result = cli_runner.invoke(
            cli, ["--json", "-q", "smtp", "send", "--email-data", json.dumps(email)]
        )

        assert result.exit_code == 0, result.output
        sent = json.loads(patched_api.form_of(patched_api.api_requests[-1])["email"][0])
        assert sent == email

    def test_root_options_reach_client_factory(self, cli, cli_runner, monkeypatch, fake_api) -> None:
        seen: dict[str, object] = {}

        def _create(profile_name=None, base_url=None) -> SendPulse:
            seen.update(profile=profile_name, base_url=base_url)
            return SendPulse("id", "secret", transport=fake_api.transport())

        monkeypatch.setattr("sendpulse_client.app.create_api", _create)
        fake_api.route("GET", "senders", [])

        result = cli_runner.invoke(
            cli, ["-p", "shop", "--base-url", "https://alt.test", "senders", "list"]
        )

        assert result.exit_code == 0, result.output
        assert seen == {"profile": "shop", "base_url": "https://alt.test"}

    @pytest.mark.parametrize(
        "argv",
        [
            ["smtp", "send", "--email-data", "[1,2]"],
            ["smtp", "send", "--email-data", '"abc"'],
            ["push", "create", "--task-info", "[1]"],
            ["viber", "send", "--campaign", "[1,2]"],
        ],
    )
    def test_non_object_json_exits_2(self, cli, cli_runner, patched_api, argv) -> None:
        result = cli_runner.invoke(cli, ["--no-color", *argv])
        assert result.exit_code == 2
        assert "must be a JSON object" in result.output
        assert patched_api.requests == []

    def test_configured_output_format_applies(self, cli, cli_runner, patched_api) -> None:
        patched_api.route("GET", "senders", [{"email": "a@x.io", "status": "Active"}])
        assert cli_runner.invoke(cli, ["config", "set", "output.format", "json"]).exit_code == 0

        result = cli_runner.invoke(cli, ["-q", "senders", "list"])
        plain = cli_runner.invoke(cli, ["-q", "--plain", "senders", "list"])

        assert json.loads(result.stdout) == [{"email": "a@x.io", "status": "Active"}]
        assert plain.stdout.splitlines() == ["email\tstatus", "a@x.io\tActive"]

    def test_missing_credentials_exit_1(self, cli, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(cli, ["--no-color", "senders", "list"])
        assert result.exit_code == 1
        assert "SENDPULSE_CLIENT_ID" in result.output


class TestCreateApi:
    def test_from_environment(self, isolated_config: Path, monkeypatch) -> None:
        monkeypatch.setenv("SENDPULSE_CLIENT_ID", "env-id")
        monkeypatch.setenv("SENDPULSE_CLIENT_SECRET", "env-secret")
        monkeypatch.setenv("SENDPULSE_BASE_URL", "https://env.test")

        api = create_api()

        assert api.client.store.credentials.client_id == "env-id"
        assert api.client.store.path is None
        api.close()

    def test_from_profile_persists_token(self, isolated_config: Path, sample_profile, monkeypatch) -> None:
        monkeypatch.setenv("TEST_SP_ID", "pid")
        monkeypatch.setenv("TEST_SP_SECRET", "psecret")
        save_profile(sample_profile)

        api = create_api()

        assert api.client.store.credentials.client_id == "pid"
        assert api.client.store.path == token_path("test-account")
        api.close()

    def test_profile_without_persistence(self, isolated_config: Path, sample_profile, monkeypatch) -> None:
        monkeypatch.setenv("TEST_SP_ID", "pid")
        monkeypatch.setenv("TEST_SP_SECRET", "psecret")
        save_profile(sample_profile.model_copy(update={"persist_token": False}))

        api = create_api("test-account")

        assert api.client.store.path is None
        api.close()


class TestInit:
    def test_creates_default_profile(self, cli, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(
            cli,
            [
                "init",
                "--name", "shop",
                "--client-id-source", "env:SHOP_ID",
                "--client-secret-source", "file:~/.shop-secret",
            ],
        )

        assert result.exit_code == 0, result.output
        profile = load_profile("shop")
        assert profile.client_id_source == "env:SHOP_ID"
        assert profile.client_secret_source == "file:~/.shop-secret"
        assert load_global_config().default_profile == "shop"

    def test_second_profile_keeps_default(self, cli, cli_runner, isolated_config: Path) -> None:
        cli_runner.invoke(cli, ["init", "--name", "first"])
        cli_runner.invoke(cli, ["init", "--name", "second", "--no-persist-token"])

        assert load_global_config().default_profile == "first"
        assert load_profile("second").persist_token is False

    def test_invalid_source(self, cli, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(cli, ["init", "--client-id-source", "vault:x"])
        assert result.exit_code == 2
        assert not profile_exists("default")

    def test_project_file(self, cli, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(cli, ["init", "--name", "proj", "--project"])
        assert result.exit_code == 0
        data = json.loads((isolated_config / "sendpulse.json").read_text())
        assert data == {"default_profile": "proj"}


class TestConfigCommands:
    def test_show(self, cli, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "-q", "config", "show"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["output"] == {"format": "auto"}

    def test_set_nested_and_bool(self, cli, cli_runner, isolated_config: Path) -> None:
        assert cli_runner.invoke(cli, ["config", "set", "output.format", "json"]).exit_code == 0
        assert cli_runner.invoke(
            cli, ["config", "set", "auto_select_single_profile", "false"]
        ).exit_code == 0

        config = load_global_config()
        assert config.output.format == "json"
        assert config.auto_select_single_profile is False

    @pytest.mark.parametrize("key", ["nope", "output.nope", "nope.format"])
    def test_set_unknown_key(self, cli, cli_runner, isolated_config: Path, key: str) -> None:
        result = cli_runner.invoke(cli, ["config", "set", key, "x"])
        assert result.exit_code == 2

    def test_reset_with_force(self, cli, cli_runner, isolated_config: Path) -> None:
        cli_runner.invoke(cli, ["config", "set", "output.format", "json"])
        result = cli_runner.invoke(cli, ["-f", "config", "reset"])
        assert result.exit_code == 0
        assert load_global_config().output.format == "auto"

    def test_reset_declined(self, cli, cli_runner, isolated_config: Path) -> None:
        cli_runner.invoke(cli, ["config", "set", "output.format", "json"])
        result = cli_runner.invoke(cli, ["config", "reset"], input="n\n")
        assert result.exit_code == 0
        assert load_global_config().output.format == "json"

    def test_profiles_table(self, cli, cli_runner, isolated_config: Path) -> None:
        cli_runner.invoke(cli, ["init", "--name", "shop"])
        result = cli_runner.invoke(cli, ["--json", "-q", "config", "profiles"])

        assert result.exit_code == 0
        records = json.loads(result.stdout)
        assert records[0]["Profile"] == "shop"
        assert records[0]["Default"] == "*"

    def test_profile_detail(self, cli, cli_runner, isolated_config: Path, sample_profile) -> None:
        save_profile(sample_profile)
        result = cli_runner.invoke(cli, ["--json", "-q", "config", "profile", "test-account"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["base_url"] == sample_profile.base_url

    def test_profile_missing(self, cli, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(cli, ["config", "profile", "ghost"])
        assert result.exit_code == 2

    def test_delete_clears_default_and_token(self, cli, cli_runner, isolated_config: Path) -> None:
        cli_runner.invoke(cli, ["init", "--name", "shop"])
        token_path("shop").write_text("{}")

        result = cli_runner.invoke(cli, ["-f", "config", "delete", "shop"])

        assert result.exit_code == 0
        assert not profile_exists("shop")
        assert not token_path("shop").exists()
        assert load_global_config().default_profile is None

    def test_delete_missing(self, cli, cli_runner, isolated_config: Path) -> None:
        assert cli_runner.invoke(cli, ["-f", "config", "delete", "ghost"]).exit_code == 2


class TestAuthCommands:
    def test_token_exchange_and_status(
        self, cli, cli_runner, isolated_config: Path, patched_api
    ) -> None:
        save_profile(Profile(name="shop"))

        result = cli_runner.invoke(cli, ["--no-color", "auth", "token", "shop", "--show"])

        assert result.exit_code == 0, result.output
        assert "Obtained access token token-1" in result.output
        assert "token-1" in result.stdout
        assert len(patched_api.token_requests) == 1

        status = cli_runner.invoke(cli, ["--json", "-q", "auth", "status", "shop"])
        fields = {row["Field"]: row["Value"] for row in json.loads(status.stdout)}
        assert fields["Token"] == "token-1"
        assert fields["Client ID"] == "cli-id"

    def test_token_exchange_failure(self, cli, cli_runner, isolated_config: Path, patched_api) -> None:
        patched_api.token_status = 401
        result = cli_runner.invoke(cli, ["auth", "token", "shop"])
        assert result.exit_code == 3

    def test_status_without_token(self, cli, cli_runner, isolated_config: Path) -> None:
        save_profile(Profile(name="shop"))
        result = cli_runner.invoke(cli, ["auth", "status", "shop"])
        assert result.exit_code == 0
        assert "No stored token" in result.output

    def test_status_with_unreadable_token(self, cli, cli_runner, isolated_config: Path) -> None:
        save_profile(Profile(name="shop"))
        token_path("shop").write_text("{\"access_token\": 1}", encoding="utf-8")

        result = cli_runner.invoke(cli, ["--no-color", "auth", "status", "shop"])

        assert result.exit_code == 0
        assert "unreadable" in result.output
        assert "No stored token" in result.output

    def test_status_without_profile(self, cli, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(cli, ["auth", "status"])
        assert result.exit_code == 2

    def test_clear(self, cli, cli_runner, isolated_config: Path, patched_api) -> None:
        save_profile(Profile(name="shop"))
        cli_runner.invoke(cli, ["auth", "token", "shop"])
        assert token_path("shop").is_file()

        result = cli_runner.invoke(cli, ["-f", "auth", "clear", "shop"])

        assert result.exit_code == 0
        assert not token_path("shop").exists()

    def test_stored_token_reused_by_api_commands(
        self, cli, cli_runner, isolated_config: Path, patched_api
    ) -> None:
        save_profile(Profile(name="shop"))
        patched_api.route("GET", "senders", [])
        cli_runner.invoke(cli, ["auth", "token", "shop"])
        patched_api.requests.clear()

        result = cli_runner.invoke(cli, ["-p", "shop", "senders", "list"])

        assert result.exit_code == 0, result.output
        assert patched_api.token_requests == []
        assert patched_api.api_requests[0].headers["Authorization"] == "Bearer token-1"
