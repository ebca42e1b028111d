"""Tests for the credential store."""

from __future__ import annotations

import hashlib
import json
import os
import stat
from pathlib import Path

import pytest

from sendpulse_client.auth.credential_store import (
    CredentialStore,
    TokenEntry,
    placeholder_token,
    token_path,
)
from sendpulse_client.models import Credentials


@pytest.fixture()
def data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point get_data_dir() to tmp_path so files land in a disposable location."""
    monkeypatch.setattr("sendpulse_client.auth.credential_store.get_data_dir", lambda: tmp_path)
    return tmp_path


class TestPlaceholderToken:
    def test_is_uppercase_md5_of_id_and_secret(self, credentials: Credentials) -> None:
        expected = hashlib.md5(b"test-id::test-secret").hexdigest().upper()
        assert placeholder_token(credentials) == expected

    def test_depends_on_both_halves(self) -> None:
        a = placeholder_token(Credentials(client_id="a", client_secret="s"))
        b = placeholder_token(Credentials(client_id="a", client_secret="t"))
        assert a != b


class TestInMemoryStore:
    def test_starts_with_placeholder(self, credentials: Credentials) -> None:
        store = CredentialStore(credentials)
        assert store.token == placeholder_token(credentials)
        assert store.path is None

    def test_token_assignment(self, credentials: Credentials) -> None:
        store = CredentialStore(credentials)
        store.token = "abc"
        assert store.token == "abc"

    def test_clear_restores_placeholder(self, credentials: Credentials) -> None:
        store = CredentialStore(credentials)
        store.token = "abc"
        store.clear()
        assert store.token == placeholder_token(credentials)

    def test_load_without_profile_is_none(self, credentials: Credentials) -> None:
        assert CredentialStore(credentials).load() is None


class TestPersistentStore:
    def test_token_is_persisted(self, credentials: Credentials, data_dir: Path) -> None:
        store = CredentialStore(credentials, profile_name="main")
        store.token = "persisted-token"

        path = data_dir / "credentials" / "main.json"
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["access_token"] == "persisted-token"
        assert data["client_id"] == "test-id"

    def test_new_store_reuses_persisted_token(self, credentials: Credentials, data_dir: Path) -> None:
        CredentialStore(credentials, profile_name="main").token = "persisted-token"
        assert CredentialStore(credentials, profile_name="main").token == "persisted-token"

    def test_token_of_other_client_id_is_ignored(self, credentials: Credentials, data_dir: Path) -> None:
        CredentialStore(credentials, profile_name="main").token = "persisted-token"
        other = Credentials(client_id="other-id", client_secret="x")
        store = CredentialStore(other, profile_name="main")
        assert store.token == placeholder_token(other)

    def test_file_permissions(self, credentials: Credentials, data_dir: Path) -> None:
        store = CredentialStore(credentials, profile_name="main")
        store.token = "secret"
        mode = stat.S_IMODE(os.stat(store.path).st_mode)
        assert mode == 0o600

    def test_clear_deletes_file(self, credentials: Credentials, data_dir: Path) -> None:
        store = CredentialStore(credentials, profile_name="main")
        store.token = "secret"
        assert store.path.is_file()
        store.clear()
        assert not store.path.exists()
        assert store.token == placeholder_token(credentials)

    def test_corrupted_file_falls_back_to_placeholder(
        self, credentials: Credentials, data_dir: Path
    ) -> None:
        path = token_path("main")
        path.write_text("{not json", encoding="utf-8")
        store = CredentialStore(credentials, profile_name="main")
        assert store.load() is None
        assert store.token == placeholder_token(credentials)

    def test_separate_profiles(self, credentials: Credentials, data_dir: Path) -> None:
        CredentialStore(credentials, profile_name="one").token = "t1"
        CredentialStore(credentials, profile_name="two").token = "t2"
        assert CredentialStore(credentials, profile_name="one").token == "t1"
        assert CredentialStore(credentials, profile_name="two").token == "t2"

    def test_save_failure_is_logged_not_raised(
        self,
        credentials: Credentials,
        data_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
        capfd: pytest.CaptureFixture[str],
    ) -> None:
        store = CredentialStore(credentials, profile_name="main")

        def _fail(entry: TokenEntry) -> None:
            raise OSError("disk full")

        monkeypatch.setattr(store, "save", _fail)
        store.token = "in-memory"

        assert store.token == "in-memory"
        _, err = capfd.readouterr()
        assert "disk full" in err

    def test_token_is_written_through_atomic_write(
        self, credentials: Credentials, data_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        writes: list[tuple[Path, str, int]] = []
        monkeypatch.setattr(
            "sendpulse_client.auth.credential_store.atomic_write",
            lambda path, data, mode=None: writes.append((path, data, mode)),
        )
        store = CredentialStore(credentials, profile_name="main")
        store.token = "abc"

        assert len(writes) == 1
        path, data, mode = writes[0]
        assert path == store.path
        assert mode == 0o600
        assert json.loads(data)["access_token"] == "abc"

    def test_failed_write_leaves_no_temp_files(
        self, credentials: Credentials, data_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        store = CredentialStore(credentials, profile_name="main")

        def _refuse(src: str, dst: object) -> None:
            raise OSError("read-only")

        monkeypatch.setattr("sendpulse_client.config.os.replace", _refuse)
        store.token = "in-memory"

        assert store.token == "in-memory"
        assert list(store.path.parent.iterdir()) == []
