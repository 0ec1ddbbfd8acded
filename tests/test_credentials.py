"""Unit tests for pub_release.credentials module."""

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from pub_release.config.models import ActionInputs, RunnerEnvironment
from pub_release.credentials import (
    PUB_SCOPES,
    PubCredentials,
    credentials_path,
    setup_pub_auth,
    write_credentials,
)
from pub_release.exceptions import PublishError
from pub_release.utils.platform import Platform


class TestPubCredentials:
    """Tests for PubCredentials serialization."""

    def test_camel_case_json(self, inputs: ActionInputs) -> None:
        data = json.loads(PubCredentials.from_inputs(inputs).to_json())
        assert data == {
            "accessToken": "ya29.access",
            "refreshToken": "1//refresh",
            "idToken": "eyJ.id",
            "tokenEndpoint": "https://accounts.google.com/o/oauth2/token",
            "scopes": [
                "https://www.googleapis.com/auth/userinfo.email",
                "openid",
            ],
            "expiration": "1618000000000",
        }

    def test_scopes_not_shared_between_instances(self, inputs: ActionInputs) -> None:
        first = PubCredentials.from_inputs(inputs)
        first.scopes.append("extra")
        assert PubCredentials.from_inputs(inputs).scopes == PUB_SCOPES


class TestCredentialsPath:
    """Tests for credentials_path()."""

    def test_posix_path(self, runner: RunnerEnvironment) -> None:
        for platform in (Platform.LINUX, Platform.MACOS):
            assert credentials_path(platform, runner) == (
                runner.home / ".pub-cache" / "credentials.json"
            )

    def test_windows_path(self, runner: RunnerEnvironment, temp_dir: Path) -> None:
        windows = runner.model_copy(update={"appdata": temp_dir / "AppData" / "Roaming"})
        assert credentials_path(Platform.WINDOWS, windows) == (
            temp_dir / "AppData" / "Roaming" / "Pub" / "Cache" / "credentials.json"
        )

    def test_windows_without_appdata(self, runner: RunnerEnvironment) -> None:
        with pytest.raises(PublishError):
            credentials_path(Platform.WINDOWS, runner)


class TestWriteCredentials:
    """Tests for write_credentials() and setup_pub_auth()."""

    def test_linux_writes_json(self, inputs: ActionInputs, runner: RunnerEnvironment) -> None:
        path = setup_pub_auth(inputs, runner, Platform.LINUX)

        assert path == runner.home / ".pub-cache" / "credentials.json"
        data = json.loads(path.read_text())
        assert data["accessToken"] == "ya29.access"
        assert data["scopes"] == PUB_SCOPES
        assert set(data) == {
            "accessToken",
            "refreshToken",
            "idToken",
            "tokenEndpoint",
            "scopes",
            "expiration",
        }

    def test_windows_writes_json_too(
        self, inputs: ActionInputs, runner: RunnerEnvironment, temp_dir: Path
    ) -> None:
        windows = runner.model_copy(update={"appdata": temp_dir / "AppData"})
        path = setup_pub_auth(inputs, windows, Platform.WINDOWS)
        assert json.loads(path.read_text())["idToken"] == "eyJ.id"

    def test_replaces_existing_file(self, inputs: ActionInputs, temp_dir: Path) -> None:
        path = temp_dir / "cache" / "credentials.json"
        path.parent.mkdir()
        path.write_text("stale")

        write_credentials(PubCredentials.from_inputs(inputs), path)

        assert json.loads(path.read_text())["refreshToken"] == "1//refresh"
        assert [p.name for p in path.parent.iterdir()] == ["credentials.json"]

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permissions")
    def test_owner_only_permissions(self, inputs: ActionInputs, temp_dir: Path) -> None:
        path = write_credentials(PubCredentials.from_inputs(inputs), temp_dir / "c.json")
        assert path.stat().st_mode & 0o777 == 0o600

    def test_failed_write_leaves_no_partial_file(
        self, inputs: ActionInputs, temp_dir: Path
    ) -> None:
        path = temp_dir / "out" / "credentials.json"
        with patch("pub_release.credentials.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(PublishError):
                write_credentials(PubCredentials.from_inputs(inputs), path)
        assert list(path.parent.iterdir()) == []
