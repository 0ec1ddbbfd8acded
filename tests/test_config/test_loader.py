"""Unit tests for action input loading.

Tests cover:
- INPUT_<NAME> lookup and trimming (get_input)
- action.yml manifest loading and defaults (load_action_manifest)
- Full input validation (load_inputs), including the previous-version
  fallback to the latest GitHub release
- Error handling for missing and invalid inputs
"""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
import yaml

from pub_release.config.loader import (
    REQUIRED_INPUTS,
    get_input,
    input_env_name,
    load_action_manifest,
    load_inputs,
)
from pub_release.config.models import RunnerEnvironment
from pub_release.exceptions import ConfigurationError


class TestGetInput:
    """Tests for get_input function."""

    def test_env_name(self) -> None:
        assert input_env_name("access-token") == "INPUT_ACCESS-TOKEN"
        assert input_env_name("github token") == "INPUT_GITHUB_TOKEN"

    def test_reads_and_trims(self) -> None:
        env = {"INPUT_IS-DRAFT": "  true \n"}
        assert get_input("is-draft", env=env) == "true"

    def test_missing_optional_is_empty(self) -> None:
        assert get_input("is-draft", env={}) == ""

    def test_missing_required_raises(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            get_input("access-token", required=True, env={})
        assert str(exc_info.value) == "Input required and not supplied: access-token"

    def test_manifest_default_used_when_unset(self) -> None:
        manifest = {"is-draft": {"default": "false"}}
        assert get_input("is-draft", env={}, manifest=manifest) == "false"

    def test_env_value_wins_over_manifest_default(self) -> None:
        manifest = {"is-draft": {"default": "false"}}
        assert get_input("is-draft", env={"INPUT_IS-DRAFT": "true"}, manifest=manifest) == "true"


class TestLoadActionManifest:
    """Tests for load_action_manifest function."""

    def test_reads_inputs(self, temp_dir: Path) -> None:
        action = {
            "name": "test",
            "inputs": {
                "is-draft": {"required": False, "default": "false"},
                "access-token": {"required": True},
            },
        }
        path = temp_dir / "action.yml"
        path.write_text(yaml.safe_dump(action))

        manifest = load_action_manifest(path)
        assert manifest["is-draft"]["default"] == "false"
        assert manifest["access-token"]["required"] is True

    def test_missing_file(self, temp_dir: Path) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            load_action_manifest(temp_dir / "action.yml")
        assert "not found" in str(exc_info.value)
        assert exc_info.value.fix_hint is not None

    def test_invalid_yaml(self, temp_dir: Path) -> None:
        path = temp_dir / "action.yml"
        path.write_text("inputs: [bar: baz")
        with pytest.raises(ConfigurationError) as exc_info:
            load_action_manifest(path)
        assert "Invalid YAML" in str(exc_info.value)

    def test_repository_action_yml_declares_every_input(self) -> None:
        """The shipped action.yml declares every input the loader reads."""
        manifest = load_action_manifest(Path(__file__).parents[2] / "action.yml")
        for name in REQUIRED_INPUTS:
            assert manifest[name]["required"] is True
        assert "fail-on-low-pub-score" in manifest
        assert "pub-score-min-points" in manifest


class TestLoadInputs:
    """Tests for load_inputs function."""

    def test_loads_valid_inputs(
        self, runner: RunnerEnvironment, action_env: dict[str, str], changelog_file: Path
    ) -> None:
        inputs = load_inputs(runner, env=action_env)
        assert inputs.previous_version == "1.1.0"
        assert inputs.changelog_file == changelog_file
        assert inputs.access_token == "ya29.access"
        assert inputs.is_draft is False

    def test_missing_required_inputs_reported_together(
        self, runner: RunnerEnvironment, action_env: dict[str, str]
    ) -> None:
        del action_env["INPUT_ID-TOKEN"]
        del action_env["INPUT_EXPIRATION"]
        with pytest.raises(ConfigurationError) as exc_info:
            load_inputs(runner, env=action_env)
        assert "id-token" in exc_info.value.message
        assert "expiration" in exc_info.value.message

    def test_changelog_defaults_to_workspace(
        self, runner: RunnerEnvironment, action_env: dict[str, str]
    ) -> None:
        del action_env["INPUT_CHANGELOG-FILE"]
        inputs = load_inputs(runner, env=action_env)
        assert inputs.changelog_file == runner.github_workspace / "CHANGELOG.md"

    def test_previous_version_from_latest_release(
        self, runner: RunnerEnvironment, action_env: dict[str, str]
    ) -> None:
        del action_env["INPUT_PREVIOUS-VERSION"]
        client = MagicMock()
        client.latest_release_version.return_value = "1.1.0"

        inputs = load_inputs(runner, client=client, env=action_env)

        assert inputs.previous_version == "1.1.0"
        client.latest_release_version.assert_called_once()

    def test_no_releases_gives_empty_previous_version(
        self, runner: RunnerEnvironment, action_env: dict[str, str]
    ) -> None:
        del action_env["INPUT_PREVIOUS-VERSION"]
        client = MagicMock()
        client.latest_release_version.return_value = None

        inputs = load_inputs(runner, client=client, env=action_env)
        assert inputs.previous_version == ""

    def test_previous_version_given_skips_api(
        self, runner: RunnerEnvironment, action_env: dict[str, str]
    ) -> None:
        client = MagicMock()
        load_inputs(runner, client=client, env=action_env)
        client.latest_release_version.assert_not_called()

    def test_previous_version_without_client_raises(
        self, runner: RunnerEnvironment, action_env: dict[str, str]
    ) -> None:
        del action_env["INPUT_PREVIOUS-VERSION"]
        with pytest.raises(ConfigurationError):
            load_inputs(runner, env=action_env)

    def test_invalid_threshold_is_configuration_error(
        self, runner: RunnerEnvironment, action_env: dict[str, str]
    ) -> None:
        """A score test with a non-integer threshold fails loading, naming the input."""
        action_env["INPUT_SHOULD-RUN-PUB-SCORE-TEST"] = "true"
        action_env["INPUT_PUB-SCORE-MIN-POINTS"] = "abc"

        with pytest.raises(ConfigurationError) as exc_info:
            load_inputs(runner, env=action_env)

        assert exc_info.value.message == "Invalid action inputs"
        assert exc_info.value.details is not None
        assert "pub-score-min-points" in exc_info.value.details
        assert exc_info.value.exit_code == 2
