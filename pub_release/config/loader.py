"""Action input loading utilities.

Inputs reach the action the same way the GitHub Actions toolkit reads them:
as ``INPUT_<NAME>`` environment variables. Defaults declared in action.yml
are applied for local runs where no runner injected them.
"""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from pub_release.config.models import ActionInputs, RunnerEnvironment
from pub_release.exceptions import ConfigurationError

if TYPE_CHECKING:
    from pub_release.github.releases import GitHubClient

OPTIONAL_INPUTS = [
    "previous-version",
    "changelog-file",
    "is-draft",
    "pre-release-script",
    "post-release-script",
    "pre-publish-script",
    "post-publish-script",
    "should-run-pub-score-test",
    "pub-score-min-points",
    "fail-on-low-pub-score",
]

REQUIRED_INPUTS = [
    "access-token",
    "refresh-token",
    "id-token",
    "token-endpoint",
    "expiration",
]


def input_env_name(name: str) -> str:
    """Return the environment variable the runner uses for an input.

    Examples:
        >>> input_env_name('access-token')
        'INPUT_ACCESS-TOKEN'
    """
    return f"INPUT_{name.replace(' ', '_').upper()}"


def load_action_manifest(path: Path) -> dict[str, dict[str, Any]]:
    """Load the ``inputs`` section of an action.yml file.

    Args:
        path: Path to action.yml

    Returns:
        Mapping of input name to its declaration (description, required, default)

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise ConfigurationError(
            f"Action manifest not found: {path}",
            fix_hint="Pass the path to the action.yml that declares the inputs",
        ) from None
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in {path}",
            details=str(e),
            fix_hint="Check YAML syntax at the indicated line",
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Action manifest {path} is not a mapping")

    inputs = data.get("inputs") or {}
    if not isinstance(inputs, dict):
        raise ConfigurationError(f"'inputs' in {path} must be a mapping")
    return {str(name): dict(spec or {}) for name, spec in inputs.items()}


def get_input(
    name: str,
    required: bool = False,
    env: Mapping[str, str] | None = None,
    manifest: Mapping[str, Mapping[str, Any]] | None = None,
) -> str:
    """Read a single action input.

    Args:
        name: Input name as declared in action.yml
        required: Raise when the input is empty
        env: Environment mapping (defaults to os.environ)
        manifest: Parsed action.yml inputs, used for defaults

    Returns:
        The trimmed input value, or an empty string

    Raises:
        ConfigurationError: If required and not supplied
    """
    if env is None:
        env = os.environ

    value = env.get(input_env_name(name), "").strip()
    if not value and manifest and name in manifest:
        default = manifest[name].get("default")
        if default is not None:
            value = str(default).strip()

    if required and not value:
        raise ConfigurationError(f"Input required and not supplied: {name}")
    return value


def format_validation_errors(error: PydanticValidationError) -> str:
    """Render pydantic validation errors one per line, by input name."""
    lines = []
    for item in error.errors():
        loc = ".".join(str(part) for part in item.get("loc", ())) or "inputs"
        lines.append(f"{loc}: {item.get('msg', 'invalid value')}")
    return "\n".join(lines)


def load_inputs(
    runner: RunnerEnvironment,
    client: "GitHubClient | None" = None,
    env: Mapping[str, str] | None = None,
    manifest: Mapping[str, Mapping[str, Any]] | None = None,
) -> ActionInputs:
    """Load and validate all action inputs.

    Either every input validates and a complete ActionInputs is returned,
    or ConfigurationError is raised. Missing required inputs are reported
    together.

    Args:
        runner: Runner environment (workspace for the default changelog path)
        client: GitHub client used when previous-version is empty
        env: Environment mapping (defaults to os.environ)
        manifest: Parsed action.yml inputs, used for defaults

    Returns:
        Validated ActionInputs

    Raises:
        ConfigurationError: If inputs are missing or invalid
    """
    raw: dict[str, Any] = {
        name: get_input(name, env=env, manifest=manifest) for name in OPTIONAL_INPUTS
    }

    missing = []
    for name in REQUIRED_INPUTS:
        value = get_input(name, env=env, manifest=manifest)
        if value:
            raw[name] = value
        else:
            missing.append(name)
    if missing:
        raise ConfigurationError(
            f"Input required and not supplied: {', '.join(missing)}",
            fix_hint="Add the missing inputs under 'with:' in the workflow step",
        )

    if not raw["changelog-file"]:
        raw["changelog-file"] = runner.default_changelog

    if not raw["previous-version"]:
        if client is None:
            raise ConfigurationError(
                "previous-version is empty and no GitHub client is available",
                fix_hint="Set previous-version or run with GitHub credentials",
            )
        # No releases yet: an empty previous version lets the first one through
        raw["previous-version"] = client.latest_release_version() or ""

    try:
        return ActionInputs.model_validate(raw)
    except PydanticValidationError as e:
        raise ConfigurationError(
            "Invalid action inputs",
            details=format_validation_errors(e),
            fix_hint="Check the values under 'with:' in the workflow step",
        ) from e
