"""Pytest fixtures for pub release tests.

Provides common fixtures for:
- Temporary project directories with pubspec.yaml and CHANGELOG.md
- Action input environments (INPUT_<NAME> variables)
- A runner environment isolated from the real one
- A reporter writing to an in-memory console
"""

import io
from collections.abc import Generator
from pathlib import Path

import pytest
import yaml
from rich.console import Console

from pub_release.config.models import ActionInputs, RunnerEnvironment, TimeoutsConfig
from pub_release.reporting import Reporter

CHANGELOG = """## 1.2.0
- Bug fixes

## 1.1.0
- Initial release
"""


@pytest.fixture
def temp_dir(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary directory for tests.

    Yields:
        Path to temporary directory
    """
    yield tmp_path
    # Cleanup handled by pytest's tmp_path


@pytest.fixture
def project_dir(temp_dir: Path) -> Path:
    """Create a Flutter package directory with a pubspec.yaml.

    Returns:
        Path to project directory
    """
    project = temp_dir / "flutter_pkg"
    project.mkdir()
    pubspec = {
        "name": "flutter_pkg",
        "version": "1.2.0",
        "environment": {"sdk": ">=2.12.0 <3.0.0"},
    }
    (project / "pubspec.yaml").write_text(yaml.safe_dump(pubspec))
    return project


@pytest.fixture
def changelog_file(project_dir: Path) -> Path:
    """Create a CHANGELOG.md without a top-level title, newest version 1.2.0."""
    path = project_dir / "CHANGELOG.md"
    path.write_text(CHANGELOG)
    return path


@pytest.fixture
def action_env(changelog_file: Path) -> dict[str, str]:
    """Action inputs the way the runner passes them."""
    return {
        "INPUT_PREVIOUS-VERSION": "1.1.0",
        "INPUT_CHANGELOG-FILE": str(changelog_file),
        "INPUT_IS-DRAFT": "false",
        "INPUT_ACCESS-TOKEN": "ya29.access",
        "INPUT_REFRESH-TOKEN": "1//refresh",
        "INPUT_ID-TOKEN": "eyJ.id",
        "INPUT_TOKEN-ENDPOINT": "https://accounts.google.com/o/oauth2/token",
        "INPUT_EXPIRATION": "1618000000000",
        "PATH": "/usr/bin",
    }


@pytest.fixture
def runner(project_dir: Path, temp_dir: Path) -> RunnerEnvironment:
    """Runner environment with every path inside the temp directory.

    All fields are passed explicitly so variables from a real CI runner
    do not leak into tests.
    """
    home = temp_dir / "home"
    home.mkdir()
    return RunnerEnvironment(
        github_workspace=project_dir,
        github_repository="octo/flutter_pkg",
        github_sha="abc123",
        github_token="ghs_test",
        gh_token="",
        input_github_token="",
        github_actions=False,
        github_env=None,
        github_path=None,
        home=home,
        appdata=None,
        runner_tool_cache=temp_dir / "tool-cache",
        runner_temp=temp_dir / "runner-tmp",
        timeouts=TimeoutsConfig(command=1800, download=600, api=60),
    )


@pytest.fixture
def inputs(changelog_file: Path) -> ActionInputs:
    """Validated inputs for a 1.1.0 -> 1.2.0 release."""
    return ActionInputs.model_validate(
        {
            "previous-version": "1.1.0",
            "changelog-file": changelog_file,
            "access-token": "ya29.access",
            "refresh-token": "1//refresh",
            "id-token": "eyJ.id",
            "token-endpoint": "https://accounts.google.com/o/oauth2/token",
            "expiration": "1618000000000",
        }
    )


@pytest.fixture
def console_output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def reporter(console_output: io.StringIO) -> Reporter:
    """Reporter printing plain text to an in-memory buffer."""
    console = Console(file=console_output, width=200, color_system=None, highlight=False)
    return Reporter(console=console)
