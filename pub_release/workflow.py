"""Release workflow orchestration.

Coordinates the complete release process:
1. Detect the host platform
2. Authenticate with GitHub
3. Load action inputs
4. Read the newest changelog entry
5. Check for a new version
6. Create the GitHub release (with hooks)
7. Set up the Flutter SDK
8. Configure pub credentials
9. Publish to pub.dev (with hooks and the optional pub score check)
"""

import os
import subprocess
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TypeVar

from pub_release.changelog import ChangelogEntry, extract_latest_entry
from pub_release.config.loader import get_input, load_inputs
from pub_release.config.models import ActionInputs, RunnerEnvironment
from pub_release.credentials import setup_pub_auth
from pub_release.exceptions import ReleaseError, ValidationError
from pub_release.github.auth import resolve_client
from pub_release.github.releases import GitHubClient
from pub_release.publishers import GitHubPublisher, PublishContext, PubPublisher, PublishStatus
from pub_release.reporting import Reporter
from pub_release.toolchain.flutter import ToolchainInstall, provision_flutter
from pub_release.utils.platform import Platform, detect_platform
from pub_release.utils.shell import ShellError
from pub_release.utils.version import add_tag_prefix
from pub_release.validators import ReleaseContext, ValidationResult, ValidatorRegistry

T = TypeVar("T")


def _require(value: T | None, what: str) -> T:
    """Return a value an earlier step sets, or fail if that step has not run."""
    if value is None:
        raise ReleaseError(
            f"{what} not available",
            details="The step that provides it has not run",
        )
    return value


@dataclass
class WorkflowResult:
    """Result of a workflow step."""

    success: bool
    message: str
    details: str | None = None
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class ReleaseWorkflow:
    """Orchestrates the complete release process.

    ``env`` is the mapping inputs are read from (os.environ when omitted).
    Child processes get it plus the Flutter SDK overrides; the workflow
    never modifies os.environ itself.
    """

    runner: RunnerEnvironment
    reporter: Reporter
    env: Mapping[str, str] | None = None
    manifest: Mapping[str, Mapping[str, Any]] | None = None
    platform: Platform | None = None
    client: GitHubClient | None = None
    rewrite_changelog: bool = True

    # State tracking
    inputs: ActionInputs | None = None
    entry: ChangelogEntry | None = None
    toolchain: ToolchainInstall | None = None
    command_env: dict[str, str] = field(default_factory=dict)
    credentials_file: Path | None = None
    exit_code: int = 0

    @property
    def workspace(self) -> Path:
        return self.runner.github_workspace

    @property
    def version(self) -> str:
        return self.entry.version if self.entry and self.entry.version else ""

    @property
    def tag_name(self) -> str:
        return add_tag_prefix(self.version)

    def run(self) -> bool:
        """Execute the complete release workflow.

        Returns:
            True if release completed successfully
        """
        return self._run_steps([
            ("Detecting platform", self.detect_platform),
            ("Authenticating with GitHub", self.authenticate),
            ("Loading action inputs", self.load_inputs),
            ("Reading changelog", self.read_changelog),
            ("Checking for a new version", self.check_version),
            ("Creating GitHub release", self.create_github_release),
            ("Setting up Flutter SDK", self.setup_flutter),
            ("Configuring pub credentials", self.configure_credentials),
            ("Publishing to pub.dev", self.publish_package),
        ])

    def check(self) -> bool:
        """Run only the read-only steps: inputs, changelog and release gate.

        A GitHub client is only resolved when previous-version is empty.
        """
        return self._run_steps([
            ("Loading action inputs", self.load_inputs),
            ("Reading changelog", self.read_changelog),
            ("Checking for a new version", self.check_version),
        ])

    def _run_steps(self, steps: list[tuple[str, Callable[[], WorkflowResult]]]) -> bool:
        for step_name, step_func in steps:
            self.reporter.step(step_name)

            try:
                result = step_func()
            except ReleaseError as e:
                self._fail(str(e), e.exit_code)
                return False
            except ShellError as e:
                self._fail(f"Command failed: {e.cmd} (exit {e.returncode})", 1)
                if e.stderr:
                    self.reporter.info(e.stderr.strip())
                return False
            except subprocess.TimeoutExpired as e:
                self._fail(f"Command timed out after {e.timeout}s: {e.cmd}", 1)
                return False

            if not result.success:
                self._fail(result.message, result.data.get("exit_code", 1))
                if result.details:
                    self.reporter.info(result.details)
                return False

            self.reporter.success(result.message)

        return True

    def _fail(self, message: str, exit_code: int) -> None:
        self.exit_code = exit_code
        self.reporter.set_failed(message)

    def detect_platform(self) -> WorkflowResult:
        """Reject unsupported hosts before anything is created."""
        if self.platform is None:
            self.platform = detect_platform()
        return WorkflowResult(success=True, message=f"Running on {self.platform}")

    def authenticate(self) -> WorkflowResult:
        if self.client is None:
            self.client = resolve_client(self.runner)
        return WorkflowResult(
            success=True,
            message=f"Authenticated for {self.client.repository}",
        )

    def load_inputs(self) -> WorkflowResult:
        if self.client is None and not self._input_set("previous-version"):
            self.client = resolve_client(self.runner)
        self.inputs = load_inputs(
            self.runner,
            client=self.client,
            env=self.env,
            manifest=self.manifest,
        )
        return WorkflowResult(
            success=True,
            message=f"Previous version: {self.inputs.previous_version or 'none'}",
        )

    def _input_set(self, name: str) -> bool:
        return bool(get_input(name, env=self.env, manifest=self.manifest))

    def read_changelog(self) -> WorkflowResult:
        inputs = _require(self.inputs, "Action inputs")
        path = inputs.changelog_file
        if not path.is_absolute():
            path = self.workspace / path
        self.entry = extract_latest_entry(path, rewrite=self.rewrite_changelog)
        return WorkflowResult(
            success=True,
            message=f"Latest changelog version: {self.version}",
        )

    def check_version(self) -> WorkflowResult:
        """Run the release validators; a fatal result stops the workflow."""
        inputs = _require(self.inputs, "Action inputs")
        context = ReleaseContext(
            workspace=self.workspace,
            inputs=inputs,
            version=self.version,
            previous_version=inputs.previous_version,
            timeout=self.runner.timeouts.command,
        )
        for result in ValidatorRegistry.run_category("release", context):
            if result.is_fatal:
                return WorkflowResult(
                    success=False,
                    message=result.message,
                    details=result.fix_command,
                    data={"exit_code": ValidationError.exit_code},
                )
            if not result.passed:
                self.reporter.warning(result.message)
        return WorkflowResult(success=True, message=f"Releasing {self.tag_name}")

    def _publish_context(self) -> PublishContext:
        inputs = _require(self.inputs, "Action inputs")
        entry = _require(self.entry, "Changelog entry")
        return PublishContext(
            workspace=self.workspace,
            inputs=inputs,
            version=self.version,
            tag_name=self.tag_name,
            release_notes=entry.body,
            env=dict(self.command_env),
            timeout=self.runner.timeouts.command,
        )

    def create_github_release(self) -> WorkflowResult:
        client = _require(self.client, "GitHub client")
        result = GitHubPublisher(client).publish(self._publish_context())
        return WorkflowResult(
            success=result.status == PublishStatus.SUCCESS,
            message=result.message,
            details=result.package_url or result.details,
        )

    def setup_flutter(self) -> WorkflowResult:
        platform = _require(self.platform, "Host platform")
        self.toolchain = provision_flutter(self.runner, platform=platform)
        base_path = (self.env if self.env is not None else os.environ).get("PATH", "")
        self.command_env = self.toolchain.env(base_path)

        self.reporter.export_variable("FLUTTER_ROOT", str(self.toolchain.root))
        self.reporter.add_path(self.toolchain.bin_dir)

        source = "tool cache" if self.toolchain.from_cache else "download"
        return WorkflowResult(
            success=True,
            message=f"Flutter {self.toolchain.version} ready ({source})",
            data={"root": str(self.toolchain.root)},
        )

    def configure_credentials(self) -> WorkflowResult:
        inputs = _require(self.inputs, "Action inputs")
        platform = _require(self.platform, "Host platform")
        self.credentials_file = setup_pub_auth(inputs, self.runner, platform)
        return WorkflowResult(
            success=True,
            message=f"Wrote pub credentials to {self.credentials_file}",
        )

    def publish_package(self) -> WorkflowResult:
        publisher = PubPublisher(on_check=self._report_check)
        result = publisher.publish(self._publish_context())
        if result.status == PublishStatus.SUCCESS:
            return WorkflowResult(success=True, message=result.message)
        return WorkflowResult(
            success=False,
            message=result.message,
            details=result.details,
            data={"exit_code": ValidationError.exit_code},
        )

    def _report_check(self, result: ValidationResult) -> None:
        if result.passed:
            self.reporter.success(result.message)
            return
        for warning in result.warnings:
            self.reporter.warning(warning)
        if not result.is_fatal:
            self.reporter.error(result.message)
            if result.details:
                self.reporter.info(result.details)
