"""Severity-leveled reporting for the action.

Messages are printed with rich. When running under GitHub Actions they are
also emitted as workflow commands (``::error::``, ``::warning::``) so they
show up as annotations, and exported variables and PATH entries are written
to the GITHUB_ENV and GITHUB_PATH files for later steps.
"""

import uuid
from pathlib import Path

from rich.console import Console

from pub_release.config.models import RunnerEnvironment


def escape_data(value: str) -> str:
    """Escape a workflow command message."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    """Escape a workflow command property value."""
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


class Reporter:
    """Collects and prints failures, errors and warnings.

    ``set_failed`` marks the whole run as failed; ``error`` and ``warning``
    are annotations that do not change the outcome on their own.
    """

    def __init__(
        self,
        console: Console | None = None,
        github_actions: bool = False,
        env_file: Path | None = None,
        path_file: Path | None = None,
    ) -> None:
        self.console = console or Console()
        self.github_actions = github_actions
        self.env_file = env_file
        self.path_file = path_file
        self.failed = False
        self.failures: list[str] = []
        self.errors: list[str] = []
        self.warnings: list[str] = []

    @classmethod
    def from_runner(cls, runner: RunnerEnvironment, console: Console | None = None) -> "Reporter":
        return cls(
            console=console,
            github_actions=runner.github_actions,
            env_file=runner.github_env,
            path_file=runner.github_path,
        )

    def _command(self, name: str, message: str, title: str | None = None) -> None:
        props = f" title={escape_property(title)}" if title else ""
        self.console.print(
            f"::{name}{props}::{escape_data(message)}",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )

    def step(self, name: str) -> None:
        """Print a workflow step banner."""
        self.console.print(f"\n[bold cyan]>[/bold cyan] {name}...")

    def info(self, message: str) -> None:
        self.console.print(f"  {message}", highlight=False)

    def success(self, message: str) -> None:
        self.console.print(f"[green]  {message}[/green]")

    def warning(self, message: str, title: str | None = None) -> None:
        self.warnings.append(message)
        if self.github_actions:
            self._command("warning", message, title)
        else:
            heading = f"{title}: " if title else ""
            self.console.print(f"[yellow]  Warning:[/yellow] {heading}{message}")

    def error(self, message: str, title: str | None = None) -> None:
        self.errors.append(message)
        if self.github_actions:
            self._command("error", message, title)
        else:
            heading = f"{title}: " if title else ""
            self.console.print(f"[red]  Error:[/red] {heading}{message}")

    def set_failed(self, message: str) -> None:
        """Report an error and mark the run as failed."""
        self.failed = True
        self.failures.append(message)
        self.error(message)

    def export_variable(self, name: str, value: str) -> None:
        """Make an environment variable available to later workflow steps."""
        if self.env_file is not None:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            with open(self.env_file, "a", encoding="utf-8") as f:
                f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
        self.info(f"Exported {name}={value}")

    def add_path(self, path: Path | str) -> None:
        """Prepend a directory to PATH for later workflow steps."""
        if self.path_file is not None:
            with open(self.path_file, "a", encoding="utf-8") as f:
                f.write(f"{path}\n")
        self.info(f"Added {path} to PATH")
