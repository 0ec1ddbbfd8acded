"""Command-line interface for the pub release action.

Provides commands for:
- run: Release to GitHub and publish to pub.dev
- check: Validate inputs, changelog and release gate without side effects
- validators: List the registered release checks
"""

from pathlib import Path

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.table import Table

from pub_release import __version__
from pub_release.config.loader import format_validation_errors, load_action_manifest
from pub_release.config.models import RunnerEnvironment
from pub_release.exceptions import ConfigurationError, ReleaseError
from pub_release.reporting import Reporter
from pub_release.validators import ValidatorRegistry
from pub_release.workflow import ReleaseWorkflow

# Create Typer app
app = typer.Typer(
    name="pub-release",
    help="Release a Flutter package to GitHub and pub.dev",
    add_completion=False,
    no_args_is_help=True,
)

# Rich console for formatted output
console = Console()


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"pub-release version {__version__}")
        raise typer.Exit()


def load_runner() -> RunnerEnvironment:
    """Read the runner environment, turning bad values into ConfigurationError."""
    try:
        return RunnerEnvironment()
    except PydanticValidationError as e:
        raise ConfigurationError(
            "Invalid runner environment",
            details=format_validation_errors(e),
        ) from e


def build_workflow(manifest: Path | None, rewrite_changelog: bool = True) -> ReleaseWorkflow:
    runner = load_runner()
    return ReleaseWorkflow(
        runner=runner,
        reporter=Reporter.from_runner(runner, console=console),
        manifest=load_action_manifest(manifest) if manifest else None,
        rewrite_changelog=rewrite_changelog,
    )


def finish(workflow: ReleaseWorkflow, ok: bool, done: str) -> None:
    """Print the outcome and exit with the workflow's exit code on failure."""
    warning_count = len(workflow.reporter.warnings)
    if warning_count:
        console.print(f"[yellow]{warning_count} warning(s)[/yellow]")
    if not ok:
        raise typer.Exit(code=workflow.exit_code or 1)
    console.print(f"\n[green]{done}[/green]")


@app.callback()
def main(
    version: bool = typer.Option(  # noqa: B008
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Release a Flutter package to GitHub and pub.dev.

    Reads action inputs from INPUT_<NAME> environment variables, the way
    the GitHub Actions runner passes them.
    """
    pass


@app.command()
def run(
    manifest: Path | None = typer.Option(  # noqa: B008
        None,
        "--manifest",
        "-m",
        help="action.yml to take input defaults from",
    ),
) -> None:
    """Create the GitHub release and publish the package to pub.dev.

    Steps:
    - Read the newest version from the changelog
    - Stop if it equals the previous release
    - Create the release, running the release hooks around it
    - Set up Flutter and pub credentials
    - Publish, running the publish hooks and optional pub score check
    """
    try:
        workflow = build_workflow(manifest)
    except ReleaseError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=e.exit_code) from None

    finish(workflow, workflow.run(), f"Released {workflow.tag_name}")


@app.command()
def check(
    manifest: Path | None = typer.Option(  # noqa: B008
        None,
        "--manifest",
        "-m",
        help="action.yml to take input defaults from",
    ),
    no_rewrite: bool = typer.Option(  # noqa: B008
        False,
        "--no-rewrite",
        help="Do not insert a title heading into the changelog",
    ),
) -> None:
    """Validate inputs, the changelog and the release gate.

    Creates no release and publishes nothing. An untitled changelog gets
    its synthetic title heading written in place unless --no-rewrite is
    given. GitHub is only contacted when previous-version is empty.
    """
    try:
        workflow = build_workflow(manifest, rewrite_changelog=not no_rewrite)
    except ReleaseError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=e.exit_code) from None

    finish(workflow, workflow.check(), f"Ready to release {workflow.tag_name}")


@app.command()
def validators() -> None:
    """List the registered release checks."""
    table = Table(title="Release checks")
    table.add_column("Name", style="cyan")
    table.add_column("Category")
    table.add_column("Description")

    for name in ValidatorRegistry.list_registered():
        validator_class = ValidatorRegistry.get(name)
        if validator_class is None:
            continue
        table.add_row(name, validator_class.category, validator_class.description)

    console.print(table)


if __name__ == "__main__":
    app()
