"""Pub score check using pana.

Runs pana, the analyzer behind pub.dev scores, against the workspace and
compares the granted points with the pub-score-min-points input.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar

from pub_release.exceptions import ConfigurationError, PubScoreError
from pub_release.utils.shell import run
from pub_release.validators.base import (
    ReleaseContext,
    ValidationResult,
    Validator,
    ValidatorRegistry,
)

PASSED_STATUS = "passed"


@dataclass(frozen=True)
class PanaSection:
    """One section of the pana report (e.g. 'Follow Dart file conventions')."""

    title: str
    status: str
    summary: str = ""
    id: str | None = None


@dataclass(frozen=True)
class PanaReport:
    """Scores and report sections from ``pana --json``."""

    granted_points: int
    max_points: int | None = None
    sections: list[PanaSection] = field(default_factory=list)

    @property
    def failed_sections(self) -> list[PanaSection]:
        return [s for s in self.sections if s.status != PASSED_STATUS]


def _section_from_json(data: dict[str, Any]) -> PanaSection:
    return PanaSection(
        title=str(data.get("title", "")),
        status=str(data.get("status", "")),
        summary=str(data.get("summary", "")),
        id=data.get("id"),
    )


def parse_pana_output(stdout: str) -> PanaReport:
    """Parse the JSON report pana prints on its last output line.

    Earlier lines are progress and diagnostic output and are discarded.

    Args:
        stdout: Captured pana standard output

    Returns:
        Parsed PanaReport

    Raises:
        PubScoreError: If the last line is not a pana JSON report
    """
    lines = [line for line in stdout.splitlines() if line.strip()]
    if not lines:
        raise PubScoreError("pana produced no output")

    try:
        data = json.loads(lines[-1])
    except json.JSONDecodeError as e:
        raise PubScoreError(
            "Could not parse pana output as JSON",
            details=lines[-1][:500],
            fix_hint="Check that pana supports --json for this Flutter version",
        ) from e

    scores = data.get("scores") if isinstance(data, dict) else None
    if not isinstance(scores, dict) or "grantedPoints" not in scores:
        raise PubScoreError(
            "pana report has no granted points",
            details=lines[-1][:500],
        )

    report = data.get("report") or {}
    sections = [
        _section_from_json(section)
        for section in report.get("sections", [])
        if isinstance(section, dict)
    ]
    max_points = scores.get("maxPoints")
    return PanaReport(
        granted_points=int(scores["grantedPoints"]),
        max_points=int(max_points) if max_points is not None else None,
        sections=sections,
    )


def run_pana(
    workspace: Path,
    env: dict[str, str] | None = None,
    timeout: int | None = 1800,
) -> PanaReport:
    """Activate and run pana against the workspace.

    Raises:
        ShellError: If activating or running pana fails
        PubScoreError: If the report cannot be parsed
    """
    run(
        ["flutter", "pub", "global", "activate", "pana"],
        cwd=workspace,
        capture=False,
        timeout=timeout,
        env=env,
    )
    result = run(
        ["flutter", "pub", "global", "run", "pana", str(workspace), "--json", "--no-warning"],
        cwd=workspace,
        capture=True,
        timeout=timeout,
        env=env,
    )
    return parse_pana_output(result.stdout)


def format_section(section: PanaSection) -> str:
    return f"{section.title}\n\n\n{section.summary}"


def evaluate_score(report: PanaReport, min_points: int, enforce: bool = False) -> ValidationResult:
    """Compare a pana report with the minimum points.

    Args:
        report: Parsed pana report
        min_points: Minimum acceptable granted points
        enforce: Make a low score fatal instead of advisory

    Returns:
        Success, or a failed result listing every section that did not pass
    """
    out_of = f"/{report.max_points}" if report.max_points is not None else ""
    if report.granted_points >= min_points:
        return ValidationResult.success(
            f"Pub score {report.granted_points}{out_of} meets the minimum of {min_points}"
        )

    factory = ValidationResult.error if enforce else ValidationResult.advisory
    return factory(
        "Pub score test failed",
        details=f"Granted {report.granted_points}{out_of} points, minimum is {min_points}",
        fix_command="flutter pub global run pana .",
        warnings=[format_section(s) for s in report.failed_sections],
    )


@ValidatorRegistry.register
class PubScoreValidator(Validator):
    """Checks the package's pana score before publishing."""

    name: ClassVar[str] = "pub-score"
    description: ClassVar[str] = "pana score meets pub-score-min-points"
    category: ClassVar[str] = "publish"

    def should_run(self, context: ReleaseContext) -> bool:
        return context.inputs.should_run_pub_score_test

    def validate(self, context: ReleaseContext) -> ValidationResult:
        min_points = context.inputs.pub_score_min_points
        if min_points is None:
            raise ConfigurationError(
                "should-run-pub-score-test was set to true but no value for "
                "pub-score-min-points was provided"
            )
        report = run_pana(context.workspace, env=context.env, timeout=context.timeout)
        return evaluate_score(report, min_points, enforce=context.inputs.fail_on_low_pub_score)
