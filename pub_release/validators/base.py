"""Base types for release and publish checks.

A check returns a ValidationResult whose severity decides what happens
next: a failed ERROR result stops the run, a failed WARNING result is
reported and the run goes on.

Checks are grouped by category:
- release: run after the changelog is read, before the GitHub release
- publish: run inside the pub.dev publish step, after the pre-publish hook
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from pub_release.config.models import ActionInputs


class ValidationSeverity(Enum):
    """How a failed check affects the run."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass
class ValidationResult:
    """Outcome of a single check.

    Attributes:
        passed: Whether the check passed
        message: One-line summary
        severity: ERROR stops the run when the check failed, WARNING does not
        details: Extended explanation
        fix_command: What to run or change to fix it
        warnings: Individual findings, each reported as its own warning
    """

    passed: bool
    message: str
    severity: ValidationSeverity = ValidationSeverity.ERROR
    details: str | None = None
    fix_command: str | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def is_fatal(self) -> bool:
        return not self.passed and self.severity == ValidationSeverity.ERROR

    @classmethod
    def success(cls, message: str = "Check passed") -> "ValidationResult":
        return cls(passed=True, message=message, severity=ValidationSeverity.INFO)

    @classmethod
    def error(
        cls,
        message: str,
        details: str | None = None,
        fix_command: str | None = None,
        warnings: list[str] | None = None,
    ) -> "ValidationResult":
        """A failed check that stops the run."""
        return cls(False, message, ValidationSeverity.ERROR, details, fix_command, list(warnings or []))

    @classmethod
    def advisory(
        cls,
        message: str,
        details: str | None = None,
        fix_command: str | None = None,
        warnings: list[str] | None = None,
    ) -> "ValidationResult":
        """A failed check that is only reported."""
        return cls(False, message, ValidationSeverity.WARNING, details, fix_command, list(warnings or []))


@dataclass
class ReleaseContext:
    """Everything a check can look at.

    ``env`` holds overrides for child processes (FLUTTER_ROOT, PATH) once
    the SDK is set up.
    """

    workspace: Path
    inputs: "ActionInputs"
    version: str | None = None
    previous_version: str | None = None
    env: dict[str, str] = field(default_factory=dict)
    timeout: int | None = 1800


class Validator(ABC):
    """A single release or publish check."""

    name: ClassVar[str]
    description: ClassVar[str]
    category: ClassVar[str]  # "release" or "publish"

    @abstractmethod
    def validate(self, context: ReleaseContext) -> ValidationResult:
        """Run the check."""

    def should_run(self, context: ReleaseContext) -> bool:
        """Whether the inputs enable this check. Defaults to always."""
        return True


class ValidatorRegistry:
    """Checks by name and by category, in registration order."""

    _validators: dict[str, type[Validator]] = {}
    _categories: dict[str, list[type[Validator]]] = {}

    @classmethod
    def register(cls, validator_class: type[Validator]) -> type[Validator]:
        """Class decorator adding a check to the registry.

        Example:
            @ValidatorRegistry.register
            class ReleaseGateValidator(Validator):
                ...

        Raises:
            TypeError: If name, description or category is missing
            ValueError: If another class already uses the name
        """
        for attr in ("name", "description", "category"):
            if not getattr(validator_class, attr, None):
                raise TypeError(f"{validator_class.__name__} must define a non-empty '{attr}'")

        existing = cls._validators.get(validator_class.name)
        if existing is validator_class:
            return validator_class
        if existing is not None:
            raise ValueError(
                f"Check '{validator_class.name}' is already registered by {existing.__name__}"
            )

        cls._validators[validator_class.name] = validator_class
        cls._categories.setdefault(validator_class.category, []).append(validator_class)
        return validator_class

    @classmethod
    def get(cls, name: str) -> type[Validator] | None:
        return cls._validators.get(name)

    @classmethod
    def get_by_category(cls, category: str) -> list[type[Validator]]:
        return cls._categories.get(category, [])

    @classmethod
    def run_category(cls, category: str, context: ReleaseContext) -> list[ValidationResult]:
        """Run every enabled check in a category and collect the results."""
        results = []
        for validator_class in cls.get_by_category(category):
            validator = validator_class()
            if validator.should_run(context):
                results.append(validator.validate(context))
        return results

    @classmethod
    def list_registered(cls) -> list[str]:
        return list(cls._validators)
