"""Validation modules for release and publish checks."""

# Import validators to trigger registration
from pub_release.validators import (
    gate,  # noqa: F401
    pub_score,  # noqa: F401
)
from pub_release.validators.base import (
    ReleaseContext,
    ValidationResult,
    ValidationSeverity,
    Validator,
    ValidatorRegistry,
)

__all__ = [
    "ReleaseContext",
    "ValidationResult",
    "ValidationSeverity",
    "Validator",
    "ValidatorRegistry",
]
