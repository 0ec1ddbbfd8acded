"""Release gate: refuse to release a version that was already released."""

from typing import ClassVar

from pub_release.validators.base import (
    ReleaseContext,
    ValidationResult,
    Validator,
    ValidatorRegistry,
)


def check_new_version(version: str, previous_version: str) -> ValidationResult:
    """Compare the changelog version with the previously released one.

    The comparison is an exact string match.

    Args:
        version: Newest version in the changelog
        previous_version: Version of the last release ('' if there is none)

    Returns:
        Fatal error result if the versions are equal, success otherwise
    """
    if version == previous_version:
        return ValidationResult.error(
            f"No new version found. Latest version in Changelog ({version}) "
            f"is the same as the previous version ({previous_version}).",
            fix_command="Add a '## <new version>' section at the top of the changelog",
        )
    return ValidationResult.success(
        f"New version {version} (previous: {previous_version or 'none'})"
    )


@ValidatorRegistry.register
class ReleaseGateValidator(Validator):
    """Blocks the release when the changelog version is unchanged."""

    name: ClassVar[str] = "release-gate"
    description: ClassVar[str] = "Changelog version differs from the previous release"
    category: ClassVar[str] = "release"

    def validate(self, context: ReleaseContext) -> ValidationResult:
        if not context.version:
            return ValidationResult.error("No version was extracted from the changelog")
        return check_new_version(context.version, context.previous_version or "")
