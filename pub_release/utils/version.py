"""Version parsing and tag manipulation utilities.

Versions follow semantic versioning (MAJOR.MINOR.PATCH with an optional
pre-release and build suffix, as used in pubspec.yaml). Git tags carry a
``v`` prefix (e.g. ``v1.2.3``).
"""

import re

from pub_release.exceptions import ValidationError

VersionTuple = tuple[int, int, int]

# MAJOR.MINOR.PATCH[-prerelease][+build], optional leading 'v'
SEMVER_PATTERN = re.compile(
    r"^v?(\d+)\.(\d+)\.(\d+)(?:-([0-9A-Za-z.-]+))?(?:\+([0-9A-Za-z.-]+))?$"
)

# Same grammar, unanchored, for finding a version inside free text
SEMVER_SEARCH_PATTERN = re.compile(
    r"\d+\.\d+\.\d+(?:-[0-9A-Za-z.-]+)?(?:\+[0-9A-Za-z.-]+)?"
)

TAG_PREFIX = "v"


def parse_version(version_str: str) -> VersionTuple:
    """Parse a semantic version string into a tuple of integers.

    Pre-release and build suffixes are accepted but not part of the tuple.

    Args:
        version_str: Version string to parse (e.g., '1.2.3', 'v2.0.0-beta')

    Returns:
        Tuple of (major, minor, patch) as integers

    Raises:
        ValidationError: If version string doesn't match semver format

    Examples:
        >>> parse_version('v1.2.3')
        (1, 2, 3)
        >>> parse_version('2.0.3-stable')
        (2, 0, 3)
    """
    if not version_str or not version_str.strip():
        raise ValidationError(
            "Empty version string",
            details="Version string cannot be empty or whitespace",
            fix_hint="Provide a valid semantic version (e.g., '1.2.3')",
        )

    match = SEMVER_PATTERN.match(version_str.strip())
    if not match:
        raise ValidationError(
            f"Invalid version format: '{version_str}'",
            details="Version must follow semantic versioning: MAJOR.MINOR.PATCH",
            fix_hint="Use format like '1.2.3' or 'v1.2.3'",
        )

    return int(match.group(1)), int(match.group(2)), int(match.group(3))


def is_valid_version(version_str: str) -> bool:
    """Check whether a string is a semantic version."""
    return bool(version_str) and SEMVER_PATTERN.match(version_str.strip()) is not None


def is_prerelease(version: str) -> bool:
    """Check whether a version should be released as a pre-release.

    Any hyphen marks a pre-release, matching how pub treats ``1.0.0-dev``.

    Examples:
        >>> is_prerelease('2.0.0-beta')
        True
        >>> is_prerelease('2.0.0')
        False
    """
    return "-" in version


def add_tag_prefix(version: str, prefix: str = TAG_PREFIX) -> str:
    """Build a tag name from a version.

    The version is used verbatim, so pre-release versions keep their suffix.

    Examples:
        >>> add_tag_prefix('1.2.3')
        'v1.2.3'
        >>> add_tag_prefix('2.0.0-beta')
        'v2.0.0-beta'
    """
    return f"{prefix}{version}"


def remove_tag_prefix(tag: str, prefix: str = TAG_PREFIX) -> str:
    """Remove a leading tag prefix.

    Only a true leading prefix is removed; a prefix appearing later in the
    tag is left alone.

    Examples:
        >>> remove_tag_prefix('v1.2.0')
        '1.2.0'
        >>> remove_tag_prefix('x1.2.0')
        'x1.2.0'
        >>> remove_tag_prefix('release-v1')
        'release-v1'
    """
    stripped = tag.strip()
    if prefix and stripped.startswith(prefix):
        return stripped[len(prefix) :]
    return stripped


def matches_version_spec(version: str, spec: str) -> bool:
    """Check a version against a wildcard spec like ``2.x`` or ``2.0.x``.

    Args:
        version: Concrete version (e.g., '2.0.3')
        spec: Spec with 'x' or '*' wildcards, or an exact version

    Returns:
        True if every non-wildcard component matches
    """
    if not is_valid_version(version):
        return False
    if is_valid_version(spec):
        return version == spec

    wanted = spec.strip().split(".")
    actual = [str(part) for part in parse_version(version)]
    for want, have in zip(wanted, actual):
        if want in ("x", "X", "*"):
            continue
        if want != have:
            return False
    return True


__all__ = [
    "VersionTuple",
    "SEMVER_PATTERN",
    "SEMVER_SEARCH_PATTERN",
    "TAG_PREFIX",
    "parse_version",
    "is_valid_version",
    "is_prerelease",
    "add_tag_prefix",
    "remove_tag_prefix",
    "matches_version_spec",
]
