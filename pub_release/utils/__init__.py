"""Utility modules for the pub release action."""

from pub_release.utils.platform import Platform, detect_arch, detect_platform
from pub_release.utils.shell import (
    HookCommand,
    ShellError,
    run,
    run_hook,
    split_command,
    strip_ansi,
)
from pub_release.utils.version import (
    SEMVER_PATTERN,
    TAG_PREFIX,
    VersionTuple,
    add_tag_prefix,
    is_prerelease,
    is_valid_version,
    matches_version_spec,
    parse_version,
    remove_tag_prefix,
)

__all__ = [
    # Shell utilities
    "run",
    "run_hook",
    "split_command",
    "strip_ansi",
    "HookCommand",
    "ShellError",
    # Platform utilities
    "Platform",
    "detect_platform",
    "detect_arch",
    # Version utilities
    "parse_version",
    "is_valid_version",
    "is_prerelease",
    "add_tag_prefix",
    "remove_tag_prefix",
    "matches_version_spec",
    "VersionTuple",
    "SEMVER_PATTERN",
    "TAG_PREFIX",
]
