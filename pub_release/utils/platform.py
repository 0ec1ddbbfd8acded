"""Host platform detection.

Only the three platforms with a pinned Flutter SDK archive are modelled.
Anything else is rejected up front instead of falling through to a
default branch.
"""

import os
import platform as _platform
import sys
from enum import Enum

from pub_release.exceptions import UnsupportedPlatformError


class Platform(Enum):
    """Supported host operating systems."""

    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"

    def __str__(self) -> str:
        return self.value

    @property
    def is_windows(self) -> bool:
        return self is Platform.WINDOWS


def detect_platform(system: str | None = None) -> Platform:
    """Detect the current operating system.

    Args:
        system: Platform identifier in ``sys.platform`` form (defaults to
            the running interpreter's)

    Returns:
        The detected Platform

    Raises:
        UnsupportedPlatformError: If the platform is not Windows, macOS or Linux
    """
    value = (system if system is not None else sys.platform).lower()
    if value.startswith("linux"):
        return Platform.LINUX
    if value.startswith("darwin"):
        return Platform.MACOS
    if value.startswith(("win32", "cygwin", "msys")):
        return Platform.WINDOWS
    raise UnsupportedPlatformError(
        f"Unsupported platform: {value}",
        details="The Flutter SDK is only provisioned on Windows, macOS and Linux",
        fix_hint="Run this action on a windows-*, macos-* or ubuntu-* runner",
    )


def detect_arch() -> str:
    """Detect the CPU architecture in tool cache form (``x64``, ``arm64``)."""
    # platform.machine() may query WMI on Windows; the env var is reliable there
    if sys.platform.startswith("win"):
        machine = (
            os.environ.get("PROCESSOR_ARCHITEW6432")
            or os.environ.get("PROCESSOR_ARCHITECTURE")
            or ""
        ).lower()
    else:
        machine = _platform.machine().lower()
    if machine in ("aarch64", "arm64"):
        return "arm64"
    return "x64"
