"""Flutter SDK provisioning.

Installs a pinned Flutter stable release (the latest one known to support
everything the publish step needs) unless a matching 2.x SDK is already in
the runner tool cache.
"""

import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from pub_release.config.models import RunnerEnvironment
from pub_release.exceptions import ToolchainError
from pub_release.toolchain.cache import ToolCache
from pub_release.toolchain.download import download_file, extract_tar, extract_zip
from pub_release.utils.platform import Platform, detect_arch, detect_platform

TOOL_NAME = "flutter"
FLUTTER_VERSION = "2.0.3"
FLUTTER_VERSION_SPEC = "2.x"
INSTALL_MARKER = ".pub-release-install"

_RELEASES = "https://storage.googleapis.com/flutter_infra/releases/stable"

FLUTTER_DOWNLOAD_URLS: dict[Platform, str] = {
    Platform.WINDOWS: f"{_RELEASES}/windows/flutter_windows_{FLUTTER_VERSION}-stable.zip",
    Platform.MACOS: f"{_RELEASES}/macos/flutter_macos_{FLUTTER_VERSION}-stable.zip",
    Platform.LINUX: f"{_RELEASES}/linux/flutter_linux_{FLUTTER_VERSION}-stable.tar.xz",
}


@dataclass(frozen=True)
class ToolchainInstall:
    """A ready-to-use Flutter SDK.

    Attributes:
        root: SDK root directory (the FLUTTER_ROOT value)
        version: Installed SDK version
        from_cache: True if the SDK came from the tool cache
    """

    root: Path
    version: str
    from_cache: bool = False

    @property
    def bin_dir(self) -> Path:
        return self.root / "bin"

    def env(self, base_path: str | None = None) -> dict[str, str]:
        """Environment overrides that put this SDK first on PATH.

        Args:
            base_path: PATH to extend (defaults to the current process PATH)
        """
        path = base_path if base_path is not None else os.environ.get("PATH", "")
        return {
            "FLUTTER_ROOT": str(self.root),
            "PATH": os.pathsep.join(p for p in (str(self.bin_dir), path) if p),
        }


def flutter_root(home: Path) -> Path:
    """Installation directory for a freshly downloaded SDK."""
    return home / "flutter"


def is_managed_install(root: Path) -> bool:
    """Check whether an SDK directory was installed by this tool."""
    return (root / INSTALL_MARKER).is_file()


def provision_flutter(
    runner: RunnerEnvironment,
    platform: Platform | None = None,
    cache: ToolCache | None = None,
) -> ToolchainInstall:
    """Make the pinned Flutter SDK available.

    Args:
        runner: Runner environment (home, tool cache, temp dir, timeouts)
        platform: Host platform (detected when omitted)
        cache: Tool cache to look up and populate

    Returns:
        ToolchainInstall describing the SDK to use

    Raises:
        UnsupportedPlatformError: If the host platform has no pinned archive
        NetworkError: If the download fails
        ToolchainError: If the install directory holds an SDK this tool did
            not install, or extraction or caching fails
    """
    platform = platform or detect_platform()
    cache = cache or ToolCache(runner.tool_cache_dir, detect_arch())

    cached = cache.find(TOOL_NAME, FLUTTER_VERSION_SPEC)
    if cached is not None:
        return ToolchainInstall(root=cached, version=cached.parent.name, from_cache=True)

    url = FLUTTER_DOWNLOAD_URLS[platform]
    root = flutter_root(runner.home)
    if root.exists() and not is_managed_install(root):
        raise ToolchainError(
            f"{root} already exists and was not installed by pub-release",
            details="Refusing to replace an SDK this tool did not install",
            fix_hint=f"Move {root} aside, or set RUNNER_TOOL_CACHE to a cache holding Flutter 2.x",
        )

    staging = root.with_name(f".{root.name}.partial")
    archive = download_file(url, runner.temp_dir, timeout=runner.timeouts.download)
    try:
        if staging.exists():
            shutil.rmtree(staging)
        # Archives hold a single top-level 'flutter/' folder
        if archive.name.endswith(".zip"):
            extract_zip(archive, staging, strip_components=1)
        else:
            extract_tar(archive, staging, strip_components=1)
    finally:
        archive.unlink(missing_ok=True)

    if not (staging / "bin").is_dir():
        shutil.rmtree(staging, ignore_errors=True)
        raise ToolchainError(
            f"Flutter SDK archive did not contain a bin directory: {url}",
            details=f"Extracted to {staging}",
        )

    try:
        (staging / INSTALL_MARKER).write_text(f"{FLUTTER_VERSION}\n")
        if root.exists():
            shutil.rmtree(root)
        staging.rename(root)
    except OSError as e:
        raise ToolchainError(f"Failed to install Flutter SDK to {root}", details=str(e)) from e

    cache.cache_dir(root, TOOL_NAME, FLUTTER_VERSION)
    return ToolchainInstall(root=root, version=FLUTTER_VERSION, from_cache=False)
