"""Runner tool cache lookup and population.

Uses the hosted-runner layout so SDKs cached by other actions are found:

    $RUNNER_TOOL_CACHE/<tool>/<version>/<arch>/
    $RUNNER_TOOL_CACHE/<tool>/<version>/<arch>.complete

A version directory only counts once its ``.complete`` marker exists.
"""

import shutil
from pathlib import Path

from pub_release.exceptions import ToolchainError
from pub_release.utils.version import is_valid_version, matches_version_spec, parse_version


class ToolCache:
    """Versioned tool directories under the runner tool cache."""

    def __init__(self, root: Path, arch: str = "x64") -> None:
        self.root = root
        self.arch = arch

    def tool_path(self, tool: str, version: str) -> Path:
        return self.root / tool / version / self.arch

    def _marker(self, tool: str, version: str) -> Path:
        return self.root / tool / version / f"{self.arch}.complete"

    def versions(self, tool: str) -> list[str]:
        """List completely cached versions of a tool, highest first."""
        tool_dir = self.root / tool
        if not tool_dir.is_dir():
            return []
        found = [
            entry.name
            for entry in tool_dir.iterdir()
            if entry.is_dir()
            and is_valid_version(entry.name)
            and self._marker(tool, entry.name).exists()
            and self.tool_path(tool, entry.name).is_dir()
        ]
        return sorted(found, key=parse_version, reverse=True)

    def find(self, tool: str, version_spec: str) -> Path | None:
        """Find the highest cached version matching a spec like ``2.x``.

        Returns:
            Path to the cached tool directory, or None
        """
        for version in self.versions(tool):
            if matches_version_spec(version, version_spec):
                return self.tool_path(tool, version)
        return None

    def cache_dir(self, source: Path, tool: str, version: str) -> Path:
        """Copy a directory into the cache and mark it complete.

        Args:
            source: Installed tool directory to copy
            tool: Tool name
            version: Exact version to cache under

        Returns:
            Path to the cached copy

        Raises:
            ToolchainError: If the copy fails
        """
        dest = self.tool_path(tool, version)
        marker = self._marker(tool, version)
        try:
            marker.unlink(missing_ok=True)
            if dest.exists():
                shutil.rmtree(dest)
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copytree(source, dest, symlinks=True)
            marker.write_text("")
        except OSError as e:
            raise ToolchainError(
                f"Failed to cache {tool} {version}",
                details=f"{source} -> {dest}: {e}",
            ) from e
        return dest
