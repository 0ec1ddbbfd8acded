"""Archive download and extraction for SDK installation.

Supports:
- Downloading over HTTPS with a timeout (partial files are removed)
- .zip archives (Windows and macOS Flutter releases)
- .tar.xz / .tar.gz archives (Linux Flutter releases)
- strip_components, so an archive's top-level 'flutter/' folder can be dropped
"""

import contextlib
import os
import shutil
import stat
import tarfile
import urllib.error
import urllib.request
import zipfile
from pathlib import Path, PurePosixPath
from urllib.parse import urlparse

from pub_release.exceptions import NetworkError, ToolchainError

USER_AGENT = "pub-release-action/1.0"
CHUNK_SIZE = 1024 * 1024


def download_file(url: str, dest_dir: Path, timeout: int = 600) -> Path:
    """Download a URL into a directory, keeping the URL's file name.

    Args:
        url: URL to download
        dest_dir: Directory for the downloaded file
        timeout: Socket timeout in seconds

    Returns:
        Path to the downloaded file

    Raises:
        NetworkError: If the download fails
    """
    filename = Path(urlparse(url).path).name or "download"
    dest_dir.mkdir(parents=True, exist_ok=True)
    dest = dest_dir / filename

    req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
    try:
        with urllib.request.urlopen(req, timeout=timeout) as response, open(dest, "wb") as f:
            shutil.copyfileobj(response, f, CHUNK_SIZE)
    except urllib.error.HTTPError as e:
        dest.unlink(missing_ok=True)
        raise NetworkError(f"Download failed: HTTP {e.code}", details=url) from e
    except (urllib.error.URLError, TimeoutError, OSError) as e:
        dest.unlink(missing_ok=True)
        raise NetworkError("Download failed", details=f"{url}: {e}") from e

    return dest


def _safe_relative_path(member_name: str, strip_components: int) -> Path | None:
    """Return a sanitized relative extraction path, or None if unsafe."""
    normalized = member_name.replace("\\", "/")
    if normalized.startswith("/"):
        return None

    parts = PurePosixPath(normalized).parts
    if len(parts) <= strip_components:
        return None

    kept = parts[strip_components:]
    if any(part in {"", ".", ".."} for part in kept):
        return None
    if kept[0].endswith(":"):
        return None

    return Path(*kept)


def _is_within_root(root: Path, target: Path) -> bool:
    try:
        return target.resolve().is_relative_to(root.resolve())
    except OSError:
        return False


def extract_zip(archive: Path, dest: Path, strip_components: int = 0) -> int:
    """Extract a zip archive, preserving Unix permissions.

    Args:
        archive: Path to the .zip file
        dest: Destination directory (created if missing)
        strip_components: Leading path components to remove

    Returns:
        Number of files extracted

    Raises:
        ToolchainError: If the archive is invalid or cannot be written
    """
    dest.mkdir(parents=True, exist_ok=True)
    root = dest.resolve()
    count = 0
    try:
        with zipfile.ZipFile(archive, "r") as zf:
            for info in zf.infolist():
                if info.is_dir():
                    continue
                rel_path = _safe_relative_path(info.filename, strip_components)
                if rel_path is None:
                    continue
                unix_attrs = info.external_attr >> 16
                if stat.S_ISLNK(unix_attrs):
                    continue
                target = dest / rel_path
                if not _is_within_root(root, target):
                    continue

                target.parent.mkdir(parents=True, exist_ok=True)
                with zf.open(info) as src, open(target, "wb") as dst:
                    shutil.copyfileobj(src, dst)
                if unix_attrs & 0o777:
                    target.chmod(unix_attrs & 0o777)
                count += 1
    except zipfile.BadZipFile as e:
        raise ToolchainError(f"Invalid zip file: {archive}", details=str(e)) from e
    except OSError as e:
        raise ToolchainError(f"Failed to extract {archive}", details=str(e)) from e
    return count


def extract_tar(archive: Path, dest: Path, strip_components: int = 0) -> int:
    """Extract a (compressed) tar archive, preserving permissions.

    Symlinks, devices and other non-regular members are skipped.

    Args:
        archive: Path to the .tar.xz / .tar.gz file
        dest: Destination directory (created if missing)
        strip_components: Leading path components to remove

    Returns:
        Number of files extracted

    Raises:
        ToolchainError: If the archive is invalid or cannot be written
    """
    dest.mkdir(parents=True, exist_ok=True)
    root = dest.resolve()
    count = 0
    try:
        with tarfile.open(archive, "r:*") as tar:
            for member in tar.getmembers():
                if not member.isreg():
                    continue
                rel_path = _safe_relative_path(member.name, strip_components)
                if rel_path is None:
                    continue
                target = dest / rel_path
                if not _is_within_root(root, target):
                    continue
                src = tar.extractfile(member)
                if src is None:
                    continue

                target.parent.mkdir(parents=True, exist_ok=True)
                with src, open(target, "wb") as dst:
                    shutil.copyfileobj(src, dst)
                if member.mode & 0o777:
                    with contextlib.suppress(OSError):
                        os.chmod(target, member.mode & 0o777)
                count += 1
    except tarfile.TarError as e:
        raise ToolchainError(f"Invalid tar archive: {archive}", details=str(e)) from e
    except OSError as e:
        raise ToolchainError(f"Failed to extract {archive}", details=str(e)) from e
    return count
