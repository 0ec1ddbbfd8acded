"""Changelog reading and version extraction.

A changelog is a Markdown document with an optional top-level ``# `` title
followed by one section per version, newest first::

    # Changelog

    ## [1.2.0] - 2021-03-20
    - Bug fixes

    ## 1.1.0
    - Initial release

Version sections may use ``# `` or ``## `` headings. Only the first heading
can be the title, and only when it names no version, so a document that
starts with ``# 1.2.0`` has no title. Many Flutter packages start
CHANGELOG.md that way; a synthetic title can be inserted in front of such
documents so tools that expect a title accept them.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path

from pub_release.exceptions import ChangelogError
from pub_release.utils.version import SEMVER_SEARCH_PATTERN

SYNTHETIC_HEADING = "# Changelog"

DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")
FENCE_PATTERN = re.compile(r"^\s*(```|~~~)")
HEADING_PATTERN = re.compile(r"^(#{1,2}) (.*)$")


@dataclass(frozen=True)
class ChangelogEntry:
    """One version section of a changelog.

    Attributes:
        version: Version found in the heading, or None (e.g. 'Unreleased')
        body: Section text without the heading, trimmed
        title: Full heading text
        date: ISO date from the heading, if any
    """

    version: str | None
    body: str
    title: str = ""
    date: str | None = None


@dataclass
class Changelog:
    """A parsed changelog document."""

    title: str | None = None
    entries: list[ChangelogEntry] = field(default_factory=list)

    @property
    def latest(self) -> ChangelogEntry | None:
        return self.entries[0] if self.entries else None


def _is_title(line: str) -> bool:
    return line.startswith("# ") and SEMVER_SEARCH_PATTERN.search(line) is None


def has_title(text: str) -> bool:
    """Check whether the first non-blank line is a top-level heading without a version."""
    for line in text.splitlines():
        if line.strip():
            return _is_title(line)
    return False


def add_synthetic_heading(path: Path, heading: str = SYNTHETIC_HEADING) -> None:
    """Insert a top-level heading and a blank line at the start of a file.

    The original bytes follow unchanged. This is not idempotent: running it
    twice inserts the heading twice.

    Args:
        path: Changelog file to rewrite in place
        heading: Heading line to insert

    Raises:
        ChangelogError: If the file cannot be read or written
    """
    try:
        original = path.read_bytes()
        path.write_bytes(f"{heading}\n\n".encode() + original)
    except FileNotFoundError:
        raise ChangelogError(
            f"Changelog not found: {path}",
            fix_hint="Set the changelog-file input or add CHANGELOG.md to the repository root",
        ) from None
    except OSError as e:
        raise ChangelogError(f"Cannot rewrite changelog {path}", details=str(e)) from e


def _parse_heading(title: str) -> tuple[str | None, str | None]:
    version_match = SEMVER_SEARCH_PATTERN.search(title)
    date_match = DATE_PATTERN.search(title)
    version = version_match.group(0) if version_match else None
    date = date_match.group(0) if date_match else None
    return version, date


def parse_changelog(text: str) -> Changelog:
    """Parse a changelog document into version entries, newest first.

    ``# `` and ``## `` headings both start a section, except a leading
    ``# `` heading without a version, which is the document title.
    Headings inside fenced code blocks are ignored.

    Args:
        text: Markdown document

    Returns:
        Parsed Changelog
    """
    changelog = Changelog()
    current_title: str | None = None
    current_lines: list[str] = []
    in_fence = False

    def flush() -> None:
        if current_title is None:
            return
        version, date = _parse_heading(current_title)
        changelog.entries.append(
            ChangelogEntry(
                version=version,
                body="\n".join(current_lines).strip(),
                title=current_title,
                date=date,
            )
        )

    seen_heading = False
    for line in text.splitlines():
        if FENCE_PATTERN.match(line):
            in_fence = not in_fence
        heading = None if in_fence else HEADING_PATTERN.match(line)
        if heading is None:
            if current_title is not None:
                current_lines.append(line)
            continue

        if not seen_heading and _is_title(line):
            changelog.title = heading.group(2).strip()
        else:
            flush()
            current_title = heading.group(2).strip()
            current_lines = []
        seen_heading = True

    flush()
    return changelog


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ChangelogError(
            f"Changelog not found: {path}",
            fix_hint="Set the changelog-file input or add CHANGELOG.md to the repository root",
        ) from None
    except (OSError, UnicodeDecodeError) as e:
        raise ChangelogError(f"Cannot read changelog {path}", details=str(e)) from e


def read_changelog(path: Path) -> Changelog:
    """Read and parse a changelog file.

    Raises:
        ChangelogError: If the file cannot be read
    """
    return parse_changelog(_read_text(path))


def extract_latest_entry(path: Path, rewrite: bool = True) -> ChangelogEntry:
    """Return the newest version entry of a changelog file.

    Args:
        path: Changelog file
        rewrite: Insert the synthetic heading first when the document has
            no top-level title (modifies the file)

    Returns:
        The first entry, which has a version

    Raises:
        ChangelogError: If there are no entries or the newest has no version
    """
    if rewrite and not has_title(_read_text(path)):
        add_synthetic_heading(path)

    latest = read_changelog(path).latest
    if latest is None:
        raise ChangelogError(
            f"No version entries found in {path}",
            details="Expected at least one '# <version>' or '## <version>' section",
            fix_hint="Add a section like '## 1.0.0' describing the release",
        )
    if not latest.version:
        raise ChangelogError(
            f"Newest changelog section has no version: '{latest.title}'",
            fix_hint="Rename the section to the version being released, e.g. '## 1.2.0'",
        )
    return latest
