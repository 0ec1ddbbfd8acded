"""GitHub Releases API access through the gh CLI.

All calls go through ``gh api`` with the token passed as GH_TOKEN, so the
action needs no HTTP client of its own and inherits gh's auth handling.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pub_release.exceptions import AuthenticationError, NetworkError, PublishError
from pub_release.utils.shell import ShellError, run
from pub_release.utils.version import remove_tag_prefix


@dataclass(frozen=True)
class Repository:
    """A GitHub repository identified by owner and name."""

    owner: str
    repo: str

    @classmethod
    def from_slug(cls, slug: str) -> "Repository":
        """Parse an ``owner/repo`` slug as found in GITHUB_REPOSITORY.

        Raises:
            AuthenticationError: If the slug is not of the form owner/repo
        """
        owner, sep, repo = slug.strip().partition("/")
        if not sep or not owner or not repo or "/" in repo:
            raise AuthenticationError(
                f"Invalid repository slug: {slug!r}",
                details="Expected the form owner/repo",
                fix_hint="Run inside GitHub Actions or set GITHUB_REPOSITORY",
            )
        return cls(owner=owner, repo=repo)

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def url(self) -> str:
        return f"https://github.com/{self.slug}"

    def __str__(self) -> str:
        return self.slug


class GitHubClient:
    """Authenticated access to one repository's releases."""

    def __init__(
        self,
        repository: Repository,
        token: str,
        sha: str = "",
        timeout: int = 60,
        cwd: Path | None = None,
    ) -> None:
        self.repository = repository
        self.sha = sha
        self.timeout = timeout
        self.cwd = cwd
        self._token = token

    def _api(
        self,
        endpoint: str,
        method: str = "GET",
        fields: dict[str, Any] | None = None,
    ) -> Any:
        """Call the REST API and return the decoded JSON response.

        String fields are sent raw (``-f``); booleans and integers are sent
        typed (``-F``) so they arrive as JSON booleans and numbers.

        Raises:
            ShellError: If gh exits non-zero
            NetworkError: If the response is not JSON
        """
        cmd = [
            "gh",
            "api",
            "--method",
            method,
            "-H",
            "Accept: application/vnd.github+json",
            endpoint,
        ]
        for key, value in (fields or {}).items():
            if isinstance(value, bool):
                cmd.extend(["-F", f"{key}={'true' if value else 'false'}"])
            elif isinstance(value, int):
                cmd.extend(["-F", f"{key}={value}"])
            else:
                cmd.extend(["-f", f"{key}={value}"])

        result = run(
            cmd,
            cwd=self.cwd,
            capture=True,
            check=True,
            timeout=self.timeout,
            env={"GH_TOKEN": self._token},
        )
        try:
            return json.loads(result.stdout) if result.stdout.strip() else None
        except json.JSONDecodeError as e:
            raise NetworkError(
                f"Unexpected response from GitHub API: {endpoint}",
                details=result.stdout[:500],
            ) from e

    def get_repository(self) -> dict[str, Any]:
        """Fetch repository metadata; used to confirm the token works.

        Raises:
            AuthenticationError: If the repository cannot be read
        """
        try:
            data = self._api(f"repos/{self.repository.slug}")
        except ShellError as e:
            raise AuthenticationError(
                f"Cannot access {self.repository} with the provided token",
                details=e.stderr or str(e),
                fix_hint="Grant the workflow 'contents: write' permission",
            ) from e
        return data if isinstance(data, dict) else {}

    def list_releases(self, per_page: int = 30) -> list[dict[str, Any]]:
        """List releases, newest first.

        Raises:
            NetworkError: If the API call fails
        """
        try:
            data = self._api(f"repos/{self.repository.slug}/releases?per_page={per_page}")
        except ShellError as e:
            raise NetworkError(
                f"Failed to list releases for {self.repository}",
                details=e.stderr or str(e),
            ) from e
        return data if isinstance(data, list) else []

    def latest_release_tag(self) -> str | None:
        """Tag name of the most recent release, or None if there are none."""
        releases = self.list_releases(per_page=1)
        if not releases:
            return None
        return releases[0].get("tag_name")

    def latest_release_version(self) -> str | None:
        """Version of the most recent release (tag without the 'v' prefix)."""
        tag = self.latest_release_tag()
        if tag is None:
            return None
        return remove_tag_prefix(tag)

    def create_release(
        self,
        tag_name: str,
        body: str,
        draft: bool = False,
        prerelease: bool = False,
        target_commitish: str | None = None,
        name: str | None = None,
    ) -> dict[str, Any]:
        """Create a release (and its tag) on GitHub.

        Args:
            tag_name: Tag to create, e.g. v1.2.0
            body: Release notes
            draft: Create as draft
            prerelease: Mark as pre-release
            target_commitish: Commit to tag (defaults to the client's sha)
            name: Release title (defaults to the tag name)

        Returns:
            The created release as returned by the API

        Raises:
            PublishError: If the release cannot be created
        """
        fields: dict[str, Any] = {
            "tag_name": tag_name,
            "name": name or tag_name,
            "body": body,
            "draft": draft,
            "prerelease": prerelease,
        }
        target = target_commitish or self.sha
        if target:
            fields["target_commitish"] = target

        try:
            data = self._api(
                f"repos/{self.repository.slug}/releases",
                method="POST",
                fields=fields,
            )
        except ShellError as e:
            raise PublishError(
                f"Failed to create GitHub release {tag_name}",
                details=e.stderr or e.stdout,
                fix_hint="Check that the tag does not already exist",
            ) from e
        return data if isinstance(data, dict) else {}
