"""GitHub access for creating releases."""

from pub_release.github.auth import resolve_client
from pub_release.github.releases import GitHubClient, Repository

__all__ = ["GitHubClient", "Repository", "resolve_client"]
