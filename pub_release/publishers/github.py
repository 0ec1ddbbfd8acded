"""GitHub Releases publisher.

Runs the pre-release hook, creates a tagged release for the current commit
through the Releases API, then runs the post-release hook.

Features:
- Tags the release as v<version>
- Draft flag from the is-draft input
- Pre-release flag for versions containing a hyphen (e.g. 2.0.0-beta)
"""

from typing import ClassVar

from pub_release.github.releases import GitHubClient
from pub_release.publishers.base import (
    PublishContext,
    Publisher,
    PublishResult,
)
from pub_release.utils.shell import run_hook
from pub_release.utils.version import is_prerelease


class GitHubPublisher(Publisher):
    """Publisher for GitHub Releases."""

    name: ClassVar[str] = "github"
    display_name: ClassVar[str] = "GitHub Releases"
    registry_name: ClassVar[str] = "github.com"

    def __init__(self, client: GitHubClient) -> None:
        self.client = client

    def publish(self, context: PublishContext) -> PublishResult:
        """Create the GitHub release between the release hooks.

        Raises:
            ShellError: If a hook exits non-zero
            PublishError: If the release cannot be created
        """
        run_hook(
            context.inputs.pre_release_script,
            cwd=context.workspace,
            timeout=context.timeout,
            env=context.env,
        )

        release = self.client.create_release(
            tag_name=context.tag_name,
            body=context.release_notes,
            draft=context.inputs.is_draft,
            prerelease=is_prerelease(context.version),
        )

        run_hook(
            context.inputs.post_release_script,
            cwd=context.workspace,
            timeout=context.timeout,
            env=context.env,
        )

        repo_url = self.client.repository.url
        return PublishResult.success(
            f"Created GitHub release {context.tag_name}",
            registry_url=repo_url,
            package_url=release.get("html_url") or f"{repo_url}/releases/tag/{context.tag_name}",
            version=context.version,
        )
