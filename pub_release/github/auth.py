"""Resolve an authenticated GitHub client from the runner environment."""

from pub_release.config.models import RunnerEnvironment
from pub_release.exceptions import AuthenticationError
from pub_release.github.releases import GitHubClient, Repository
from pub_release.utils.shell import is_command_available


def resolve_client(runner: RunnerEnvironment, verify: bool = True) -> GitHubClient:
    """Build a GitHub client from ambient action credentials.

    The token comes from GITHUB_TOKEN, GH_TOKEN or the github-token input,
    the repository from GITHUB_REPOSITORY and the commit from GITHUB_SHA.

    Args:
        runner: Runner environment
        verify: Make one API call to confirm the token is accepted

    Returns:
        Authenticated GitHubClient

    Raises:
        AuthenticationError: If credentials are missing or rejected
    """
    if not is_command_available("gh"):
        raise AuthenticationError(
            "gh CLI not installed",
            details="GitHub CLI (gh) is required to talk to the Releases API",
            fix_hint="Use a GitHub-hosted runner or install https://cli.github.com",
        )

    if not runner.token:
        raise AuthenticationError(
            "No GitHub token found",
            details="Checked GITHUB_TOKEN, GH_TOKEN and INPUT_GITHUB_TOKEN",
            fix_hint="Add 'env: GITHUB_TOKEN: ${{ secrets.GITHUB_TOKEN }}' to the step",
        )

    if not runner.github_repository:
        raise AuthenticationError(
            "GITHUB_REPOSITORY is not set",
            fix_hint="Run inside GitHub Actions or export GITHUB_REPOSITORY=owner/repo",
        )

    client = GitHubClient(
        repository=Repository.from_slug(runner.github_repository),
        token=runner.token,
        sha=runner.github_sha,
        timeout=runner.timeouts.api,
        cwd=runner.github_workspace,
    )
    if verify:
        client.get_repository()
    return client
