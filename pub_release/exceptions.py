"""Custom exception hierarchy for the pub release action.

Exit codes follow Unix conventions:
- 1: General error
- 2: Configuration or authentication error
- 3: Validation error (changelog, release gate, pub score)
- 5: Publish error
- 7: Network error
- 9: Toolchain error
"""


class ReleaseError(Exception):
    """Base exception for all release errors.

    All release-related exceptions inherit from this class.
    Each subclass defines an exit_code for CLI error reporting.
    """

    exit_code: int = 1

    def __init__(
        self,
        message: str,
        details: str | None = None,
        fix_hint: str | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Brief error message
            details: Detailed explanation of what went wrong
            fix_hint: Suggested command or action to fix the issue
        """
        super().__init__(message)
        self.message = message
        self.details = details
        self.fix_hint = fix_hint

    def __str__(self) -> str:
        parts = [self.message]
        if self.details:
            parts.append(f"\nDetails: {self.details}")
        if self.fix_hint:
            parts.append(f"\nFix: {self.fix_hint}")
        return "".join(parts)


class ConfigurationError(ReleaseError):
    """Action input errors.

    Raised when:
    - A required input is missing
    - A numeric input cannot be parsed
    - action.yml is missing or has invalid syntax
    """

    exit_code = 2


class AuthenticationError(ReleaseError):
    """GitHub authentication failures.

    Raised when:
    - No token is available in the runner environment
    - GITHUB_REPOSITORY is missing or malformed
    - The gh CLI rejects the token
    """

    exit_code = 2


class ValidationError(ReleaseError):
    """Pre-release validation failures.

    Raised when:
    - Version format is invalid
    - The release gate blocks the release
    """

    exit_code = 3


class ChangelogError(ValidationError):
    """Changelog read or parse failures.

    Raised when:
    - The changelog file does not exist
    - The changelog has no version entries
    """


class PubScoreError(ValidationError):
    """Pana scoring failures.

    Raised when:
    - pana output has no parseable JSON line
    - The report is missing the granted points
    """


class PublishError(ReleaseError):
    """Publishing failures.

    Raised when:
    - GitHub release creation fails
    - flutter pub publish fails
    - Writing pub credentials fails
    """

    exit_code = 5


class NetworkError(ReleaseError):
    """Network/API failures.

    Raised when:
    - HTTP requests fail
    - Downloads time out
    """

    exit_code = 7


class ToolchainError(ReleaseError):
    """Flutter SDK provisioning failures.

    Raised when:
    - The SDK archive cannot be extracted
    - The tool cache cannot be written
    """

    exit_code = 9


class UnsupportedPlatformError(ToolchainError):
    """Host operating system has no pinned SDK archive."""
