"""Release a Flutter/Dart package from its changelog to GitHub and pub.dev."""

__version__ = "0.1.0"

from pub_release.exceptions import (
    AuthenticationError,
    ChangelogError,
    ConfigurationError,
    NetworkError,
    PublishError,
    PubScoreError,
    ReleaseError,
    ToolchainError,
    UnsupportedPlatformError,
    ValidationError,
)

__all__ = [
    "__version__",
    "ReleaseError",
    "ConfigurationError",
    "AuthenticationError",
    "ValidationError",
    "ChangelogError",
    "PubScoreError",
    "PublishError",
    "NetworkError",
    "ToolchainError",
    "UnsupportedPlatformError",
]
