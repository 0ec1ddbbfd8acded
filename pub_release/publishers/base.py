"""Common types for the two outward-facing steps of a release.

- GitHubPublisher creates the tagged GitHub release
- PubPublisher uploads the package to pub.dev

Each runs its own pre and post hooks around the upload.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from pub_release.config.models import ActionInputs


class PublishStatus(Enum):
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class PublishResult:
    """Outcome of a publish step.

    Attributes:
        status: SUCCESS or FAILED
        message: One-line summary
        registry_url: Repository or registry the release went to
        package_url: Link to the created release or package version
        version: Version that was published
        details: Why a FAILED step failed
    """

    status: PublishStatus
    message: str
    registry_url: str | None = None
    package_url: str | None = None
    version: str | None = None
    details: str | None = None

    @classmethod
    def success(
        cls,
        message: str,
        registry_url: str | None = None,
        package_url: str | None = None,
        version: str | None = None,
    ) -> "PublishResult":
        return cls(PublishStatus.SUCCESS, message, registry_url, package_url, version)

    @classmethod
    def failed(cls, message: str, details: str | None = None) -> "PublishResult":
        return cls(PublishStatus.FAILED, message, details=details)


@dataclass
class PublishContext:
    """What a publisher needs for one release.

    ``env`` carries overrides for child processes (FLUTTER_ROOT, PATH);
    hooks and flutter commands see it on top of the runner environment.
    """

    workspace: Path
    inputs: "ActionInputs"
    version: str
    tag_name: str
    release_notes: str
    env: dict[str, str] = field(default_factory=dict)
    timeout: int | None = 1800


class Publisher(ABC):
    """A release destination."""

    name: ClassVar[str]
    display_name: ClassVar[str]
    registry_name: ClassVar[str]

    @abstractmethod
    def publish(self, context: PublishContext) -> PublishResult:
        """Run the hooks and upload.

        Raises:
            ShellError: If a hook or command exits non-zero
        """
