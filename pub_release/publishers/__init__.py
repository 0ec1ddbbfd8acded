"""Publisher modules for GitHub and pub.dev."""

from pub_release.publishers.base import (
    PublishContext,
    Publisher,
    PublishResult,
    PublishStatus,
)
from pub_release.publishers.github import GitHubPublisher
from pub_release.publishers.pub import PubPublisher

__all__ = [
    "GitHubPublisher",
    "PubPublisher",
    "PublishContext",
    "Publisher",
    "PublishResult",
    "PublishStatus",
]
