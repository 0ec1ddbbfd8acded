"""pub.dev publisher.

Runs the pre-publish hook, the optional pub score check, ``flutter pub
publish --force`` and the post-publish hook, in that order.
"""

from collections.abc import Callable
from pathlib import Path
from typing import ClassVar

import yaml

from pub_release.publishers.base import (
    PublishContext,
    Publisher,
    PublishResult,
)
from pub_release.utils.shell import run, run_hook

# Importing the package registers the publish validators
from pub_release.validators import ReleaseContext, ValidationResult, ValidatorRegistry

PUB_URL = "https://pub.dev"


def get_package_name(workspace: Path) -> str | None:
    """Read the package name from pubspec.yaml.

    Returns:
        Package name, or None if pubspec.yaml is missing or has no name
    """
    try:
        with open(workspace / "pubspec.yaml", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError):
        return None
    if isinstance(data, dict) and isinstance(data.get("name"), str):
        return data["name"]
    return None


class PubPublisher(Publisher):
    """Publisher for pub.dev."""

    name: ClassVar[str] = "pub"
    display_name: ClassVar[str] = "pub.dev"
    registry_name: ClassVar[str] = "pub.dev"

    def __init__(self, on_check: Callable[[ValidationResult], None] | None = None) -> None:
        """Initialize the publisher.

        Args:
            on_check: Called with each pre-publish check result, for reporting
        """
        self.on_check = on_check

    def run_checks(self, context: PublishContext) -> list[ValidationResult]:
        """Run the publish validators (the pub score check when enabled)."""
        release_context = ReleaseContext(
            workspace=context.workspace,
            inputs=context.inputs,
            version=context.version,
            env=context.env,
            timeout=context.timeout,
        )
        results = ValidatorRegistry.run_category("publish", release_context)
        if self.on_check is not None:
            for result in results:
                self.on_check(result)
        return results

    def publish(self, context: PublishContext) -> PublishResult:
        """Publish the package between the publish hooks.

        A fatal check result stops before anything is uploaded; advisory
        results are reported and publishing continues.

        Raises:
            ShellError: If a hook or flutter command exits non-zero
        """
        run_hook(
            context.inputs.pre_publish_script,
            cwd=context.workspace,
            timeout=context.timeout,
            env=context.env,
        )

        for result in self.run_checks(context):
            if result.is_fatal:
                return PublishResult.failed(result.message, details=result.details)

        run(
            ["flutter", "pub", "publish", "--force"],
            cwd=context.workspace,
            capture=False,
            timeout=context.timeout,
            env=context.env,
        )

        run_hook(
            context.inputs.post_publish_script,
            cwd=context.workspace,
            timeout=context.timeout,
            env=context.env,
        )

        package = get_package_name(context.workspace)
        package_url = f"{PUB_URL}/packages/{package}/versions/{context.version}" if package else None
        return PublishResult.success(
            f"Published {package or 'package'} {context.version} to pub.dev",
            registry_url=PUB_URL,
            package_url=package_url,
            version=context.version,
        )
