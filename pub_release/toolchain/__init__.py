"""Flutter SDK provisioning."""

from pub_release.toolchain.cache import ToolCache
from pub_release.toolchain.flutter import (
    FLUTTER_DOWNLOAD_URLS,
    FLUTTER_VERSION,
    ToolchainInstall,
    provision_flutter,
)

__all__ = [
    "FLUTTER_DOWNLOAD_URLS",
    "FLUTTER_VERSION",
    "ToolCache",
    "ToolchainInstall",
    "provision_flutter",
]
