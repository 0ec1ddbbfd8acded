"""pub.dev credentials for non-interactive publishing.

``flutter pub publish`` reads OAuth credentials from the pub cache. Writing
them there up front lets the publish step run without a browser login.
"""

import contextlib
import os
import tempfile
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from pub_release.config.models import ActionInputs, RunnerEnvironment
from pub_release.exceptions import PublishError
from pub_release.utils.platform import Platform

PUB_SCOPES = [
    "https://www.googleapis.com/auth/userinfo.email",
    "openid",
]

CREDENTIALS_FILE = "credentials.json"


class PubCredentials(BaseModel):
    """OAuth token bundle in the format pub stores in credentials.json."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    access_token: str = Field(alias="accessToken")
    refresh_token: str = Field(alias="refreshToken")
    id_token: str = Field(alias="idToken")
    token_endpoint: str = Field(alias="tokenEndpoint")
    scopes: list[str] = Field(default_factory=lambda: list(PUB_SCOPES))
    expiration: str = Field(alias="expiration")

    @classmethod
    def from_inputs(cls, inputs: ActionInputs) -> "PubCredentials":
        return cls(
            access_token=inputs.access_token,
            refresh_token=inputs.refresh_token,
            id_token=inputs.id_token,
            token_endpoint=inputs.token_endpoint,
            expiration=inputs.expiration,
        )

    def to_json(self) -> str:
        """Serialize with pub's camelCase keys."""
        return self.model_dump_json(by_alias=True)


def credentials_path(platform: Platform, runner: RunnerEnvironment) -> Path:
    """Location of pub's credentials file on this platform.

    Raises:
        PublishError: If APPDATA is not set on Windows
    """
    if platform.is_windows:
        if runner.appdata is None:
            raise PublishError(
                "APPDATA is not set",
                details="pub stores credentials under %APPDATA%/Pub/Cache on Windows",
            )
        return runner.appdata / "Pub" / "Cache" / CREDENTIALS_FILE
    return runner.home / ".pub-cache" / CREDENTIALS_FILE


def write_credentials(credentials: PubCredentials, path: Path) -> Path:
    """Write credentials atomically, replacing any existing file.

    The JSON goes to a temporary file in the same directory first and is
    renamed over the target, so readers never see a partial file.

    Args:
        credentials: Credentials to write
        path: Destination credentials.json

    Returns:
        The written path

    Raises:
        PublishError: If the file cannot be written
    """
    tmp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=".credentials-",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(credentials.to_json())
            tmp.flush()
            os.fsync(tmp.fileno())
        if os.name == "posix":
            os.chmod(tmp_name, 0o600)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
        raise PublishError(f"Failed to write pub credentials to {path}", details=str(e)) from e
    return path


def setup_pub_auth(
    inputs: ActionInputs,
    runner: RunnerEnvironment,
    platform: Platform,
) -> Path:
    """Write the credentials from the action inputs to pub's cache.

    Returns:
        Path of the written credentials file
    """
    return write_credentials(
        PubCredentials.from_inputs(inputs),
        credentials_path(platform, runner),
    )
