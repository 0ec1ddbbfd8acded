"""Pydantic v2 models for action inputs and the runner environment.

These models provide:
- Type-safe input loading
- Validation of required and numeric inputs
- Default values
- Environment variable loading for the runner context
"""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

TRUE_LITERAL = "TRUE"


def parse_flag(value: Any) -> bool:
    """Interpret an action input as a boolean flag.

    Only a case-insensitive ``true`` is truthy; any other value, including
    an empty or missing input, is False.
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().upper() == TRUE_LITERAL


def parse_points(value: Any) -> int | None:
    """Parse a pub points threshold, returning None when it is not an integer."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


class ActionInputs(BaseModel):
    """Validated action inputs.

    Field aliases are the input names declared in action.yml, so validation
    errors name the inputs the workflow author actually wrote.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    previous_version: str = Field(
        alias="previous-version",
        description="Version of the last release (tag without the 'v' prefix)",
    )
    changelog_file: Path = Field(
        alias="changelog-file",
        description="Path to the changelog to read the new version from",
    )
    is_draft: bool = Field(default=False, alias="is-draft")
    pre_release_script: str = Field(default="", alias="pre-release-script")
    post_release_script: str = Field(default="", alias="post-release-script")
    pre_publish_script: str = Field(default="", alias="pre-publish-script")
    post_publish_script: str = Field(default="", alias="post-publish-script")
    should_run_pub_score_test: bool = Field(
        default=False,
        alias="should-run-pub-score-test",
    )
    pub_score_min_points: int | None = Field(
        default=None,
        alias="pub-score-min-points",
        description="Minimum pana points required when the score test runs",
    )
    fail_on_low_pub_score: bool = Field(
        default=False,
        alias="fail-on-low-pub-score",
        description="Abort the publish when the pub score is below the minimum",
    )
    access_token: str = Field(alias="access-token", min_length=1)
    refresh_token: str = Field(alias="refresh-token", min_length=1)
    id_token: str = Field(alias="id-token", min_length=1)
    token_endpoint: str = Field(alias="token-endpoint", min_length=1)
    expiration: str = Field(alias="expiration", min_length=1)

    @field_validator(
        "is_draft",
        "should_run_pub_score_test",
        "fail_on_low_pub_score",
        mode="before",
    )
    @classmethod
    def validate_flag(cls, v: Any) -> bool:
        return parse_flag(v)

    @field_validator("pub_score_min_points", mode="before")
    @classmethod
    def validate_points(cls, v: Any) -> int | None:
        return parse_points(v)

    @model_validator(mode="before")
    @classmethod
    def check_pub_score_threshold(cls, data: Any) -> Any:
        """Reject a score test that has no usable threshold."""
        if not isinstance(data, dict):
            return data
        flag = data.get("should-run-pub-score-test", data.get("should_run_pub_score_test"))
        raw = data.get("pub-score-min-points", data.get("pub_score_min_points"))
        if parse_flag(flag) and parse_points(raw) is None:
            shown = f" (got {raw!r})" if raw not in (None, "") else ""
            raise ValueError(
                "should-run-pub-score-test was set to true but no valid integer "
                f"value for pub-score-min-points was provided{shown}"
            )
        return data


class TimeoutsConfig(BaseSettings):
    """Timeouts in seconds.

    Override with PUB_RELEASE_TIMEOUT_<NAME>, e.g. PUB_RELEASE_TIMEOUT_COMMAND=1200.
    """

    command: int = Field(default=1800, ge=10, description="Hook and flutter command timeout")
    download: int = Field(default=600, ge=10, description="SDK archive download timeout")
    api: int = Field(default=60, ge=5, description="GitHub API call timeout")

    model_config = SettingsConfigDict(env_prefix="PUB_RELEASE_TIMEOUT_", env_ignore_empty=True)


class RunnerEnvironment(BaseSettings):
    """Ambient environment provided by the GitHub Actions runner.

    Every field is read from the environment variable of the same name
    (case-insensitive), e.g. GITHUB_WORKSPACE or RUNNER_TOOL_CACHE.
    """

    github_workspace: Path = Field(default_factory=Path.cwd)
    github_repository: str = ""
    github_sha: str = ""
    github_token: str = ""
    gh_token: str = ""
    input_github_token: str = ""
    github_actions: bool = False
    github_env: Path | None = None
    github_path: Path | None = None
    home: Path = Field(default_factory=Path.home)
    appdata: Path | None = None
    runner_tool_cache: Path | None = None
    runner_temp: Path | None = None
    timeouts: TimeoutsConfig = Field(default_factory=TimeoutsConfig)

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )

    @property
    def token(self) -> str:
        """First available GitHub token, or an empty string."""
        return self.github_token or self.gh_token or self.input_github_token

    @property
    def tool_cache_dir(self) -> Path:
        """Root of the runner tool cache."""
        if self.runner_tool_cache:
            return self.runner_tool_cache
        return self.home / ".pub-release" / "tool-cache"

    @property
    def temp_dir(self) -> Path:
        """Scratch directory for downloads."""
        if self.runner_temp:
            return self.runner_temp
        return self.home / ".pub-release" / "tmp"

    @property
    def default_changelog(self) -> Path:
        return self.github_workspace / "CHANGELOG.md"
