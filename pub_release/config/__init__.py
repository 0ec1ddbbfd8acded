"""Configuration management for the pub release action."""

from pub_release.config.loader import get_input, load_action_manifest, load_inputs
from pub_release.config.models import ActionInputs, RunnerEnvironment, TimeoutsConfig

__all__ = [
    "ActionInputs",
    "RunnerEnvironment",
    "TimeoutsConfig",
    "get_input",
    "load_action_manifest",
    "load_inputs",
]
