"""release-please bot: open or update release pull requests on pushes to the primary branch."""

from repo_automation_bots.release_please.config import (
    CONFIG_PATH,
    ReleasePleaseConfig,
    load_repo_config,
    parse_repo_config,
)
from repo_automation_bots.release_please.handler import (
    PushEvent,
    branch_from_ref,
    dispatch,
    handle_push,
    should_trigger,
)
from repo_automation_bots.release_please.runner import CliReleaseRunner, ReleaseRunner
from repo_automation_bots.release_please.strategy import (
    DEFAULT_RELEASE_LABELS,
    ReleasePR,
    ReleaseType,
    release_type_from_language,
)

__all__ = [
    "CONFIG_PATH",
    "DEFAULT_RELEASE_LABELS",
    "CliReleaseRunner",
    "PushEvent",
    "ReleasePR",
    "ReleasePleaseConfig",
    "ReleaseRunner",
    "ReleaseType",
    "branch_from_ref",
    "dispatch",
    "handle_push",
    "load_repo_config",
    "parse_repo_config",
    "release_type_from_language",
    "should_trigger",
]
