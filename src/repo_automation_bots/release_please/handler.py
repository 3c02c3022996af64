"""Push handling for the release-please bot.

Flow for one push delivery:

1. load `.github/release-please.yml` (one fetch, always before the gate)
2. gate on the configured primary branch
3. dispatch exactly one release strategy to the runner
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from repo_automation_bots.errors import BotError, HandlerResult, UpstreamAPIError
from repo_automation_bots.github.client import GitHubClient
from repo_automation_bots.release_please.config import ReleasePleaseConfig, load_repo_config
from repo_automation_bots.release_please.runner import ReleaseRunner
from repo_automation_bots.release_please.strategy import (
    DEFAULT_RELEASE_LABELS,
    ReleasePR,
    release_type_from_language,
)

logger = logging.getLogger(__name__)

BRANCH_REF_PREFIX = "refs/heads/"


@dataclass(frozen=True, slots=True)
class PushEvent:
    owner: str
    repo: str
    branch: str
    default_branch: str
    language: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @staticmethod
    def from_payload(payload: dict[str, Any]) -> PushEvent | None:
        """Build an event from a push webhook payload.

        Returns None when the ref is not a branch (tag pushes).
        """

        ref = payload.get("ref")
        repository = payload.get("repository")
        if not isinstance(ref, str) or not isinstance(repository, dict):
            raise ValueError("push payload requires 'ref' and 'repository'")
        if not ref.startswith(BRANCH_REF_PREFIX):
            return None

        owner = repository.get("owner")
        owner_login = ""
        if isinstance(owner, dict):
            # Push payloads carry `name`; other events carry `login`.
            owner_login = str(owner.get("login") or owner.get("name") or "")
        name = str(repository.get("name") or "")
        if not owner_login or not name:
            raise ValueError("push payload repository is missing owner or name")

        language = repository.get("language")
        return PushEvent(
            owner=owner_login,
            repo=name,
            branch=branch_from_ref(ref),
            default_branch=str(repository.get("default_branch") or ""),
            language=language if isinstance(language, str) else None,
        )


def branch_from_ref(ref: str) -> str:
    return ref[len(BRANCH_REF_PREFIX) :] if ref.startswith(BRANCH_REF_PREFIX) else ref


def should_trigger(push_branch: str, primary_branch: str) -> bool:
    """True iff the push targets the configured primary branch (exact match)."""

    return push_branch == primary_branch


def dispatch(
    config: ReleasePleaseConfig,
    event: PushEvent,
    *,
    runner: ReleaseRunner,
    api_url: str = "https://api.github.com",
) -> ReleasePR:
    """Configure the release strategy for this push and run it once."""

    release_type = config.release_type or release_type_from_language(event.language)
    pr = ReleasePR(
        release_type=release_type,
        repo_url=event.full_name,
        package_name=config.package_name or event.repo,
        labels=list(config.release_labels or DEFAULT_RELEASE_LABELS),
        bump_minor_pre_major=config.bump_minor_pre_major,
        api_url=api_url,
    )

    try:
        runner(pr)
    except BotError:
        raise
    except Exception as e:
        raise UpstreamAPIError(
            f"release strategy {release_type.value} failed: {e}", repository=event.full_name
        ) from e
    return pr


def handle_push(
    payload: dict[str, Any],
    *,
    github: GitHubClient,
    runner: ReleaseRunner,
    api_url: str = "https://api.github.com",
) -> HandlerResult:
    """Handle one push delivery.

    ConfigurationError and UpstreamAPIError propagate to the caller; every
    non-error reason to skip returns an ``ignored`` result.
    """

    event = PushEvent.from_payload(payload)
    if event is None:
        logger.info(
            "Ignoring push: not a branch",
            extra={"ref": payload.get("ref"), "outcome": "ignored"},
        )
        return HandlerResult(status="ignored", message="ref is not a branch")

    config = load_repo_config(github)
    if config is None:
        return HandlerResult(
            status="ignored",
            message="release-please not configured",
            details={"repo": event.full_name},
        )

    if not should_trigger(event.branch, config.primary_branch):
        logger.info(
            "Ignoring push: not the primary branch",
            extra={
                "repo": event.full_name,
                "branch": event.branch,
                "primary_branch": config.primary_branch,
                "outcome": "ignored",
            },
        )
        return HandlerResult(
            status="ignored",
            message="not the primary branch",
            details={"branch": event.branch, "primary_branch": config.primary_branch},
        )

    pr = dispatch(config, event, runner=runner, api_url=api_url)
    logger.info(
        "Dispatched release strategy",
        extra={
            "repo": event.full_name,
            "release_type": pr.release_type.value,
            "labels": pr.labels,
            "outcome": "dispatched",
        },
    )
    return HandlerResult(
        status="dispatched",
        message=f"ran {pr.release_type.value}",
        details={
            "repo": event.full_name,
            "release_type": pr.release_type.value,
            "labels": pr.labels,
        },
    )
