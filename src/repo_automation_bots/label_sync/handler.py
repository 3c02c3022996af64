"""Repository event handling for the label-sync bot."""

from __future__ import annotations

import logging
from typing import Any

from repo_automation_bots.errors import HandlerResult
from repo_automation_bots.github.client import GitHubClient
from repo_automation_bots.label_sync.reconciler import reconcile_labels

logger = logging.getLogger(__name__)


def repository_full_name(payload: dict[str, Any]) -> str:
    repository = payload.get("repository")
    if not isinstance(repository, dict):
        raise ValueError("repository payload requires 'repository'")
    owner = repository.get("owner")
    login = owner.get("login") if isinstance(owner, dict) else None
    name = repository.get("name")
    if not isinstance(login, str) or not login or not isinstance(name, str) or not name:
        raise ValueError("repository payload is missing owner.login or name")
    return f"{login}/{name}"


def handle_repository_event(
    payload: dict[str, Any], *, github: GitHubClient, max_workers: int = 8
) -> HandlerResult:
    """Sync labels into a newly created repository; other actions are ignored."""

    action = payload.get("action")
    if action != "created":
        logger.info(
            "Ignoring repository event",
            extra={"action": action, "repo": github.repository, "outcome": "ignored"},
        )
        return HandlerResult(status="ignored", message=f"repository action {action!r} not handled")

    report = reconcile_labels(github, max_workers=max_workers)
    return HandlerResult(
        status="reconciled",
        message="labels reconciled",
        details={
            "repo": report.repository,
            **report.counts(),
            "failed_labels": [r.label for r in report.failures],
        },
    )
