"""Test configuration and fixtures."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any
from unittest.mock import Mock

import pytest

from repo_automation_bots.config import BotSettings
from repo_automation_bots.github.client import GitHubClient
from repo_automation_bots.release_please.strategy import ReleasePR


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep the developer's environment and `.env` out of settings."""
    for name in (
        "GITHUB_TOKEN",
        "GITHUB_APP_ID",
        "GITHUB_APP_PRIVATE_KEY",
        "GITHUB_BASE_URL",
        "LOG_LEVEL",
        "LABEL_SYNC_ON_STARTUP",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Iterator[None]:
    """CLI tests call `configure_logging`, which replaces root handlers."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def settings() -> BotSettings:
    """Provide token-authenticated settings."""
    return BotSettings(GITHUB_TOKEN="test-token")


@pytest.fixture
def github() -> Mock:
    """Provide a mocked repository client."""
    client = Mock(spec=GitHubClient)
    client.repository = "chingor13/google-auth-library-java"
    client.list_labels.return_value = []
    return client


class RecordingRunner:
    """Release runner that records every strategy it is asked to run."""

    def __init__(self) -> None:
        self.calls: list[ReleasePR] = []

    def __call__(self, pr: ReleasePR) -> None:
        self.calls.append(pr)


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


def _push_payload(ref: str) -> dict[str, Any]:
    return {
        "ref": ref,
        "before": "0000000000000000000000000000000000000000",
        "after": "d5ad5bf2f1a7f3ae2a86d1b6c5ec2b6d34f7b3b1",
        "repository": {
            "id": 188_573_420,
            "name": "google-auth-library-java",
            "full_name": "chingor13/google-auth-library-java",
            "owner": {"name": "chingor13", "email": "chingor@google.com"},
            "default_branch": "master",
            "language": "Java",
        },
        "installation": {"id": 1_109_232},
    }


@pytest.fixture
def push_to_master() -> dict[str, Any]:
    return _push_payload("refs/heads/master")


@pytest.fixture
def push_to_non_master() -> dict[str, Any]:
    return _push_payload("refs/heads/feature-branch")
