"""Run a configured release strategy.

The push handler takes the runner as an argument, so tests pass a recording
callable instead of shelling out.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from typing import Protocol

from repo_automation_bots.errors import UpstreamAPIError
from repo_automation_bots.release_please.strategy import ReleasePR

logger = logging.getLogger(__name__)


class ReleaseRunner(Protocol):
    """Produce or update the release pull request described by ``pr``."""

    def __call__(self, pr: ReleasePR) -> None: ...


class CliReleaseRunner:
    """Invoke the release-please CLI as a subprocess.

    The token is handed over in the ``GITHUB_TOKEN`` environment variable so it
    never appears in process listings.
    """

    def __init__(self, *, command: str, token: str, timeout_seconds: float = 300.0) -> None:
        self._command = shlex.split(command)
        if not self._command:
            raise ValueError("release-please command is required")
        self._token = token
        self._timeout_seconds = timeout_seconds

    def argv(self, pr: ReleasePR) -> list[str]:
        return [*self._command, *pr.command_args()]

    def __call__(self, pr: ReleasePR) -> None:
        argv = self.argv(pr)
        env = {**os.environ, "GITHUB_TOKEN": self._token}
        logger.info(
            "Running release-please",
            extra={"repo": pr.repo_url, "release_type": pr.release_type.value},
        )
        try:
            completed = subprocess.run(
                argv,
                env=env,
                capture_output=True,
                text=True,
                timeout=self._timeout_seconds,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise UpstreamAPIError(
                f"release-please could not be run: {e}", repository=pr.repo_url
            ) from e

        if completed.returncode != 0:
            raise UpstreamAPIError(
                f"release-please exited with {completed.returncode}: {completed.stderr.strip()}",
                repository=pr.repo_url,
            )
        logger.debug(
            "release-please finished", extra={"repo": pr.repo_url, "stdout": completed.stdout}
        )
