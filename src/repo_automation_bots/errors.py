"""Error types and handler outcomes shared by both bots.

Hierarchy:
    BotError
    ├── ConfigurationError  (missing/malformed release-please.yml, unknown release type)
    └── UpstreamAPIError    (GitHub API or release tool failure)

Ignoring an event is not an error; handlers return a :class:`HandlerResult` with
``status="ignored"`` instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


class BotError(Exception):
    """Base class for errors raised by the bots."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(BotError):
    """Repository configuration is invalid or names an unknown release type."""


class UpstreamAPIError(BotError):
    """A call to GitHub (or to the release tool) failed."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        repository: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.repository = repository


HandlerStatus = Literal["dispatched", "ignored", "reconciled"]


@dataclass(frozen=True, slots=True)
class HandlerResult:
    status: HandlerStatus
    message: str
    details: dict[str, object] | None = None

    def to_json(self) -> dict[str, object]:
        out: dict[str, object] = {"status": self.status, "message": self.message}
        if self.details:
            out["details"] = self.details
        return out
