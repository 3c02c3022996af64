"""Build repository-scoped clients with the right credentials."""

from __future__ import annotations

import logging

from repo_automation_bots.config import BotSettings
from repo_automation_bots.github.client import GitHubAppAuth, GitHubClient

logger = logging.getLogger(__name__)


class ClientFactory:
    """Create a :class:`GitHubClient` for a repository.

    With app credentials the client authenticates as the installation (taken from
    the webhook payload, or looked up for the repository); otherwise the static
    token from settings is used for every repository.
    """

    def __init__(self, settings: BotSettings, *, app_auth: GitHubAppAuth | None = None) -> None:
        self._settings = settings
        self._app_auth = app_auth
        if self._app_auth is None and settings.uses_app_auth:
            self._app_auth = GitHubAppAuth(
                app_id=settings.github_app_id,
                private_key=settings.github_app_private_key,
                base_url=settings.github_base_url,
            )

    @property
    def base_url(self) -> str:
        return self._settings.github_base_url

    def token_for(self, repository: str, *, installation_id: int | None = None) -> str:
        if self._app_auth is None:
            return self._settings.github_token
        if installation_id is not None:
            return self._app_auth.installation_token(installation_id)
        return self._app_auth.installation_token_for_repo(repository)

    def __call__(self, repository: str, *, installation_id: int | None = None) -> GitHubClient:
        token = self.token_for(repository, installation_id=installation_id)
        logger.debug(
            "Creating GitHub client",
            extra={"repo": repository, "installation_id": installation_id},
        )
        return GitHubClient(
            token=token, repository=repository, base_url=self._settings.github_base_url
        )
