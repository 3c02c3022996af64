"""Process-level settings for the bots.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

Per-repository release configuration lives in `.github/release-please.yml` and is
handled by :mod:`repo_automation_bots.release_please.config`, not here.
"""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BotSettings(BaseSettings):
    """Settings for the webhook server and CLI.

    Authentication is either a static token (``GITHUB_TOKEN``) or a GitHub App
    (``GITHUB_APP_ID`` + ``GITHUB_APP_PRIVATE_KEY``). When both are present the app
    wins for webhook-driven work because it can act on any installation.

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `BotSettings(_env_file=path_to_env)`.
    """

    github_token: str = Field(
        default="",
        validation_alias="GITHUB_TOKEN",
        description="Static GitHub token used when no app credentials are configured",
    )
    github_app_id: str = Field(default="", validation_alias="GITHUB_APP_ID")
    github_app_private_key: str = Field(
        default="",
        validation_alias="GITHUB_APP_PRIVATE_KEY",
        description="PEM-encoded private key of the GitHub App",
    )
    github_base_url: str = Field(
        default="https://api.github.com",
        validation_alias="GITHUB_BASE_URL",
        description="GitHub API base URL (useful for GitHub Enterprise)",
    )

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    release_please_command: str = Field(
        default="release-please",
        validation_alias="RELEASE_PLEASE_COMMAND",
        description="Executable of the release-please CLI (e.g. 'npx release-please')",
    )
    release_please_timeout_seconds: float = Field(
        default=300.0,
        validation_alias="RELEASE_PLEASE_TIMEOUT_SECONDS",
        gt=0,
    )

    label_sync_on_startup: bool = Field(
        default=False,
        validation_alias="LABEL_SYNC_ON_STARTUP",
        description="Reconcile labels for every repository in the manifest when the server starts",
    )
    label_sync_manifest_url: str = Field(
        default="https://raw.githubusercontent.com/googleapis/sloth/master/repos.json",
        validation_alias="LABEL_SYNC_MANIFEST_URL",
    )
    label_sync_max_workers: int = Field(
        default=8,
        validation_alias="LABEL_SYNC_MAX_WORKERS",
        ge=1,
        le=64,
    )

    delivery_log_size: int = Field(
        default=1024,
        validation_alias="DELIVERY_LOG_SIZE",
        ge=1,
        description="Number of recent webhook delivery ids remembered for de-duplication",
    )

    host: str = Field(default="127.0.0.1", validation_alias="HOST")
    port: int = Field(default=3000, validation_alias="PORT", ge=1, le=65535)

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    @model_validator(mode="after")
    def _require_github_auth(self) -> BotSettings:
        has_app = bool(self.github_app_id.strip()) and bool(self.github_app_private_key.strip())
        partial_app = bool(self.github_app_id.strip()) != bool(self.github_app_private_key.strip())
        if partial_app:
            raise ValueError("GITHUB_APP_ID and GITHUB_APP_PRIVATE_KEY must be set together")
        if not has_app and not self.github_token.strip():
            raise ValueError("GITHUB_TOKEN or GITHUB_APP_ID/GITHUB_APP_PRIVATE_KEY is required")
        return self

    @property
    def uses_app_auth(self) -> bool:
        return bool(self.github_app_id.strip())
