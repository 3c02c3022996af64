"""Per-repository configuration read from `.github/release-please.yml`.

Example::

    primaryBranch: main
    releaseType: java-yoshi
    releaseLabels:
      - "autorelease: pending"
    packageName: google-auth-library
    bumpMinorPreMajor: true

Every key is optional. ``labels`` is accepted as a synonym of ``releaseLabels``.
"""

from __future__ import annotations

import binascii
import logging

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from repo_automation_bots.errors import ConfigurationError
from repo_automation_bots.github.client import GitHubClient
from repo_automation_bots.release_please.strategy import ReleaseType

logger = logging.getLogger(__name__)

CONFIG_PATH = ".github/release-please.yml"
DEFAULT_PRIMARY_BRANCH = "master"


class ReleasePleaseConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    primary_branch: str = Field(
        default=DEFAULT_PRIMARY_BRANCH, alias="primaryBranch", min_length=1
    )
    release_type: ReleaseType | None = Field(default=None, alias="releaseType")
    release_labels: list[str] | None = Field(
        default=None,
        validation_alias=AliasChoices("releaseLabels", "labels", "release_labels"),
    )
    package_name: str | None = Field(default=None, alias="packageName")
    bump_minor_pre_major: bool = Field(default=False, alias="bumpMinorPreMajor")

    @field_validator("release_type", mode="before")
    @classmethod
    def _known_release_type(cls, value: object) -> object:
        if value is None or isinstance(value, ReleaseType):
            return value
        return ReleaseType.from_tag(str(value))

    @field_validator("release_labels", mode="before")
    @classmethod
    def _labels_as_list(cls, value: object) -> object:
        # A single label may be written as a scalar.
        if isinstance(value, str):
            return [value]
        return value


def parse_repo_config(text: str) -> ReleasePleaseConfig:
    """Parse the YAML document; an empty document yields the defaults."""

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"{CONFIG_PATH} is not valid YAML: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{CONFIG_PATH} must be a mapping, got {type(raw).__name__}")

    try:
        return ReleasePleaseConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(f"{CONFIG_PATH} is invalid: {e}") from e


def load_repo_config(github: GitHubClient) -> ReleasePleaseConfig | None:
    """Fetch and parse the repository's release-please configuration.

    Returns None when the repository has no configuration file (not configured
    for release-please). Fetch failures raise UpstreamAPIError, bad content raises
    ConfigurationError.
    """

    try:
        text = github.get_text_file_from_repo(path=CONFIG_PATH)
    except FileNotFoundError:
        logger.info(
            "release-please not configured",
            extra={"repo": github.repository, "path": CONFIG_PATH, "outcome": "ignored"},
        )
        return None
    except (UnicodeDecodeError, binascii.Error) as e:
        raise ConfigurationError(f"{CONFIG_PATH} is not valid UTF-8 text: {e}") from e

    config = parse_repo_config(text)
    logger.debug(
        "Loaded release-please configuration",
        extra={"repo": github.repository, "config": config.model_dump(mode="json")},
    )
    return config
