"""Release strategies known to the release-please tool.

Each release type is a closed enum member; the behavior behind it lives in the
external release-please CLI and is selected through ``--release-type``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from repo_automation_bots.errors import ConfigurationError

DEFAULT_RELEASE_LABELS: tuple[str, ...] = ("autorelease: pending", "type: process")


class ReleaseType(str, Enum):
    GO = "go"
    GO_YOSHI = "go-yoshi"
    JAVA_YOSHI = "java-yoshi"
    NODE = "node"
    PHP_YOSHI = "php-yoshi"
    PYTHON = "python"
    RUBY = "ruby"
    RUBY_YOSHI = "ruby-yoshi"
    SIMPLE = "simple"
    TERRAFORM_MODULE = "terraform-module"

    @classmethod
    def from_tag(cls, tag: str) -> ReleaseType:
        try:
            return cls(tag.strip().lower())
        except ValueError:
            known = ", ".join(t.value for t in cls)
            raise ConfigurationError(
                f"unknown release type: {tag!r} (expected one of: {known})"
            ) from None


# Repository languages (as reported by GitHub) that imply a release type.
LANGUAGE_RELEASE_TYPES: dict[str, ReleaseType] = {
    "go": ReleaseType.GO,
    "hcl": ReleaseType.TERRAFORM_MODULE,
    "java": ReleaseType.JAVA_YOSHI,
    "javascript": ReleaseType.NODE,
    "php": ReleaseType.PHP_YOSHI,
    "python": ReleaseType.PYTHON,
    "ruby": ReleaseType.RUBY,
    "typescript": ReleaseType.NODE,
}


def release_type_from_language(language: str | None) -> ReleaseType:
    if language is None or not language.strip():
        raise ConfigurationError("repository has no detected language; set releaseType")
    try:
        return LANGUAGE_RELEASE_TYPES[language.strip().lower()]
    except KeyError:
        raise ConfigurationError(
            f"cannot infer release type from language {language!r}; set releaseType"
        ) from None


@dataclass(frozen=True, slots=True)
class ReleasePR:
    """A fully configured release pull request strategy, ready to run once."""

    release_type: ReleaseType
    repo_url: str
    package_name: str
    labels: list[str] = field(default_factory=lambda: list(DEFAULT_RELEASE_LABELS))
    bump_minor_pre_major: bool = False
    api_url: str = "https://api.github.com"

    def command_args(self) -> list[str]:
        """Arguments for ``release-please release-pr`` that select this strategy."""

        args = [
            "release-pr",
            f"--release-type={self.release_type.value}",
            f"--repo-url={self.repo_url}",
            f"--package-name={self.package_name}",
            f"--label={','.join(self.labels)}",
            f"--api-url={self.api_url}",
        ]
        if self.bump_minor_pre_major:
            args.append("--bump-minor-pre-major")
        return args
