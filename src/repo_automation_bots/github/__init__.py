"""GitHub REST access for the bots."""

from repo_automation_bots.github.client import ExistingLabel, GitHubAppAuth, GitHubClient
from repo_automation_bots.github.factory import ClientFactory

__all__ = ["ClientFactory", "ExistingLabel", "GitHubAppAuth", "GitHubClient"]
