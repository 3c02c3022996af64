"""Repo automation bots.

Two GitHub App webhook handlers served from one process:
- release-please: open or update a release pull request on pushes to the primary branch
- label-sync: keep a fixed set of issue labels in every repository
"""

__version__ = "0.1.0"

from repo_automation_bots.config import BotSettings

__all__ = ["__version__", "BotSettings"]
