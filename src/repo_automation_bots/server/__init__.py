"""FastAPI webhook server for the bots.

Design intent:
- Keep event handling in `repo_automation_bots.release_please` and `repo_automation_bots.label_sync`
- Keep server-specific concerns (routing, delivery de-duplication, status codes) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from repo_automation_bots.server.app import create_app
