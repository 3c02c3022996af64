"""Repository manifest sweep.

The manifest is a JSON document listing the repositories whose labels the bot
manages::

    {"repos": [{"language": "nodejs", "repo": "googleapis/nodejs-storage"}]}
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

import requests

from repo_automation_bots.errors import BotError, UpstreamAPIError
from repo_automation_bots.github.client import GitHubClient
from repo_automation_bots.label_sync.reconciler import ReconcileReport, reconcile_labels

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ManifestRepo:
    owner: str
    name: str
    language: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


def parse_manifest(data: object) -> list[ManifestRepo]:
    if not isinstance(data, dict) or not isinstance(data.get("repos"), list):
        raise UpstreamAPIError("Manifest must be an object with a 'repos' list")

    repos: list[ManifestRepo] = []
    for entry in data["repos"]:
        if not isinstance(entry, dict):
            continue
        owner, _, name = str(entry.get("repo") or "").partition("/")
        if not owner or not name:
            logger.warning("Skipping malformed manifest entry", extra={"entry": entry})
            continue
        language = str(entry.get("language") or "")
        repos.append(ManifestRepo(owner=owner, name=name, language=language))
    return repos


def fetch_manifest(url: str, *, session: requests.Session | None = None) -> list[ManifestRepo]:
    http = session or requests.Session()
    try:
        resp = http.get(url, timeout=30)
        resp.raise_for_status()
        data = resp.json()
    except (requests.RequestException, ValueError) as e:
        raise UpstreamAPIError(f"Could not fetch repository manifest from {url}: {e}") from e
    finally:
        if session is None:
            http.close()

    repos = parse_manifest(data)
    logger.info("Fetched repository manifest", extra={"url": url, "count": len(repos)})
    return repos


def sweep_labels(
    repos: Iterable[ManifestRepo],
    client_factory: Callable[[str], GitHubClient],
    *,
    max_workers: int = 8,
) -> list[ReconcileReport]:
    """Reconcile labels for every repository; one repository failing does not stop the rest."""

    reports: list[ReconcileReport] = []
    for repo in repos:
        try:
            github = client_factory(repo.full_name)
        except BotError as e:
            logger.error(
                "Skipping repository: no client",
                extra={"repo": repo.full_name, "error": e.message},
            )
            continue
        try:
            reports.append(reconcile_labels(github, max_workers=max_workers))
        except UpstreamAPIError as e:
            logger.error("Label sync failed", extra={"repo": repo.full_name, "error": e.message})
        finally:
            github.close()
    return reports
