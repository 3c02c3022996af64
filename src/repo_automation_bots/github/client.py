"""GitHub API client wrapper for the bots.

Plain REST calls go through a `requests.Session`; PyGithub is used for GitHub App
authentication (exchanging an installation id for an installation token).
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import requests
from github import Auth, GithubException, GithubIntegration

from repo_automation_bots.errors import UpstreamAPIError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ExistingLabel:
    """A label as currently stored on GitHub."""

    name: str
    color: str
    description: str


class GitHubClient:
    """Small wrapper around the GitHub REST API scoped to one repository."""

    def __init__(
        self,
        *,
        token: str,
        repository: str,
        base_url: str = "https://api.github.com",
        session: requests.Session | None = None,
    ) -> None:
        if not token:
            raise ValueError("GitHub token is required")
        if not repository.strip("/ "):
            raise ValueError("GitHub repository is required")

        self._repository_name = repository.strip().strip("/")
        self._rest_base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": "repo-automation-bots",
            }
        )

    @property
    def repository(self) -> str:
        """Return the configured repository name ("owner/repo")."""

        return self._repository_name

    def _repo_url(self, *, path: str) -> str:
        path = path.lstrip("/")
        root = f"{self._rest_base_url}/repos/{self._repository_name}"
        return f"{root}/{path}" if path else root

    def _label_url(self, name: str) -> str:
        return self._repo_url(path=f"labels/{quote(name, safe='')}")

    def _send(self, method: str, url: str, *, what: str, **kwargs: Any) -> requests.Response:
        try:
            return self._session.request(method, url, timeout=30, **kwargs)
        except requests.RequestException as e:
            raise UpstreamAPIError(
                f"{what} failed: {e}", repository=self._repository_name
            ) from e

    def _raise_for_status(self, resp: requests.Response, *, what: str) -> None:
        if resp.status_code < 400:
            return
        raise UpstreamAPIError(
            f"{what} failed with HTTP {resp.status_code}: {resp.text[:200]}",
            status_code=resp.status_code,
            repository=self._repository_name,
        )

    def _json(self, resp: requests.Response, *, what: str) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise UpstreamAPIError(
                f"{what} returned a non-JSON body (HTTP {resp.status_code})",
                status_code=resp.status_code,
                repository=self._repository_name,
            ) from e

    def get_text_file_from_repo(self, *, path: str, ref: str = "") -> str:
        """Return the decoded text of a file in the repository.

        An empty ``ref`` reads from the default branch.

        Raises:
            FileNotFoundError if not present.
            UpstreamAPIError for any other failure.
        """

        norm = path.lstrip("/")
        url = self._repo_url(path=f"contents/{norm}")
        params = {"ref": ref} if ref.strip() else None

        resp = self._send("GET", url, what=f"Fetching {norm}", params=params)
        if resp.status_code == 404:
            raise FileNotFoundError(f"File not found: {path}")
        self._raise_for_status(resp, what=f"Fetching {norm}")
        data = self._json(resp, what=f"Fetching {norm}")
        if not isinstance(data, dict):
            raise UpstreamAPIError(
                f"Unexpected contents response for {norm}", repository=self._repository_name
            )

        encoding = data.get("encoding")
        content = data.get("content")
        if encoding == "base64" and isinstance(content, str):
            return base64.b64decode(content.encode("utf-8")).decode("utf-8")
        if isinstance(content, str):
            return content
        raise UpstreamAPIError(
            "Unexpected contents response: missing content", repository=self._repository_name
        )

    def _get_paginated_json_list(self, url: str, *, what: str) -> list[dict[str, Any]]:
        """Fetch a REST endpoint that returns a JSON list, following `page` pagination."""

        items: list[dict[str, Any]] = []
        per_page = 100
        page = 1
        while True:
            resp = self._send(
                "GET", url, what=what, params={"per_page": per_page, "page": page}
            )
            self._raise_for_status(resp, what=what)
            payload = self._json(resp, what=what)
            if not isinstance(payload, list):
                break

            items.extend(p for p in payload if isinstance(p, dict))
            if len(payload) < per_page:
                break
            page += 1
        return items

    def list_labels(self) -> list[ExistingLabel]:
        """Return every label in the repository (all pages flattened)."""

        raw = self._get_paginated_json_list(self._repo_url(path="labels"), what="Listing labels")
        labels = [
            ExistingLabel(
                name=str(item.get("name") or ""),
                color=str(item.get("color") or ""),
                description=str(item.get("description") or ""),
            )
            for item in raw
        ]
        logger.debug(
            "Fetched labels", extra={"repo": self._repository_name, "count": len(labels)}
        )
        return labels

    def create_label(self, *, name: str, color: str, description: str) -> None:
        what = f"Creating label '{name}'"
        resp = self._send(
            "POST",
            self._repo_url(path="labels"),
            what=what,
            json={"name": name, "color": color, "description": description},
        )
        if resp.status_code == 422 and "already_exists" in resp.text:
            # Created concurrently (another delivery or a manual edit).
            logger.debug(
                "Label already exists", extra={"repo": self._repository_name, "label": name}
            )
            return
        self._raise_for_status(resp, what=what)

    def update_label(self, *, name: str, color: str, description: str) -> None:
        """Update a label in place. GitHub resolves ``name`` case-insensitively and the
        label is renamed to exactly ``name``."""

        what = f"Updating label '{name}'"
        resp = self._send(
            "PATCH",
            self._label_url(name),
            what=what,
            json={"new_name": name, "color": color, "description": description},
        )
        self._raise_for_status(resp, what=what)

    def delete_label(self, *, name: str) -> None:
        what = f"Deleting label '{name}'"
        resp = self._send("DELETE", self._label_url(name), what=what)
        if resp.status_code == 404:
            return
        self._raise_for_status(resp, what=what)

    def close(self) -> None:
        self._session.close()


class GitHubAppAuth:
    """Resolve installation tokens for a GitHub App via PyGithub."""

    def __init__(
        self,
        *,
        app_id: str,
        private_key: str,
        base_url: str = "https://api.github.com",
        integration: GithubIntegration | None = None,
    ) -> None:
        self._integration = integration or GithubIntegration(
            auth=Auth.AppAuth(app_id, private_key), base_url=base_url.rstrip("/")
        )

    def installation_token(self, installation_id: int) -> str:
        try:
            access = self._integration.get_access_token(installation_id)
        except (GithubException, requests.RequestException) as e:
            raise UpstreamAPIError(
                f"Could not obtain token for installation {installation_id}: {e}"
            ) from e
        return access.token

    def installation_token_for_repo(self, repository: str) -> str:
        owner, _, name = repository.partition("/")
        try:
            installation = self._integration.get_repo_installation(owner, name)
        except (GithubException, requests.RequestException) as e:
            raise UpstreamAPIError(
                f"App is not installed on {repository}: {e}", repository=repository
            ) from e
        return self.installation_token(installation.id)
