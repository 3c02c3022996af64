"""Unit tests for the repository manifest sweep."""

from __future__ import annotations

from unittest.mock import Mock

import pytest
import requests

from repo_automation_bots.errors import UpstreamAPIError
from repo_automation_bots.github.client import ExistingLabel, GitHubClient
from repo_automation_bots.label_sync.manifest import (
    ManifestRepo,
    fetch_manifest,
    parse_manifest,
    sweep_labels,
)


def test_parse_manifest_skips_malformed_entries() -> None:
    repos = parse_manifest(
        {
            "repos": [
                {"language": "nodejs", "repo": "googleapis/nodejs-storage"},
                {"language": "java", "repo": "not-a-repo"},
                "garbage",
                {"repo": "googleapis/python-pubsub"},
            ]
        }
    )

    assert repos == [
        ManifestRepo(owner="googleapis", name="nodejs-storage", language="nodejs"),
        ManifestRepo(owner="googleapis", name="python-pubsub", language=""),
    ]


def test_parse_manifest_rejects_unexpected_shape() -> None:
    with pytest.raises(UpstreamAPIError):
        parse_manifest(["googleapis/nodejs-storage"])


def test_fetch_manifest_uses_session() -> None:
    session = Mock(spec=requests.Session)
    resp = Mock(spec=requests.Response)
    resp.json.return_value = {"repos": [{"language": "go", "repo": "googleapis/google-cloud-go"}]}
    session.get.return_value = resp

    repos = fetch_manifest("https://example.test/repos.json", session=session)

    assert [r.full_name for r in repos] == ["googleapis/google-cloud-go"]
    session.get.assert_called_once_with("https://example.test/repos.json", timeout=30)
    session.close.assert_not_called()


def test_fetch_manifest_http_error_is_upstream_error() -> None:
    session = Mock(spec=requests.Session)
    resp = Mock(spec=requests.Response)
    resp.raise_for_status.side_effect = requests.HTTPError("404")
    session.get.return_value = resp

    with pytest.raises(UpstreamAPIError):
        fetch_manifest("https://example.test/repos.json", session=session)


def test_sweep_continues_after_a_repository_fails() -> None:
    healthy = Mock(spec=GitHubClient)
    healthy.repository = "googleapis/healthy"
    healthy.list_labels.return_value = [ExistingLabel("bug", "ee0701", "")]

    broken = Mock(spec=GitHubClient)
    broken.repository = "googleapis/broken"
    broken.list_labels.side_effect = UpstreamAPIError("HTTP 403", status_code=403)

    clients = {"googleapis/broken": broken, "googleapis/healthy": healthy}
    repos = [
        ManifestRepo(owner="googleapis", name="broken"),
        ManifestRepo(owner="googleapis", name="healthy"),
    ]

    reports = sweep_labels(repos, lambda name: clients[name])

    assert [r.repository for r in reports] == ["googleapis/healthy"]
    healthy.delete_label.assert_called_once_with(name="bug")
    broken.close.assert_called_once()
    healthy.close.assert_called_once()


def test_sweep_skips_repository_without_credentials() -> None:
    def factory(name: str) -> GitHubClient:
        raise UpstreamAPIError(f"App is not installed on {name}")

    assert sweep_labels([ManifestRepo(owner="o", name="r")], factory) == []


def test_sweep_continues_after_a_non_json_response() -> None:
    html = Mock(spec=requests.Response)
    html.status_code = 200
    html.text = "<html>upstream proxy error</html>"
    html.json.side_effect = requests.JSONDecodeError("Expecting value", html.text, 0)
    session = Mock(spec=requests.Session)
    session.headers = {}
    session.request.return_value = html
    bad = GitHubClient(token="t", repository="o/bad", session=session)

    good = Mock(spec=GitHubClient)
    good.repository = "o/good"
    good.list_labels.return_value = []

    clients = {"o/bad": bad, "o/good": good}
    reports = sweep_labels(
        [ManifestRepo(owner="o", name="bad"), ManifestRepo(owner="o", name="good")],
        lambda name: clients[name],
    )

    assert [r.repository for r in reports] == ["o/good"]
    assert good.create_label.call_count > 0
    session.close.assert_called_once()
