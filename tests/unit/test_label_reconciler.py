"""Unit tests for label reconciliation (mocked)."""

from __future__ import annotations

import threading
from unittest.mock import Mock

from repo_automation_bots.errors import UpstreamAPIError
from repo_automation_bots.github.client import ExistingLabel, GitHubClient
from repo_automation_bots.label_sync.labels import (
    DEFAULT_LABELS,
    LEGACY_LABELS_TO_DELETE,
    LabelSpec,
)
from repo_automation_bots.label_sync.reconciler import (
    LabelPlan,
    apply_plan,
    plan_reconciliation,
    reconcile_labels,
)


class FakeLabelRepo:
    """In-memory stand-in for a repository's label API."""

    def __init__(self, labels: list[ExistingLabel]) -> None:
        self.repository = "octo-org/octo-repo"
        self.labels = {label.name.lower(): label for label in labels}
        self.mutations: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def list_labels(self) -> list[ExistingLabel]:
        return list(self.labels.values())

    def create_label(self, *, name: str, color: str, description: str) -> None:
        with self._lock:
            self.mutations.append(("create", name))
            self.labels[name.lower()] = ExistingLabel(name, color, description)

    def update_label(self, *, name: str, color: str, description: str) -> None:
        with self._lock:
            self.mutations.append(("update", name))
            self.labels[name.lower()] = ExistingLabel(name, color, description)

    def delete_label(self, *, name: str) -> None:
        with self._lock:
            self.mutations.append(("delete", name))
            self.labels.pop(name.lower(), None)


def _mock_client(existing: list[ExistingLabel]) -> Mock:
    client = Mock(spec=GitHubClient)
    client.repository = "octo-org/octo-repo"
    client.list_labels.return_value = existing
    return client


def test_case_insensitive_match_updates_color_only() -> None:
    desired = [LabelSpec(name="type: bug", color="d73a4a", description="Something is broken")]
    client = _mock_client([ExistingLabel(name="Type: Bug", color="ffffff", description="old")])

    report = reconcile_labels(client, desired)

    client.create_label.assert_not_called()
    client.delete_label.assert_not_called()
    client.update_label.assert_called_once_with(
        name="type: bug", color="d73a4a", description="old"
    )
    assert report.counts() == {"create": 0, "update": 1, "delete": 0, "failed": 0}


def test_missing_label_is_created() -> None:
    desired = [LabelSpec(name="automerge", color="0000ff", description="Merge when green")]
    client = _mock_client([])

    reconcile_labels(client, desired)

    client.create_label.assert_called_once_with(
        name="automerge", color="0000ff", description="Merge when green"
    )
    client.update_label.assert_not_called()
    client.delete_label.assert_not_called()


def test_matching_color_is_left_alone() -> None:
    desired = [LabelSpec(name="automerge", color="0000ff", description="new text")]
    client = _mock_client([ExistingLabel(name="automerge", color="0000FF", description="x")])

    report = reconcile_labels(client, desired)

    assert report.results == []
    client.update_label.assert_not_called()


def test_denylisted_label_is_deleted_regardless_of_desired() -> None:
    existing = [ExistingLabel(name="bug", color="ee0701", description="")]

    for desired in ([], [LabelSpec(name="type: bug", color="d73a4a", description="")]):
        client = _mock_client(existing)
        reconcile_labels(client, desired)
        client.delete_label.assert_called_once_with(name="bug")


def test_denylist_match_is_case_sensitive() -> None:
    plan = plan_reconciliation([], [ExistingLabel(name="Bug", color="ee0701", description="")])

    assert plan.to_delete == ()


def test_plan_covers_create_update_and_delete() -> None:
    desired = [
        LabelSpec(name="type: bug", color="d73a4a", description=""),
        LabelSpec(name="automerge", color="0000ff", description="merge"),
    ]
    existing = [
        ExistingLabel(name="TYPE: BUG", color="000000", description="kept"),
        ExistingLabel(name="question", color="cc317c", description=""),
        ExistingLabel(name="kokoro: run", color="ededed", description=""),
    ]

    plan = plan_reconciliation(desired, existing)

    assert [s.name for s in plan.to_create] == ["automerge"]
    assert [(u.name, u.color, u.description) for u in plan.to_update] == [
        ("type: bug", "d73a4a", "kept")
    ]
    assert plan.to_delete == ("question", "kokoro: run")


def test_reconciliation_is_idempotent() -> None:
    repo = FakeLabelRepo(
        [
            ExistingLabel(name="Type: Bug", color="ffffff", description="old"),
            ExistingLabel(name="enhancement", color="a2eeef", description=""),
            ExistingLabel(name="custom", color="123456", description="team label"),
        ]
    )

    first = reconcile_labels(repo, DEFAULT_LABELS)  # type: ignore[arg-type]
    assert first.counts()["failed"] == 0
    assert repo.mutations

    repo.mutations.clear()
    second = reconcile_labels(repo, DEFAULT_LABELS)  # type: ignore[arg-type]

    assert second.results == []
    assert repo.mutations == []
    assert "custom" in repo.labels
    assert repo.labels["type: bug"].name == "type: bug"


def test_one_failure_does_not_block_siblings() -> None:
    desired = [
        LabelSpec(name="type: bug", color="d73a4a", description=""),
        LabelSpec(name="automerge", color="0000ff", description=""),
    ]
    client = _mock_client(
        [
            ExistingLabel(name="type: bug", color="ffffff", description=""),
            ExistingLabel(name="question", color="cc317c", description=""),
        ]
    )
    client.update_label.side_effect = UpstreamAPIError("HTTP 500", status_code=500)

    report = reconcile_labels(client, desired)

    client.create_label.assert_called_once()
    client.delete_label.assert_called_once_with(name="question")
    assert [(r.kind, r.label, r.ok) for r in report.results] == [
        ("create", "automerge", True),
        ("update", "type: bug", False),
        ("delete", "question", True),
    ]
    assert [r.label for r in report.failures] == ["type: bug"]
    assert report.failures[0].error == "HTTP 500"


def test_apply_empty_plan_makes_no_calls() -> None:
    client = _mock_client([])

    assert apply_plan(client, LabelPlan()) == []
    assert LabelPlan().is_empty


def test_default_label_data_is_well_formed() -> None:
    names = [label.name.lower() for label in DEFAULT_LABELS]
    assert len(names) == len(set(names))
    for label in DEFAULT_LABELS:
        assert len(label.color) == 6
        int(label.color, 16)
        assert label.name not in LEGACY_LABELS_TO_DELETE
