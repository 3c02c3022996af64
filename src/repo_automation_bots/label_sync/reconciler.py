"""Converge a repository's labels to the desired label set.

Reconciliation is split into a pure diff (:func:`plan_reconciliation`) and a
best-effort apply phase (:func:`apply_plan`). Every planned operation is
attempted; one failure never blocks or rolls back the others.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Literal

from repo_automation_bots.errors import UpstreamAPIError
from repo_automation_bots.github.client import ExistingLabel, GitHubClient
from repo_automation_bots.label_sync.labels import (
    DEFAULT_LABELS,
    LEGACY_LABELS_TO_DELETE,
    LabelSpec,
)

logger = logging.getLogger(__name__)

OperationKind = Literal["create", "update", "delete"]


@dataclass(frozen=True, slots=True)
class LabelUpdate:
    """Recolor ``name``; the description is carried over from the existing label."""

    name: str
    color: str
    description: str
    previous_color: str


@dataclass(frozen=True, slots=True)
class LabelPlan:
    to_create: tuple[LabelSpec, ...] = ()
    to_update: tuple[LabelUpdate, ...] = ()
    to_delete: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.to_create or self.to_update or self.to_delete)


@dataclass(frozen=True, slots=True)
class LabelOperationResult:
    kind: OperationKind
    label: str
    ok: bool
    error: str | None = None


@dataclass(frozen=True, slots=True)
class ReconcileReport:
    repository: str
    results: list[LabelOperationResult] = field(default_factory=list)

    @property
    def failures(self) -> list[LabelOperationResult]:
        return [r for r in self.results if not r.ok]

    def counts(self) -> dict[str, int]:
        out = {"create": 0, "update": 0, "delete": 0, "failed": 0}
        for r in self.results:
            if r.ok:
                out[r.kind] += 1
            else:
                out["failed"] += 1
        return out


def plan_reconciliation(
    desired: Iterable[LabelSpec],
    existing: Sequence[ExistingLabel],
    *,
    denylist: Iterable[str] = LEGACY_LABELS_TO_DELETE,
) -> LabelPlan:
    by_lower_name: dict[str, ExistingLabel] = {}
    for label in existing:
        by_lower_name.setdefault(label.name.lower(), label)

    to_create: list[LabelSpec] = []
    to_update: list[LabelUpdate] = []
    for wanted in desired:
        match = by_lower_name.get(wanted.name.lower())
        if match is None:
            to_create.append(wanted)
        elif match.color.lower() != wanted.color.lower():
            to_update.append(
                LabelUpdate(
                    name=wanted.name,
                    color=wanted.color,
                    description=match.description,
                    previous_color=match.color,
                )
            )

    deny = set(denylist)
    to_delete = tuple(label.name for label in existing if label.name in deny)

    return LabelPlan(to_create=tuple(to_create), to_update=tuple(to_update), to_delete=to_delete)


def _run_operation(
    github: GitHubClient, kind: OperationKind, label: str, op: object
) -> LabelOperationResult:
    try:
        if isinstance(op, LabelSpec):
            github.create_label(name=op.name, color=op.color, description=op.description)
        elif isinstance(op, LabelUpdate):
            github.update_label(name=op.name, color=op.color, description=op.description)
        else:
            github.delete_label(name=label)
    except UpstreamAPIError as e:
        logger.error(
            "Label operation failed",
            extra={
                "repo": github.repository,
                "label": label,
                "operation": kind,
                "error": e.message,
            },
        )
        return LabelOperationResult(kind=kind, label=label, ok=False, error=e.message)

    logger.info(
        "Label operation applied",
        extra={"repo": github.repository, "label": label, "operation": kind},
    )
    return LabelOperationResult(kind=kind, label=label, ok=True)


def apply_plan(
    github: GitHubClient, plan: LabelPlan, *, max_workers: int = 8
) -> list[LabelOperationResult]:
    """Apply every planned operation concurrently and collect each outcome.

    Results are returned in plan order (creates, updates, deletes).
    """

    operations: list[tuple[OperationKind, str, object]] = [
        *(("create", wanted.name, wanted) for wanted in plan.to_create),
        *(("update", upd.name, upd) for upd in plan.to_update),
        *(("delete", name, name) for name in plan.to_delete),
    ]
    if not operations:
        return []

    with ThreadPoolExecutor(
        max_workers=min(max_workers, len(operations)), thread_name_prefix="label-sync"
    ) as pool:
        futures = [
            pool.submit(_run_operation, github, kind, label, op) for kind, label, op in operations
        ]
        return [f.result() for f in futures]


def reconcile_labels(
    github: GitHubClient,
    desired: Sequence[LabelSpec] = DEFAULT_LABELS,
    *,
    max_workers: int = 8,
) -> ReconcileReport:
    """Synchronize the labels of ``github.repository`` with ``desired``.

    Listing the current labels must succeed (UpstreamAPIError propagates);
    individual create/update/delete failures are logged and reported.
    """

    existing = github.list_labels()
    plan = plan_reconciliation(desired, existing)
    for upd in plan.to_update:
        logger.info(
            "Updating label color",
            extra={
                "repo": github.repository,
                "label": upd.name,
                "from": upd.previous_color,
                "to": upd.color,
            },
        )

    results = apply_plan(github, plan, max_workers=max_workers)
    report = ReconcileReport(repository=github.repository, results=results)
    logger.info("Labels reconciled", extra={"repo": github.repository, **report.counts()})
    return report
