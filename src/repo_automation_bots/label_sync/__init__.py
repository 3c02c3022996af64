"""label-sync bot: keep a fixed set of issue labels in every repository."""

from repo_automation_bots.label_sync.handler import handle_repository_event
from repo_automation_bots.label_sync.labels import (
    DEFAULT_LABELS,
    LEGACY_LABELS_TO_DELETE,
    LabelSpec,
)
from repo_automation_bots.label_sync.manifest import ManifestRepo, fetch_manifest, sweep_labels
from repo_automation_bots.label_sync.reconciler import (
    LabelOperationResult,
    LabelPlan,
    LabelUpdate,
    ReconcileReport,
    apply_plan,
    plan_reconciliation,
    reconcile_labels,
)

__all__ = [
    "DEFAULT_LABELS",
    "LEGACY_LABELS_TO_DELETE",
    "LabelOperationResult",
    "LabelPlan",
    "LabelSpec",
    "LabelUpdate",
    "ManifestRepo",
    "ReconcileReport",
    "apply_plan",
    "fetch_manifest",
    "handle_repository_event",
    "plan_reconciliation",
    "reconcile_labels",
    "sweep_labels",
]
