"""Shared GitHub label conventions.

These labels are created and kept in sync in every repository the label-sync bot
manages. Names are human-readable and matched case-insensitively against existing
labels; they are always written with the casing below.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LabelSpec:
    name: str
    color: str
    description: str


DEFAULT_LABELS: tuple[LabelSpec, ...] = (
    LabelSpec(
        name="type: bug",
        color="d73a4a",
        description=(
            "Error or flaw in code with unintended results "
            "or allowing sub-optimal usage patterns."
        ),
    ),
    LabelSpec(
        name="type: cleanup",
        color="c5def5",
        description="An internal cleanup or hygiene concern.",
    ),
    LabelSpec(
        name="type: docs",
        color="0000a0",
        description="Improvement to the documentation for an API.",
    ),
    LabelSpec(
        name="type: feature request",
        color="c5def5",
        description="'Nice-to-have' improvement, new feature or different behavior or design.",
    ),
    LabelSpec(
        name="type: process",
        color="c5def5",
        description="A process-related concern. May include testing, release, or the like.",
    ),
    LabelSpec(
        name="type: question",
        color="c5def5",
        description="Request for information or clarification. Not an issue.",
    ),
    LabelSpec(
        name="priority: p0",
        color="b60205",
        description="Highest priority. Critical issue.",
    ),
    LabelSpec(
        name="priority: p1",
        color="ff0000",
        description="Important issue which blocks shipping the next release.",
    ),
    LabelSpec(
        name="priority: p2",
        color="fef2c0",
        description="Moderately-important priority. Fix may not be included in next release.",
    ),
    LabelSpec(
        name="priority: p3",
        color="ffffc7",
        description="Desirable enhancement or fix. May not be included in next release.",
    ),
    LabelSpec(
        name="cla: yes",
        color="00ff00",
        description="This human has signed the Contributor License Agreement.",
    ),
    LabelSpec(
        name="cla: no",
        color="ff0000",
        description="This human has *not* signed the Contributor License Agreement.",
    ),
    LabelSpec(
        name="autorelease: pending",
        color="ededed",
        description="Release pull request awaiting merge.",
    ),
    LabelSpec(
        name="autorelease: tagged",
        color="ededed",
        description="Release pull request merged and tagged.",
    ),
    LabelSpec(
        name="automerge",
        color="0000ff",
        description="Merge the pull request once unit tests and other checks pass.",
    ),
    LabelSpec(
        name="needs more info",
        color="dddddd",
        description="This issue needs more information to proceed.",
    ),
    LabelSpec(
        name="status: blocked",
        color="d4c5f9",
        description="Resolving the issue is dependent on other work.",
    ),
)

# Legacy labels removed wherever they are found. Matched exactly (case-sensitive).
LEGACY_LABELS_TO_DELETE: tuple[str, ...] = (
    "bug",
    "enhancement",
    "kokoro:force-ci",
    "kokoro: force-run",
    "kokoro: run",
    "question",
)
