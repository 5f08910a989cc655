"""
Feature lifecycle: operator-triggered status transitions.

Only the external worker moves a feature into or out of in_progress;
none of the actions below do. Everything not listed in TRANSITIONS is
refused with a PreconditionError and nothing is written.

    pending  --skip-->     skipped
    pending  --complete--> completed   (completed_at = now)
    failed   --skip-->     skipped
    failed   --retry-->    pending     (error cleared, retry_count = 0)
    skipped  --requeue-->  pending     (error cleared)
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from features.errors import PreconditionError
from features.queue.models import Feature, FeatureStatus


class Action(str, Enum):
    SKIP = "skip"
    COMPLETE = "complete"
    RETRY = "retry"
    REQUEUE = "requeue"


# (from status, action) → to status
TRANSITIONS: dict[tuple[FeatureStatus, Action], FeatureStatus] = {
    (FeatureStatus.PENDING, Action.SKIP): FeatureStatus.SKIPPED,
    (FeatureStatus.PENDING, Action.COMPLETE): FeatureStatus.COMPLETED,
    (FeatureStatus.FAILED, Action.SKIP): FeatureStatus.SKIPPED,
    (FeatureStatus.FAILED, Action.RETRY): FeatureStatus.PENDING,
    (FeatureStatus.SKIPPED, Action.REQUEUE): FeatureStatus.PENDING,
}

DELETABLE = frozenset({
    FeatureStatus.PENDING,
    FeatureStatus.FAILED,
    FeatureStatus.SKIPPED,
    FeatureStatus.COMPLETED,
})

# Reordering is defined over the pending subset only
REORDERABLE = frozenset({FeatureStatus.PENDING})


def allowed_actions(status: FeatureStatus) -> list[Action]:
    """Actions an operator may take on a feature in ``status``."""
    return [action for (src, action) in TRANSITIONS if src == status]


def plan_transition(feature: Feature, action: Action) -> dict[str, Any]:
    """Return the store patch for ``action`` on ``feature``.

    Raises PreconditionError if the feature's status does not admit it.
    """
    target = TRANSITIONS.get((feature.status, action))
    if target is None:
        raise PreconditionError(feature.id, action.value, feature.status.value)

    patch: dict[str, Any] = {"status": target.value}
    if action is Action.COMPLETE:
        patch["completed_at"] = datetime.now(timezone.utc).isoformat()
    elif action is Action.RETRY:
        patch["error_message"] = None
        patch["retry_count"] = 0
    elif action is Action.REQUEUE:
        patch["error_message"] = None
    return patch


def check_deletable(feature: Feature, force: bool = False) -> None:
    if feature.status in DELETABLE:
        return
    if feature.status is FeatureStatus.IN_PROGRESS and force:
        return
    raise PreconditionError(
        feature.id, "delete", feature.status.value,
        message=f"Cannot delete feature {feature.id} while it is being built (use force)",
    )


def check_reorderable(feature: Feature, action: str) -> None:
    if feature.status not in REORDERABLE:
        raise PreconditionError(feature.id, action, feature.status.value)
