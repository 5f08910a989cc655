"""
Queue service: operator actions against the feature backlog.

Every action re-reads the rows it depends on at call time and writes
with a filtered update that only applies if the feature still has the
status that was read. That compare-and-set is the only concurrency
control: the worker and any number of operators may act at once, and
whoever loses a race gets a PreconditionError instead of a clobbered row.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from features.errors import FeatureNotFound, PreconditionError
from features.queue import priority
from features.queue.lifecycle import (
    Action,
    check_deletable,
    check_reorderable,
    plan_transition,
)
from features.queue.models import Feature, FeatureDraft, FeatureStatus
from features.queue.parser import parse_feature_text
from features.queue.view import QueueView
from features.store import FEATURES, Store

log = logging.getLogger(__name__)


class InsertPosition(str, Enum):
    BACK = "back"
    FRONT = "front"


class QueueService:
    """Binds lifecycle and priority rules to a store."""

    def __init__(self, store: Store):
        self.store = store

    # ── Reads ─────────────────────────────────────────────────────────

    def view(self) -> QueueView:
        rows = self.store.select_all(FEATURES, order_by="created_at")
        return QueueView.from_rows(rows)

    def get(self, feature_id: str) -> Feature:
        feature = self.view().get(feature_id)
        if feature is None:
            raise FeatureNotFound(feature_id)
        return feature

    # ── Insert ────────────────────────────────────────────────────────

    def add_text(self, text: str, position: InsertPosition = InsertPosition.BACK) -> Feature:
        """Parse the NAME/CATEGORY/DESCRIPTION format and insert it."""
        draft = parse_feature_text(text)
        return self.add(draft, position)

    def add(self, draft: FeatureDraft, position: InsertPosition = InsertPosition.BACK) -> Feature:
        pending = self.view().pending_priorities
        if position is InsertPosition.FRONT:
            value = priority.front_priority(pending)
        else:
            value = priority.append_priority(pending)

        record = {
            "id": str(uuid.uuid4()),
            "name": draft.name,
            "description": draft.description,
            "category": draft.category,
            "priority": value,
            "status": FeatureStatus.PENDING.value,
            "instructions": draft.instructions,
            "retry_count": 0,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        feature = Feature.from_row(self.store.insert(FEATURES, record))
        log.info(
            "[FEATURE] Added: %s - %s (%s, priority %s, %s)",
            feature.id, feature.name, feature.category, feature.priority, position.value,
        )
        return feature

    # ── Lifecycle ─────────────────────────────────────────────────────

    def skip(self, feature_id: str) -> Feature:
        return self.apply(feature_id, Action.SKIP)

    def complete(self, feature_id: str) -> Feature:
        return self.apply(feature_id, Action.COMPLETE)

    def retry(self, feature_id: str) -> Feature:
        return self.apply(feature_id, Action.RETRY)

    def requeue(self, feature_id: str) -> Feature:
        return self.apply(feature_id, Action.REQUEUE)

    def apply(self, feature_id: str, action: Action) -> Feature:
        feature = self.get(feature_id)
        patch = plan_transition(feature, action)
        updated = self._write(feature, action.value, patch)
        log.info(
            "[FEATURE] %s: %s - %s (%s -> %s)",
            action.value.capitalize(), feature.id, feature.name,
            feature.status.value, updated.status.value,
        )
        return updated

    def delete(self, feature_id: str, force: bool = False) -> None:
        feature = self.get(feature_id)
        check_deletable(feature, force=force)
        if not self.store.delete(FEATURES, feature_id):
            raise FeatureNotFound(feature_id)
        log.info("[FEATURE] Deleted: %s - %s (was %s)", feature.id, feature.name, feature.status.value)

    # ── Reordering ────────────────────────────────────────────────────

    def move_to_top(self, feature_id: str) -> Feature:
        view = self.view()
        feature = self._pending_in(view, feature_id, "move-top")
        value = priority.top_priority(view.pending_priorities)
        updated = self._write(feature, "move-top", {"priority": value})
        log.info("[FEATURE] Moved to top: %s - %s (%s -> %s)", feature.id, feature.name, feature.priority, value)
        return updated

    def move_up(self, feature_id: str) -> Feature:
        feature = self._pending_in(self.view(), feature_id, "move-up")
        value = priority.move_up_priority(feature.priority)
        updated = self._write(feature, "move-up", {"priority": value})
        log.info("[FEATURE] Moved up: %s - %s (%s -> %s)", feature.id, feature.name, feature.priority, value)
        return updated

    def compact(self) -> int:
        """Respace pending priorities in their current order. Returns rows written."""
        pending = self.view().with_status(FeatureStatus.PENDING)
        targets = priority.compact_priorities(f.id for f in pending)
        written = 0
        for feature in pending:
            value = targets[feature.id]
            if feature.priority == value:
                continue
            row = self.store.update_by_id(
                FEATURES, feature.id, {"priority": value},
                expect={"status": FeatureStatus.PENDING.value},
            )
            if row is None:
                log.warning("[FEATURE] Compact skipped %s: no longer pending", feature.id)
                continue
            written += 1
        log.info("[FEATURE] Compacted %d pending priorities (%d rewritten)", len(pending), written)
        return written

    # ── Helpers ───────────────────────────────────────────────────────

    def _pending_in(self, view: QueueView, feature_id: str, action: str) -> Feature:
        feature = view.get(feature_id)
        if feature is None:
            raise FeatureNotFound(feature_id)
        check_reorderable(feature, action)
        return feature

    def _write(self, feature: Feature, action: str, patch: dict[str, Any]) -> Feature:
        """Filtered update guarded by the status we read."""
        row = self.store.update_by_id(
            FEATURES, feature.id, patch, expect={"status": feature.status.value},
        )
        if row is not None:
            return Feature.from_row(row)

        current = self.view().get(feature.id)
        if current is None:
            raise FeatureNotFound(feature.id)
        log.warning(
            "[FEATURE] %s on %s lost a race: status changed %s -> %s",
            action, feature.id, feature.status.value, current.status.value,
        )
        raise PreconditionError(
            feature.id, action, current.status.value,
            message=(
                f"Cannot {action} feature {feature.id}: status changed from "
                f"'{feature.status.value}' to '{current.status.value}'"
            ),
        )
