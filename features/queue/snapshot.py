"""
Snapshot: everything one poll cycle knows about the engine and its queue.

A snapshot is rebuilt from scratch on every poll and never patched in
place, so two clients converge on the store's state one poll apart.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import config
from features.engine import EngineConfig, EngineStatus, derive_status, parse_config
from features.queue.lifecycle import allowed_actions
from features.queue.models import Feature, LogEntry, Session
from features.queue.view import QueueView
from features.store import CONFIG, FEATURES, LOGS, SESSIONS, Store


@dataclass
class Snapshot:
    queue: QueueView
    engine: EngineConfig
    logs: list[LogEntry] = field(default_factory=list)
    sessions: list[Session] = field(default_factory=list)
    loaded_at: str = ""

    @property
    def status(self) -> EngineStatus:
        return derive_status(self.engine.engine_paused, self.queue.is_building)

    def to_dict(self) -> dict[str, Any]:
        queue = self.queue
        current = queue.current
        next_up = queue.next_pending
        return {
            "loaded_at": self.loaded_at,
            "status": self.status.value,
            "engine": self.engine.to_dict(),
            "counts": queue.counts.to_dict(),
            "progress": queue.progress,
            "progress_percent": queue.progress_percent,
            "categories": queue.categories,
            "current": current.to_dict() if current else None,
            "building": [f.to_dict() for f in queue.building],
            "next": next_up.to_dict() if next_up else None,
            "features": [feature_dict(f) for f in queue.ordered()],
            "logs": [entry.to_dict() for entry in self.logs],
            "sessions": [s.to_dict() for s in self.sessions],
        }


def feature_dict(feature: Feature) -> dict[str, Any]:
    """Feature as JSON, plus the operator actions its status admits."""
    data = feature.to_dict()
    data["actions"] = [a.value for a in allowed_actions(feature.status)]
    return data


def load_snapshot(
    store: Store,
    log_limit: int | None = None,
    session_limit: int | None = None,
) -> Snapshot:
    """Read all four tables and derive a fresh snapshot. StoreError propagates."""
    features = store.select_all(FEATURES, order_by="created_at")
    engine = parse_config(store.select_all(CONFIG))
    logs = store.select_all(
        LOGS, order_by="-created_at",
        limit=config.LOG_LIMIT if log_limit is None else log_limit,
    )
    sessions = store.select_all(
        SESSIONS, order_by="-started_at",
        limit=config.SESSION_LIMIT if session_limit is None else session_limit,
    )
    return Snapshot(
        queue=QueueView.from_rows(features),
        engine=engine,
        logs=[LogEntry.from_row(r) for r in logs],
        sessions=[Session.from_row(r) for r in sessions],
        loaded_at=datetime.now(timezone.utc).isoformat(),
    )
