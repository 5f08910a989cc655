"""
Data models for the feature queue.

Feature and FeatureStatus are the core domain objects: a Feature is a
discrete unit of backlog work processed by the external build worker.
LogEntry and Session are written by the worker and only read here.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any


class FeatureStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


class LogLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class Feature:
    """A single unit of backlog work."""
    id: str
    name: str
    description: str
    category: str
    priority: float
    status: FeatureStatus = FeatureStatus.PENDING
    instructions: str | None = None
    started_at: str | None = None
    completed_at: str | None = None
    error_message: str | None = None
    retry_count: int = 0
    created_at: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Feature:
        """Build a Feature from a store row, tolerating missing columns."""
        return cls(
            id=str(row["id"]),
            name=row.get("name") or "",
            description=row.get("description") or "",
            category=row.get("category") or "",
            priority=float(row.get("priority") or 0),
            status=FeatureStatus(row.get("status") or FeatureStatus.PENDING.value),
            instructions=row.get("instructions"),
            started_at=_iso(row.get("started_at")),
            completed_at=_iso(row.get("completed_at")),
            error_message=row.get("error_message"),
            retry_count=int(row.get("retry_count") or 0),
            created_at=_iso(row.get("created_at")),
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data


@dataclass
class LogEntry:
    """An append-only worker log line."""
    id: str
    created_at: str | None
    level: LogLevel
    message: str

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> LogEntry:
        try:
            level = LogLevel(row.get("level") or LogLevel.INFO.value)
        except ValueError:
            level = LogLevel.INFO
        return cls(
            id=str(row["id"]),
            created_at=_iso(row.get("created_at")),
            level=level,
            message=row.get("message") or "",
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["level"] = self.level.value
        return data


@dataclass
class Session:
    """One worker session (a continuous run of the engine)."""
    id: str
    status: str
    started_at: str | None = None
    features_completed: int = 0
    features_failed: int = 0

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Session:
        return cls(
            id=str(row["id"]),
            status=row.get("status") or "",
            started_at=_iso(row.get("started_at")),
            features_completed=int(row.get("features_completed") or 0),
            features_failed=int(row.get("features_failed") or 0),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class FeatureDraft:
    """Parsed operator input for a new feature, before it has an id or priority."""
    name: str
    category: str
    description: str
    instructions: str | None = None


def _iso(value: Any) -> str | None:
    """Postgres hands back datetimes; the in-memory store keeps strings."""
    if value is None:
        return None
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)
