"""
Queue view: the derived, read-only picture of the backlog.

Built fresh from the rows of one poll; nothing here writes to the store
or is kept between polls.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass
from typing import Any, Iterable

from features.errors import StoreError
from features.queue.models import Feature, FeatureStatus


@dataclass
class StatusCounts:
    pending: int = 0
    in_progress: int = 0
    completed: int = 0
    failed: int = 0
    skipped: int = 0
    total: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


class QueueView:
    """Ordering, counts and derived fields over one set of feature rows.

    ``features`` must be in stored (creation) order; that order is the
    tie-break for equal priorities and decides which in-progress feature
    counts as current.
    """

    def __init__(self, features: Iterable[Feature]):
        self.features: list[Feature] = list(features)

    @classmethod
    def from_rows(cls, rows: Iterable[dict[str, Any]]) -> QueueView:
        """Decode store rows. A row the models can't read raises StoreError."""
        features = []
        for row in rows:
            try:
                features.append(Feature.from_row(row))
            except (KeyError, TypeError, ValueError) as e:
                raise StoreError(
                    f"Unreadable feature row {row.get('id')!r}", details=str(e),
                ) from e
        return cls(features)

    def ordered(self) -> list[Feature]:
        """Features by ascending priority; sorted() is stable so ties keep creation order."""
        return sorted(self.features, key=lambda f: f.priority)

    def with_status(self, status: FeatureStatus) -> list[Feature]:
        return [f for f in self.ordered() if f.status == status]

    def get(self, feature_id: str) -> Feature | None:
        for f in self.features:
            if f.id == feature_id:
                return f
        return None

    @property
    def counts(self) -> StatusCounts:
        tally = Counter(f.status for f in self.features)
        return StatusCounts(
            pending=tally[FeatureStatus.PENDING],
            in_progress=tally[FeatureStatus.IN_PROGRESS],
            completed=tally[FeatureStatus.COMPLETED],
            failed=tally[FeatureStatus.FAILED],
            skipped=tally[FeatureStatus.SKIPPED],
            total=len(self.features),
        )

    @property
    def categories(self) -> dict[str, int]:
        return dict(Counter(f.category for f in self.features))

    @property
    def current(self) -> Feature | None:
        """First in-progress feature in stored order."""
        for f in self.features:
            if f.status == FeatureStatus.IN_PROGRESS:
                return f
        return None

    @property
    def building(self) -> list[Feature]:
        """Every in-progress feature, earliest start first.

        More than one means the worker broke its one-at-a-time rule; all
        of them are reported rather than hiding the extra builds.
        """
        found = [f for f in self.features if f.status == FeatureStatus.IN_PROGRESS]
        return sorted(found, key=lambda f: (f.started_at is None, f.started_at or ""))

    @property
    def is_building(self) -> bool:
        return self.current is not None

    @property
    def next_pending(self) -> Feature | None:
        """The feature the worker will claim next."""
        pending = self.with_status(FeatureStatus.PENDING)
        return pending[0] if pending else None

    @property
    def pending_priorities(self) -> list[float]:
        return [f.priority for f in self.features if f.status == FeatureStatus.PENDING]

    @property
    def progress(self) -> float:
        counts = self.counts
        if counts.total == 0:
            return 0.0
        return counts.completed / counts.total

    @property
    def progress_percent(self) -> int:
        return round(self.progress * 100)
