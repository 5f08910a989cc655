"""
Priority reordering: sparse, real-valued sort keys.

Priorities are never renumbered on a move: each operation derives one
new value from the pending priorities read at call time, so a single
write reorders the backlog. Lower values are claimed first.
"""

from __future__ import annotations

from typing import Iterable

import config


def append_priority(pending: Iterable[float]) -> float:
    """Priority for a feature added to the back of the queue."""
    values = list(pending)
    if not values:
        return config.BASE_PRIORITY
    return max(values) + 1


def front_priority(pending: Iterable[float]) -> float:
    """Priority for "start now": at or below FRONT_PRIORITY and below every pending value."""
    values = list(pending)
    if not values:
        return config.FRONT_PRIORITY
    return min(config.FRONT_PRIORITY, min(values) - 1)


def top_priority(pending: Iterable[float]) -> float:
    """Priority that sorts strictly before every value in ``pending``."""
    values = list(pending)
    if not values:
        return config.FRONT_PRIORITY
    return min(values) - 1


def move_up_priority(current: float) -> float:
    # Overtakes exactly one neighbour when the gap to it is under MOVE_UP_DELTA
    # and the combined gap back to the one before that is at least MOVE_UP_DELTA
    return current - config.MOVE_UP_DELTA


def compact_priorities(ordered_ids: Iterable[str]) -> dict[str, float]:
    """Evenly spaced priorities for ids already in queue order."""
    return {fid: config.BASE_PRIORITY + i for i, fid in enumerate(ordered_ids)}
