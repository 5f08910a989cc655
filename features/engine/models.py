"""
Data models for the engine control plane.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import config


class EngineStatus(str, Enum):
    RUNNING = "running"
    PAUSING = "pausing"   # paused requested, worker still holds a feature
    PAUSED = "paused"


# Known keys and their types; anything else is carried in EngineConfig.extra
BOOL_KEYS = ("engine_paused", "auto_approve", "skip_on_error")
STR_KEYS = ("notification_email",)


@dataclass
class EngineConfig:
    """Process-wide flags read by the worker. Each key is stored separately."""
    engine_paused: bool = True
    auto_approve: bool = True
    skip_on_error: bool = False
    notification_email: str = field(default_factory=lambda: config.DEFAULT_NOTIFICATION_EMAIL)
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "engine_paused": self.engine_paused,
            "auto_approve": self.auto_approve,
            "skip_on_error": self.skip_on_error,
            "notification_email": self.notification_email,
            **self.extra,
        }
