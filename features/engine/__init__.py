"""
Engine feature: the control plane shared with the external worker.

Public API:
    from features.engine import EngineControl, EngineConfig, EngineStatus, derive_status
"""

from features.engine.control import EngineControl, derive_status, parse_config
from features.engine.models import EngineConfig, EngineStatus

__all__ = ["EngineConfig", "EngineControl", "EngineStatus", "derive_status", "parse_config"]
