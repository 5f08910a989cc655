"""
Engine control plane: pause/resume and policy flags.

Flags live in the config table as independent key/value rows with
JSON-encoded values. Pausing is cooperative: writing engine_paused never
touches a feature; the worker polls the flag and stops claiming work.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from features.engine.models import BOOL_KEYS, STR_KEYS, EngineConfig, EngineStatus
from features.errors import ValidationError
from features.store import CONFIG, Store

log = logging.getLogger(__name__)

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}


def derive_status(engine_paused: bool, is_building: bool) -> EngineStatus:
    """Combine the pause flag with whether the worker still holds a feature."""
    if not engine_paused:
        return EngineStatus.RUNNING
    if is_building:
        return EngineStatus.PAUSING
    return EngineStatus.PAUSED


def decode_value(raw: Any) -> Any:
    """JSON-decode a stored value; malformed JSON is kept as raw text."""
    if not isinstance(raw, str):
        return raw
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def coerce_bool(key: str, value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
    log.warning("[ENGINE] Ignoring unreadable value for %s: %r (using %s)", key, value, default)
    return default


def parse_config(rows: list[dict[str, Any]]) -> EngineConfig:
    """Build an EngineConfig from config rows; missing keys keep defaults."""
    cfg = EngineConfig()
    for row in rows:
        key = row.get("key")
        if not key:
            continue
        value = decode_value(row.get("value"))
        if key in BOOL_KEYS:
            setattr(cfg, key, coerce_bool(key, value, getattr(cfg, key)))
        elif key in STR_KEYS:
            setattr(cfg, key, "" if value is None else str(value))
        else:
            cfg.extra[key] = value
    return cfg


class EngineControl:
    """Reads and writes the control-plane keys through a store."""

    def __init__(self, store: Store):
        self.store = store

    def load(self) -> EngineConfig:
        return parse_config(self.store.select_all(CONFIG))

    def set(self, key: str, value: Any) -> None:
        if not key:
            raise ValidationError("Config key must not be empty")
        if key in BOOL_KEYS and not isinstance(value, bool):
            raise ValidationError(f"Config key '{key}' expects a boolean, got {value!r}")
        if key in STR_KEYS and not isinstance(value, str):
            raise ValidationError(f"Config key '{key}' expects a string, got {value!r}")
        self.store.upsert_by_key(key, json.dumps(value))
        log.info("[ENGINE] Set %s = %r", key, value)

    def update(self, values: dict[str, Any]) -> EngineConfig:
        """Write each key independently, then return the freshly loaded config."""
        for key, value in values.items():
            self.set(key, value)
        return self.load()

    def pause(self) -> None:
        self.set("engine_paused", True)

    def resume(self) -> None:
        self.set("engine_paused", False)
