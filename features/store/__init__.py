"""
Store feature: persistent record store behind the queue and engine.

Public API:
    from features.store import Store, MemoryStore, PostgresStore, open_store
"""

from __future__ import annotations

import logging

from features.errors import StoreError
from features.store.base import CONFIG, FEATURES, LOGS, SESSIONS, Store
from features.store.memory import MemoryStore
from features.store.postgres import PostgresStore

log = logging.getLogger(__name__)

__all__ = [
    "CONFIG", "FEATURES", "LOGS", "SESSIONS",
    "MemoryStore", "PostgresStore", "Store", "open_store",
]


def open_store(database_url: str) -> Store:
    """Open Postgres when configured; otherwise fall back to in-memory."""
    if not database_url:
        log.warning("DATABASE_URL not set (queue will be in-memory only)")
        return MemoryStore()
    store = PostgresStore(database_url)
    try:
        store.init_db()
        log.info("Postgres database initialized")
        return store
    except StoreError as e:
        log.warning("Could not connect to Postgres: %s (queue will be in-memory only)", e)
        return MemoryStore()
