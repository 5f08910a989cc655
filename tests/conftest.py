"""Shared fixtures: an in-memory store seeded with feature rows."""

from __future__ import annotations

import itertools
import uuid

import pytest
from fastapi.testclient import TestClient

from features.engine import EngineControl
from features.queue import QueueService
from features.store import FEATURES, MemoryStore

_clock = itertools.count()


def make_row(**overrides) -> dict:
    """A feature row as the worker/store would hold it."""
    tick = next(_clock)
    row = {
        "id": f"feat-{uuid.uuid4().hex[:8]}",
        "name": f"Feature {tick}",
        "description": "",
        "category": "general",
        "priority": 100.0,
        "status": "pending",
        "instructions": None,
        "started_at": None,
        "completed_at": None,
        "error_message": None,
        "retry_count": 0,
        "created_at": f"2026-01-01T00:{tick // 60 % 60:02d}:{tick % 60:02d}+00:00",
    }
    row.update(overrides)
    return row


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def seed(store):
    """seed(priority=..., status=...) inserts a row and returns its id."""
    def _seed(**overrides) -> str:
        return store.insert(FEATURES, make_row(**overrides))["id"]
    return _seed


@pytest.fixture
def queue(store) -> QueueService:
    return QueueService(store)


@pytest.fixture
def engine(store) -> EngineControl:
    return EngineControl(store)


@pytest.fixture
def client(store):
    import app as app_module

    app_module.app.dependency_overrides[app_module.get_store] = lambda: store
    try:
        yield TestClient(app_module.app)
    finally:
        app_module.app.dependency_overrides.clear()
