"""
In-memory store semantics the service relies on.
"""

import pytest

from features.store import CONFIG, FEATURES, LOGS, MemoryStore


class TestMemoryStore:
    def test_insertion_order_by_default(self, store):
        for name in ("a", "b", "c"):
            store.insert(FEATURES, {"id": name, "name": name})
        assert [r["id"] for r in store.select_all(FEATURES)] == ["a", "b", "c"]

    def test_order_by_descending_with_limit(self, store):
        for i in range(5):
            store.insert(LOGS, {"id": str(i), "created_at": f"2026-01-01T00:00:0{i}", "message": ""})
        rows = store.select_all(LOGS, order_by="-created_at", limit=2)
        assert [r["id"] for r in rows] == ["4", "3"]

    def test_filtered_update(self, store):
        store.insert(FEATURES, {"id": "x", "status": "pending"})
        assert store.update_by_id(FEATURES, "x", {"status": "skipped"}, expect={"status": "failed"}) is None
        row = store.update_by_id(FEATURES, "x", {"status": "skipped"}, expect={"status": "pending"})
        assert row["status"] == "skipped"

    def test_update_missing(self, store):
        assert store.update_by_id(FEATURES, "ghost", {"status": "skipped"}) is None

    def test_rows_are_copies(self, store):
        store.insert(FEATURES, {"id": "x", "status": "pending"})
        store.select_all(FEATURES)[0]["status"] = "hacked"
        assert store.select_all(FEATURES)[0]["status"] == "pending"

    def test_delete(self, store):
        store.insert(FEATURES, {"id": "x"})
        assert store.delete(FEATURES, "x") is True
        assert store.delete(FEATURES, "x") is False
        assert store.select_all(FEATURES) == []

    def test_duplicate_id(self, store):
        store.insert(FEATURES, {"id": "x"})
        with pytest.raises(ValueError):
            store.insert(FEATURES, {"id": "x"})

    def test_upsert_by_key(self, store):
        store.upsert_by_key("engine_paused", "true")
        store.upsert_by_key("engine_paused", "false")
        rows = store.select_all(CONFIG)
        assert len(rows) == 1
        assert rows[0]["value"] == "false"

    def test_unknown_table(self):
        with pytest.raises(ValueError):
            MemoryStore().select_all("nope")

    def test_missing_values_sort_like_postgres_nulls(self, store):
        store.insert(FEATURES, {"id": "new", "created_at": None})
        store.insert(FEATURES, {"id": "old", "created_at": "2026-01-01T00:00:00"})
        store.insert(FEATURES, {"id": "blank"})
        ascending = [r["id"] for r in store.select_all(FEATURES, order_by="created_at")]
        descending = [r["id"] for r in store.select_all(FEATURES, order_by="-created_at")]
        assert ascending[0] == "old"
        assert descending[-1] == "old"
        assert set(ascending[1:]) == {"new", "blank"}
