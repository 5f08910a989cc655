"""
In-memory store: used by the tests and when no Postgres is configured.

Rows are kept in insertion order per table and copied on the way in and
out, so callers can never mutate stored state through a returned dict.
"""

from __future__ import annotations

import copy
import logging
import threading
from datetime import datetime, timezone
from typing import Any

from features.store.base import CONFIG, TABLES, check_table, split_order

log = logging.getLogger(__name__)


class MemoryStore:
    """Dict-backed Store. Thread-safe per call, like a single DB connection."""

    name = "memory"

    def __init__(self) -> None:
        self._tables: dict[str, list[dict[str, Any]]] = {t: [] for t in TABLES}
        self._lock = threading.Lock()

    def select_all(
        self,
        table: str,
        order_by: str | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        check_table(table)
        with self._lock:
            rows = [copy.deepcopy(r) for r in self._tables[table]]
        column, descending = split_order(order_by)
        if column:
            # None sorts last ascending, first descending (Postgres NULLS default)
            rows.sort(
                key=lambda r: (r.get(column) is None, r.get(column)),
                reverse=descending,
            )
        if limit is not None:
            rows = rows[:limit]
        return rows

    def update_by_id(
        self,
        table: str,
        record_id: str,
        patch: dict[str, Any],
        expect: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        check_table(table)
        with self._lock:
            for row in self._tables[table]:
                if row.get("id") != record_id:
                    continue
                if expect and any(row.get(k) != v for k, v in expect.items()):
                    return None
                row.update(copy.deepcopy(patch))
                return copy.deepcopy(row)
        return None

    def insert(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        check_table(table)
        row = copy.deepcopy(record)
        with self._lock:
            if any(r.get("id") == row.get("id") for r in self._tables[table]):
                raise ValueError(f"Duplicate id in {table}: {row.get('id')}")
            self._tables[table].append(row)
        return copy.deepcopy(row)

    def delete(self, table: str, record_id: str) -> bool:
        check_table(table)
        with self._lock:
            rows = self._tables[table]
            for i, row in enumerate(rows):
                if row.get("id") == record_id:
                    del rows[i]
                    return True
        return False

    def upsert_by_key(self, key: str, value: str) -> None:
        now = datetime.now(timezone.utc).isoformat()
        with self._lock:
            for row in self._tables[CONFIG]:
                if row["key"] == key:
                    row["value"] = value
                    row["updated_at"] = now
                    return
            self._tables[CONFIG].append({"key": key, "value": value, "updated_at": now})
