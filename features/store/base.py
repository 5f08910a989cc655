"""
Store interface shared by the Postgres and in-memory backends.

The core only ever talks to a Store: it reads whole tables, applies
filtered updates by id, inserts, deletes, and upserts config keys.
There are no cross-row transactions.
"""

from __future__ import annotations

from typing import Any, Protocol

# Logical table names
FEATURES = "features"
CONFIG = "config"
LOGS = "logs"
SESSIONS = "sessions"

TABLES = (FEATURES, CONFIG, LOGS, SESSIONS)


class Store(Protocol):
    """Persistent record store keyed by record id (config: by key)."""

    name: str

    def select_all(
        self,
        table: str,
        order_by: str | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Return every row of ``table``.

        ``order_by`` is a column name, prefixed with ``-`` for descending.
        Rows without an explicit order come back in insertion order.
        """
        ...

    def update_by_id(
        self,
        table: str,
        record_id: str,
        patch: dict[str, Any],
        expect: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """Apply ``patch`` to one row and return the updated row.

        When ``expect`` is given the update only applies if every listed
        column currently holds the listed value. Returns None when no row
        matched (missing id or failed expectation).
        """
        ...

    def insert(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        ...

    def delete(self, table: str, record_id: str) -> bool:
        """Remove a row; returns False if it did not exist."""
        ...

    def upsert_by_key(self, key: str, value: str) -> None:
        """Insert or replace one config row."""
        ...


def check_table(table: str) -> None:
    if table not in TABLES:
        raise ValueError(f"Unknown table: {table}")


def split_order(order_by: str | None) -> tuple[str | None, bool]:
    """'-created_at' → ('created_at', True)."""
    if not order_by:
        return None, False
    if order_by.startswith("-"):
        return order_by[1:], True
    return order_by, False
