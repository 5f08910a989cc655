"""
Postgres backing store for the feature queue.

Tables:
  forge_features : one row per feature in the backlog
  forge_config   : engine control plane, one row per key
  forge_logs     : append-only worker log (read-only here)
  forge_sessions : worker sessions (read-only here)

Every call is a single autocommit statement; nothing spans rows.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any

import psycopg2
import psycopg2.extras
from psycopg2 import sql

from features.errors import StoreError
from features.store.base import check_table, split_order

log = logging.getLogger(__name__)

TABLE_NAMES = {
    "features": "forge_features",
    "config": "forge_config",
    "logs": "forge_logs",
    "sessions": "forge_sessions",
}

# ── Schema ────────────────────────────────────────────────────────────

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS forge_features (
    id              TEXT PRIMARY KEY,
    name            TEXT NOT NULL,
    description     TEXT NOT NULL DEFAULT '',
    category        TEXT NOT NULL,
    priority        DOUBLE PRECISION NOT NULL,
    status          TEXT NOT NULL DEFAULT 'pending',
    instructions    TEXT,
    started_at      TIMESTAMPTZ,
    completed_at    TIMESTAMPTZ,
    error_message   TEXT,
    retry_count     INTEGER NOT NULL DEFAULT 0 CHECK (retry_count >= 0),
    created_at      TIMESTAMPTZ DEFAULT now()
);

CREATE TABLE IF NOT EXISTS forge_config (
    key             TEXT PRIMARY KEY,
    value           TEXT,
    updated_at      TIMESTAMPTZ DEFAULT now()
);

CREATE TABLE IF NOT EXISTS forge_logs (
    id              TEXT PRIMARY KEY,
    created_at      TIMESTAMPTZ DEFAULT now(),
    level           TEXT NOT NULL DEFAULT 'info',
    message         TEXT NOT NULL DEFAULT ''
);

CREATE TABLE IF NOT EXISTS forge_sessions (
    id                  TEXT PRIMARY KEY,
    status              TEXT NOT NULL,
    started_at          TIMESTAMPTZ DEFAULT now(),
    features_completed  INTEGER NOT NULL DEFAULT 0,
    features_failed     INTEGER NOT NULL DEFAULT 0
);

CREATE INDEX IF NOT EXISTS idx_forge_features_status ON forge_features(status);
CREATE INDEX IF NOT EXISTS idx_forge_features_priority ON forge_features(priority);
CREATE INDEX IF NOT EXISTS idx_forge_logs_created_at ON forge_logs(created_at);
"""


class PostgresStore:
    """Store backed by a single autocommit psycopg2 connection."""

    name = "postgres"

    def __init__(self, dsn: str):
        self.dsn = dsn
        self._conn: Any = None

    # ── Connection ────────────────────────────────────────────────────

    def _get_conn(self):
        """Get a Postgres connection (simple single-connection reuse)."""
        if self._conn is not None and not self._conn.closed:
            return self._conn
        self._conn = psycopg2.connect(self.dsn)
        self._conn.autocommit = True
        return self._conn

    @contextmanager
    def get_cursor(self):
        """Yield a dict cursor; driver errors surface as StoreError."""
        try:
            conn = self._get_conn()
            cur = conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor)
        except psycopg2.Error as e:
            raise StoreError("Could not connect to Postgres", details=str(e)) from e
        try:
            yield cur
        except psycopg2.Error as e:
            log.error("Postgres error: %s", e)
            raise StoreError("Postgres query failed", details=str(e)) from e
        finally:
            cur.close()

    def init_db(self) -> None:
        """Create tables if they don't exist."""
        with self.get_cursor() as cur:
            cur.execute(SCHEMA_SQL)
        log.info("Database schema initialized")

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    # ── Store operations ──────────────────────────────────────────────

    def select_all(
        self,
        table: str,
        order_by: str | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        check_table(table)
        query = sql.SQL("SELECT * FROM {}").format(sql.Identifier(TABLE_NAMES[table]))
        column, descending = split_order(order_by)
        if column:
            query += sql.SQL(" ORDER BY {} {}").format(
                sql.Identifier(column), sql.SQL("DESC" if descending else "ASC"),
            )
        params: tuple = ()
        if limit is not None:
            query += sql.SQL(" LIMIT %s")
            params = (limit,)
        with self.get_cursor() as cur:
            cur.execute(query, params)
            return [dict(row) for row in cur.fetchall()]

    def update_by_id(
        self,
        table: str,
        record_id: str,
        patch: dict[str, Any],
        expect: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        check_table(table)
        if not patch:
            raise ValueError("Empty patch")
        assignments = sql.SQL(", ").join(
            sql.SQL("{} = %s").format(sql.Identifier(k)) for k in patch
        )
        conditions = [sql.SQL("id = %s")]
        params: list[Any] = list(patch.values()) + [record_id]
        for k, v in (expect or {}).items():
            conditions.append(sql.SQL("{} = %s").format(sql.Identifier(k)))
            params.append(v)
        query = sql.SQL("UPDATE {} SET {} WHERE {} RETURNING *").format(
            sql.Identifier(TABLE_NAMES[table]),
            assignments,
            sql.SQL(" AND ").join(conditions),
        )
        with self.get_cursor() as cur:
            cur.execute(query, params)
            row = cur.fetchone()
            return dict(row) if row else None

    def insert(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        check_table(table)
        columns = list(record)
        query = sql.SQL("INSERT INTO {} ({}) VALUES ({}) RETURNING *").format(
            sql.Identifier(TABLE_NAMES[table]),
            sql.SQL(", ").join(sql.Identifier(c) for c in columns),
            sql.SQL(", ").join(sql.Placeholder() for _ in columns),
        )
        with self.get_cursor() as cur:
            cur.execute(query, [record[c] for c in columns])
            return dict(cur.fetchone())

    def delete(self, table: str, record_id: str) -> bool:
        check_table(table)
        query = sql.SQL("DELETE FROM {} WHERE id = %s").format(
            sql.Identifier(TABLE_NAMES[table]),
        )
        with self.get_cursor() as cur:
            cur.execute(query, (record_id,))
            return cur.rowcount > 0

    def upsert_by_key(self, key: str, value: str) -> None:
        with self.get_cursor() as cur:
            cur.execute("""
                INSERT INTO forge_config (key, value, updated_at)
                VALUES (%s, %s, now())
                ON CONFLICT (key) DO UPDATE SET
                    value = EXCLUDED.value,
                    updated_at = now()
            """, (key, value))
