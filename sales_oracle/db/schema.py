"""
SQLite schema for saved period snapshots.

One table holds every saved ``HistoryRecord``:

  history_records
    record_id        composite key (``STORENAME-YEAR-TYPE-SUBID``), primary key
    store_key        store name upper-cased without whitespace
    granularity      daily | weekly | monthly (custom ranges are never saved)
    data_referencia  ISO anchor date, used for chronological ordering
    payload          the processed snapshot as camelCase JSON
    saved_at         last write time (UTC)

All statements use ``IF NOT EXISTS`` so ``apply_schema()`` is idempotent.
"""

from __future__ import annotations

import logging
import sqlite3

logger = logging.getLogger(__name__)

# ── DDL statements ─────────────────────────────────────────────────────────────

_DDL_HISTORY_RECORDS = """
CREATE TABLE IF NOT EXISTS history_records (
    record_id        TEXT    PRIMARY KEY,
    store_key        TEXT    NOT NULL,
    granularity      TEXT    NOT NULL CHECK (granularity IN ('daily', 'weekly', 'monthly')),
    data_referencia  TEXT    NOT NULL,
    payload          TEXT    NOT NULL,
    saved_at         TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now'))
);
CREATE INDEX IF NOT EXISTS idx_history_store_granularity
    ON history_records (store_key, granularity, data_referencia);
"""

_ALL_DDL = [
    _DDL_HISTORY_RECORDS,
]

ALL_TABLE_NAMES = [
    "history_records",
]


def apply_schema(conn: sqlite3.Connection) -> None:
    """Create every table and index on ``conn``; safe to call repeatedly."""
    logger.debug("Applying schema to database...")

    for ddl in _ALL_DDL:
        for statement in _split_ddl(ddl):
            conn.execute(statement)

    conn.commit()
    logger.info("Schema applied: %d table(s), indexes created/verified.", len(ALL_TABLE_NAMES))


def _split_ddl(ddl: str) -> list[str]:
    """Split a multi-statement DDL block on semicolons."""
    return [s.strip() for s in ddl.split(";") if s.strip()]


def get_existing_tables(conn: sqlite3.Connection) -> list[str]:
    """Table names present in the database, sorted alphabetically."""
    rows = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name;"
    ).fetchall()
    return [row["name"] for row in rows]


def get_existing_indexes(conn: sqlite3.Connection) -> list[str]:
    """Index names present in the database, sorted alphabetically."""
    rows = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='index' ORDER BY name;"
    ).fetchall()
    return [row["name"] for row in rows]
