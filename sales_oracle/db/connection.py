"""
SQLite connection for the saved-period history store.

The store is written by ``process --save`` and read by ``process``,
``compare`` and ``history-trend``. Each CLI command opens one short
connection, so WAL mode only matters when a host process reads history while
a save is in flight; it can be turned off with ``database.wal_mode = false``.

Usage::

    from sales_oracle.db.connection import get_connection

    with get_connection("data/db/sales_oracle.db") as conn:
        HistoryRepository(conn).upsert(record)
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

logger = logging.getLogger(__name__)


@contextmanager
def get_connection(
    db_path: str,
    wal_mode: bool = True,
    busy_timeout_ms: int = 5000,
) -> Generator[sqlite3.Connection, None, None]:
    """Yield a connection to the history database.

    Rows come back as ``sqlite3.Row`` so ``HistoryRepository`` reads columns
    by name. The upserts made inside the block are committed together on a
    clean exit and rolled back if the block raises.

    Args:
        db_path: Path to the database file; parent directories are created.
            ``":memory:"`` opens a throwaway in-memory database.
        wal_mode: Enable WAL journal mode.
        busy_timeout_ms: Milliseconds to wait on a locked database.

    Raises:
        sqlite3.OperationalError: If the database cannot be opened or stays locked.
    """
    if db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path, timeout=busy_timeout_ms / 1000)
    conn.row_factory = sqlite3.Row

    try:
        conn.execute(f"PRAGMA busy_timeout = {busy_timeout_ms};")
        if wal_mode:
            conn.execute("PRAGMA journal_mode = WAL;")

        yield conn
        conn.commit()

    except Exception:
        conn.rollback()
        logger.debug("Rolled back history write on %s", db_path)
        raise

    finally:
        conn.close()
