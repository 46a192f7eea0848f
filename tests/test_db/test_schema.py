"""Tests for SQLite schema — idempotency, table/index creation, constraints."""

from __future__ import annotations

import sqlite3

import pytest

from sales_oracle.db.connection import get_connection
from sales_oracle.db.schema import (
    ALL_TABLE_NAMES,
    apply_schema,
    get_existing_indexes,
    get_existing_tables,
)


class TestApplySchema:
    def test_all_tables_created(self, in_memory_db):
        tables = get_existing_tables(in_memory_db)
        for expected_table in ALL_TABLE_NAMES:
            assert expected_table in tables, (
                f"Expected table '{expected_table}' not found in database. "
                f"Found: {tables}"
            )

    def test_idempotent_double_apply(self, in_memory_db):
        """apply_schema() called twice must not raise errors."""
        apply_schema(in_memory_db)
        assert get_existing_tables(in_memory_db) == ["history_records"]

    def test_history_index_created(self, in_memory_db):
        assert "idx_history_store_granularity" in get_existing_indexes(in_memory_db)


class TestConstraints:
    def test_custom_granularity_rejected(self, in_memory_db):
        with pytest.raises(sqlite3.IntegrityError):
            in_memory_db.execute(
                """
                INSERT INTO history_records (record_id, store_key, granularity, data_referencia, payload)
                VALUES ('X', 'LOJA', 'custom', '2025-01-01', '{}');
                """
            )

    def test_saved_at_defaults(self, in_memory_db):
        in_memory_db.execute(
            """
            INSERT INTO history_records (record_id, store_key, granularity, data_referencia, payload)
            VALUES ('X', 'LOJA', 'daily', '2025-01-01', '{}');
            """
        )
        row = in_memory_db.execute("SELECT saved_at FROM history_records;").fetchone()
        assert row["saved_at"].endswith("Z")


class TestGetConnection:
    def test_file_database_pragmas(self, tmp_path):
        db_path = tmp_path / "nested" / "oracle.db"
        with get_connection(str(db_path), busy_timeout_ms=1234) as conn:
            assert conn.execute("PRAGMA journal_mode;").fetchone()[0] == "wal"
            assert conn.execute("PRAGMA busy_timeout;").fetchone()[0] == 1234
        assert db_path.exists()

    def test_wal_mode_off(self, tmp_path):
        with get_connection(str(tmp_path / "oracle.db"), wal_mode=False) as conn:
            assert conn.execute("PRAGMA journal_mode;").fetchone()[0] == "delete"

    def test_commits_on_clean_exit(self, tmp_path):
        db_path = str(tmp_path / "oracle.db")
        with get_connection(db_path) as conn:
            apply_schema(conn)
            conn.execute(
                "INSERT INTO history_records (record_id, store_key, granularity, data_referencia, payload) "
                "VALUES ('X', 'LOJA', 'daily', '2025-01-01', '{}');"
            )
        with get_connection(db_path) as conn:
            assert conn.execute("SELECT COUNT(*) FROM history_records;").fetchone()[0] == 1

    def test_rolls_back_on_error(self, tmp_path):
        db_path = str(tmp_path / "oracle.db")
        with get_connection(db_path) as conn:
            apply_schema(conn)
        with pytest.raises(RuntimeError):
            with get_connection(db_path) as conn:
                conn.execute(
                    "INSERT INTO history_records (record_id, store_key, granularity, data_referencia, payload) "
                    "VALUES ('X', 'LOJA', 'daily', '2025-01-01', '{}');"
                )
                raise RuntimeError("abort")
        with get_connection(db_path) as conn:
            assert conn.execute("SELECT COUNT(*) FROM history_records;").fetchone()[0] == 0
