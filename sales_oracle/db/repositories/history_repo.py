"""
Repository for saved period snapshots (``history_records``).

Saving is an upsert on the composite record id: re-saving the same store and
period overwrites the stored snapshot instead of adding a duplicate.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Optional

from sales_oracle.db.repositories.base import BaseRepository
from sales_oracle.models.history import HISTORY_TYPES, HistoryBook, HistoryRecord, store_key
from sales_oracle.models.oracle import OracleData
from sales_oracle.taxonomy.classification import PeriodType

logger = logging.getLogger(__name__)


class HistoryRepository(BaseRepository):
    """Read/write access to the ``history_records`` table."""

    def upsert(self, record: HistoryRecord) -> str:
        """Insert ``record`` or replace the snapshot stored under its id.

        Args:
            record: The ``HistoryRecord`` to persist.

        Returns:
            The record id.
        """
        self.execute(
            """
            INSERT INTO history_records (
                record_id, store_key, granularity, data_referencia, payload, saved_at
            ) VALUES (?, ?, ?, ?, ?, strftime('%Y-%m-%dT%H:%M:%SZ', 'now'))
            ON CONFLICT(record_id) DO UPDATE SET
                store_key       = excluded.store_key,
                granularity     = excluded.granularity,
                data_referencia = excluded.data_referencia,
                payload         = excluded.payload,
                saved_at        = excluded.saved_at;
            """,
            (
                record.id,
                store_key(record.dados.store.name),
                record.tipo.value,
                record.data_referencia,
                json.dumps(record.dados.to_json_dict(), ensure_ascii=False),
            ),
        )
        logger.info("Saved history record %s", record.id)
        return record.id

    def get(self, record_id: str) -> Optional[HistoryRecord]:
        row = self.fetchone(
            "SELECT * FROM history_records WHERE record_id = ?;", (record_id,)
        )
        return _row_to_record(row) if row else None

    def list_for(
        self,
        store_name: str,
        granularity: PeriodType | str,
    ) -> list[HistoryRecord]:
        """All saved records of one store and granularity, oldest first.

        Args:
            store_name: Store display name (normalised to its key).
            granularity: ``daily``, ``weekly`` or ``monthly``.

        Returns:
            Records ordered by ``data_referencia``; empty for ``custom``.
        """
        granularity = PeriodType(granularity)
        if granularity not in HISTORY_TYPES:
            return []
        rows = self.fetchall(
            """
            SELECT * FROM history_records
            WHERE store_key = ? AND granularity = ?
            ORDER BY data_referencia, record_id;
            """,
            (store_key(store_name), granularity.value),
        )
        return [_row_to_record(r) for r in rows]

    def recent_for(
        self,
        store_name: str,
        granularity: PeriodType | str,
        limit: int,
    ) -> list[HistoryRecord]:
        """The ``limit`` most recent records, still returned oldest first."""
        if limit <= 0:
            return []
        return self.list_for(store_name, granularity)[-limit:]

    def delete(self, record_id: str) -> bool:
        """Delete one record; returns ``False`` when the id was not stored."""
        cursor = self.execute(
            "DELETE FROM history_records WHERE record_id = ?;", (record_id,)
        )
        deleted = cursor.rowcount > 0
        if deleted:
            logger.info("Deleted history record %s", record_id)
        return deleted

    def load_book(self, store_name: str) -> HistoryBook:
        """Every saved record of a store, partitioned by granularity."""
        return HistoryBook(**{
            tipo.value: tuple(self.list_for(store_name, tipo))
            for tipo in HISTORY_TYPES
        })

    def count(self, store_name: Optional[str] = None) -> int:
        """Number of stored records, optionally for one store only."""
        if store_name is None:
            row = self.fetchone("SELECT COUNT(*) AS n FROM history_records;")
        else:
            row = self.fetchone(
                "SELECT COUNT(*) AS n FROM history_records WHERE store_key = ?;",
                (store_key(store_name),),
            )
        assert row is not None
        return int(row["n"])


def _row_to_record(row: sqlite3.Row) -> HistoryRecord:
    return HistoryRecord(
        id=row["record_id"],
        tipo=PeriodType(row["granularity"]),
        data_referencia=row["data_referencia"],
        dados=OracleData.model_validate(json.loads(row["payload"])),
    )
