"""
Persisted period snapshots and the per-store history container.

Record ids are deterministic composite keys, never random::

    STORENAME-YEAR-TYPE-SUBID

  - ``STORENAME``: store name upper-cased with all whitespace removed.
  - ``YEAR``/``SUBID`` by type:
      daily   → calendar year, ``MMDD``
      weekly  → ISO year, two-digit ISO week of the start date
      monthly → year, two-digit month

Saving the same store + period again produces the same id, so a save
overwrites the previous snapshot in place.

``HistoryBook`` holds three independent sequences (daily / weekly / monthly).
The partition is enforced on construction: a record can only live in the
sequence matching its ``tipo``, and a custom range can never be stored.
"""

from __future__ import annotations

import re
from typing import Optional

from pydantic import model_validator

from sales_oracle.models.base import OracleModel
from sales_oracle.models.oracle import OracleData
from sales_oracle.models.period import Period
from sales_oracle.taxonomy.classification import PeriodType

_WHITESPACE = re.compile(r"\s+")

HISTORY_TYPES: tuple[PeriodType, ...] = (
    PeriodType.DAILY,
    PeriodType.WEEKLY,
    PeriodType.MONTHLY,
)


class HistoryRecord(OracleModel):
    """A saved, fully processed period.

    Attributes:
        id: Composite key, see ``build_history_id``.
        tipo: Period granularity (never ``custom``).
        data_referencia: ISO date anchoring the period (day, week start or
            first of the month).
        dados: The processed ``OracleResult`` snapshot.
    """

    id: str
    tipo: PeriodType
    data_referencia: str = ""
    dados: OracleData

    @model_validator(mode="after")
    def validate_granularity(self) -> "HistoryRecord":
        if self.tipo not in HISTORY_TYPES:
            raise ValueError(f"History records cannot have tipo '{self.tipo}'.")
        if self.dados.store.period.type != self.tipo:
            raise ValueError(
                f"Record tipo '{self.tipo}' does not match its period type "
                f"'{self.dados.store.period.type}'."
            )
        return self


class HistoryBook(OracleModel):
    """All saved snapshots of one store, partitioned by granularity."""

    daily: tuple[HistoryRecord, ...] = ()
    weekly: tuple[HistoryRecord, ...] = ()
    monthly: tuple[HistoryRecord, ...] = ()

    @model_validator(mode="after")
    def validate_partition(self) -> "HistoryBook":
        for tipo in HISTORY_TYPES:
            for record in self.records_for(tipo):
                if record.tipo != tipo:
                    raise ValueError(
                        f"Record '{record.id}' ({record.tipo}) placed in the {tipo} list."
                    )
        return self

    def records_for(self, tipo: PeriodType | str) -> tuple[HistoryRecord, ...]:
        """Return the sequence for ``tipo`` (empty for ``custom``)."""
        tipo = PeriodType(tipo)
        if tipo == PeriodType.CUSTOM:
            return ()
        return getattr(self, tipo.value)

    def get(self, record_id: str) -> Optional[HistoryRecord]:
        for tipo in HISTORY_TYPES:
            for record in self.records_for(tipo):
                if record.id == record_id:
                    return record
        return None

    def upsert(self, record: HistoryRecord) -> "HistoryBook":
        """Return a new book with ``record`` added, replacing any same-id record."""
        current = self.records_for(record.tipo)
        if any(r.id == record.id for r in current):
            updated = tuple(record if r.id == record.id else r for r in current)
        else:
            updated = current + (record,)
        return self.model_copy(update={record.tipo.value: updated})

    def remove(self, record_id: str) -> "HistoryBook":
        """Return a new book without the record ``record_id`` (no-op if absent)."""
        changes = {
            tipo.value: tuple(r for r in self.records_for(tipo) if r.id != record_id)
            for tipo in HISTORY_TYPES
        }
        return self.model_copy(update=changes)


# ── Id construction ───────────────────────────────────────────────────────────


def store_key(store_name: str) -> str:
    """Upper-case ``store_name`` and strip every whitespace character."""
    return _WHITESPACE.sub("", store_name).upper()


def build_history_id(store_name: str, period: Period) -> str:
    """Return the composite ``STORENAME-YEAR-TYPE-SUBID`` key for a period.

    Raises:
        ValueError: For custom periods, or when the type-specific fields
            needed to build the key are missing.
    """
    key = store_key(store_name)
    if period.type == PeriodType.DAILY:
        if period.date is None:
            raise ValueError("Daily period requires 'date' to build a history id.")
        year, sub_id = period.date.year, f"{period.date.month:02d}{period.date.day:02d}"
    elif period.type == PeriodType.WEEKLY:
        if period.start_date is None:
            raise ValueError("Weekly period requires 'start_date' to build a history id.")
        iso = period.start_date.isocalendar()
        year, sub_id = iso.year, f"{iso.week:02d}"
    elif period.type == PeriodType.MONTHLY:
        if period.month is None or period.year is None:
            raise ValueError("Monthly period requires 'month' and 'year' to build a history id.")
        year, sub_id = period.year, f"{period.month:02d}"
    else:
        raise ValueError("Custom periods cannot be saved to history.")
    return f"{key}-{year}-{period.type.value.upper()}-{sub_id}"


def make_history_record(result: OracleData) -> HistoryRecord:
    """Wrap a processed result as a ``HistoryRecord`` ready to persist."""
    period = result.store.period
    return HistoryRecord(
        id=build_history_id(result.store.name, period),
        tipo=period.type,
        data_referencia=period.sort_key(),
        dados=result,
    )
