"""
Tests for sales_oracle/models/history.py.

What we test
------------
build_history_id():
  - STORENAME is upper-cased with all whitespace removed.
  - daily → calendar year + MMDD; weekly → ISO year + ISO week;
    monthly → year + month.
  - Custom periods and missing fields raise ``ValueError``.
HistoryRecord / HistoryBook:
  - tipo must match the snapshot's period type and can't be custom.
  - upsert replaces same-id records; remove is a no-op when absent.
"""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from sales_oracle.models.history import (
    HistoryBook,
    HistoryRecord,
    build_history_id,
    make_history_record,
    store_key,
)
from sales_oracle.models.period import Period
from sales_oracle.taxonomy.classification import PeriodType


class TestHistoryId:
    def test_store_key(self):
        assert store_key(" Loja\tCentro  Sul ") == "LOJACENTROSUL"

    def test_daily(self):
        p = Period(type="daily", date=date(2025, 3, 7))
        assert build_history_id("Loja Centro", p) == "LOJACENTRO-2025-DAILY-0307"

    def test_weekly_iso_week(self):
        p = Period(type="weekly", start_date=date(2025, 1, 6), end_date=date(2025, 1, 12))
        assert build_history_id("Loja Centro", p) == "LOJACENTRO-2025-WEEKLY-02"

    def test_weekly_uses_iso_year(self):
        p = Period(type="weekly", start_date=date(2024, 12, 30), end_date=date(2025, 1, 5))
        assert build_history_id("Loja Centro", p) == "LOJACENTRO-2025-WEEKLY-01"

    def test_monthly(self):
        p = Period(type="monthly", month=2, year=2025)
        assert build_history_id("Loja Centro", p) == "LOJACENTRO-2025-MONTHLY-02"

    def test_custom_raises(self):
        p = Period(type="custom", start_date=date(2025, 1, 1), end_date=date(2025, 1, 9))
        with pytest.raises(ValueError, match="Custom"):
            build_history_id("Loja Centro", p)

    def test_missing_fields_raise(self):
        with pytest.raises(ValueError, match="month"):
            build_history_id("Loja Centro", Period(type="monthly", month=2))

    def test_deterministic(self, make_snapshot):
        a = make_history_record(make_snapshot(80, month=2))
        b = make_history_record(make_snapshot(95, month=2))
        assert a.id == b.id
        assert a.data_referencia == "2025-02-01"


class TestHistoryRecord:
    def test_tipo_mismatch_raises(self, make_snapshot):
        with pytest.raises(ValidationError, match="does not match"):
            HistoryRecord(id="X", tipo=PeriodType.DAILY, dados=make_snapshot())

    def test_custom_tipo_raises(self, make_snapshot):
        with pytest.raises(ValidationError, match="cannot have tipo"):
            HistoryRecord(id="X", tipo=PeriodType.CUSTOM, dados=make_snapshot())


class TestHistoryBook:
    def test_upsert_appends_then_replaces(self, make_snapshot):
        book = HistoryBook().upsert(make_history_record(make_snapshot(80, month=1)))
        book = book.upsert(make_history_record(make_snapshot(90, month=2)))
        assert len(book.monthly) == 2

        replacement = make_history_record(make_snapshot(99, month=1))
        book = book.upsert(replacement)
        assert len(book.monthly) == 2
        assert book.get(replacement.id).dados.store.pillars.mercantil.realized == pytest.approx(39600)

    def test_remove(self, make_snapshot):
        record = make_history_record(make_snapshot(80, month=1))
        book = HistoryBook().upsert(record)
        assert book.remove(record.id).monthly == ()
        assert book.remove("missing").monthly == (record,)

    def test_records_for_custom_is_empty(self):
        assert HistoryBook().records_for("custom") == ()

    def test_partition_enforced(self, make_snapshot):
        record = make_history_record(make_snapshot(80, month=1))
        with pytest.raises(ValidationError, match="placed in the daily list"):
            HistoryBook(daily=(record,))
