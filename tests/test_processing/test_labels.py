"""
Tests for sales_oracle/processing/labels.py and sales_oracle/utils/time_utils.py.

What we test
------------
generate_period_label():
  - daily / monthly / weekly / custom shapes.
  - Weekly labels use the ISO week of the start date, zero-padded.
  - Missing fields produce placeholders instead of raising.
  - A monthly period without a year falls back to ``today``'s year.
time_utils:
  - ISO week numbering across the year boundary.
  - Month names and the out-of-range fallback.
"""

from __future__ import annotations

from datetime import date

import pytest

from sales_oracle.models.period import Period
from sales_oracle.processing.labels import (
    MISSING_DATE,
    MISSING_RANGE,
    generate_period_label,
)
from sales_oracle.utils.time_utils import format_date_br, iso_week_number, month_name_pt


class TestGeneratePeriodLabel:
    def test_daily(self):
        p = Period(type="daily", date=date(2025, 3, 7))
        assert generate_period_label(p) == "07/03/2025"

    def test_monthly(self):
        p = Period(type="monthly", month=2, year=2025)
        assert generate_period_label(p) == "Fevereiro/2025"

    def test_monthly_without_year_uses_today(self):
        p = Period(type="monthly", month=12)
        assert generate_period_label(p, today=date(2024, 5, 1)) == "Dezembro/2024"

    def test_weekly(self):
        p = Period(type="weekly", start_date=date(2025, 1, 6), end_date=date(2025, 1, 12))
        assert generate_period_label(p) == "Semana 02 – 06/01/2025 a 12/01/2025"

    def test_weekly_across_year_boundary(self):
        p = Period(type="weekly", start_date=date(2024, 12, 30), end_date=date(2025, 1, 5))
        assert generate_period_label(p).startswith("Semana 01 – ")

    def test_custom(self):
        p = Period(type="custom", start_date=date(2025, 1, 6), end_date=date(2025, 1, 20))
        assert generate_period_label(p) == "06/01/2025 a 20/01/2025"

    def test_daily_missing_date(self):
        assert generate_period_label(Period(type="daily")) == MISSING_DATE

    @pytest.mark.parametrize("kind", ["weekly", "custom"])
    def test_range_missing_end(self, kind):
        p = Period(type=kind, start_date=date(2025, 1, 6))
        assert generate_period_label(p) == MISSING_RANGE

    def test_blank_form_fields_are_missing(self):
        p = Period.model_validate({"type": "daily", "date": ""})
        assert generate_period_label(p) == MISSING_DATE


class TestTimeUtils:
    @pytest.mark.parametrize(
        "d, week",
        [
            (date(2025, 1, 6), 2),
            (date(2024, 12, 30), 1),
            (date(2021, 1, 1), 53),
        ],
    )
    def test_iso_week_number(self, d, week):
        assert iso_week_number(d) == week

    def test_format_date_br(self):
        assert format_date_br(date(2025, 1, 6)) == "06/01/2025"

    def test_month_names(self):
        assert month_name_pt(1) == "Janeiro"
        assert month_name_pt(3) == "Março"
        assert month_name_pt(None) == "Janeiro"

    def test_month_out_of_range(self):
        assert month_name_pt(13) == "Mês"
