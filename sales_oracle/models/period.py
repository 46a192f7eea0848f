"""
Reporting window model.

A ``Period`` is identified by its type plus type-specific fields:

  daily    → ``date``
  weekly   → ``start_date`` + ``end_date``
  monthly  → ``month`` + ``year``
  custom   → ``start_date`` + ``end_date``

``label`` is derived (see ``sales_oracle.processing.labels``) and recomputed
every time a period is processed; whatever the caller sends is overwritten.
"""

from __future__ import annotations

import datetime as dt
from typing import Any, Optional

from pydantic import field_validator

from sales_oracle.models.base import Number, OracleModel
from sales_oracle.taxonomy.classification import PeriodType


class Period(OracleModel):
    """One reporting window.

    Attributes:
        type: Granularity of the window.
        label: Human-readable label (derived).
        date: Day of a daily period.
        start_date: First day of a weekly/custom period.
        end_date: Last day of a weekly/custom period.
        month: 1-based month of a monthly period.
        year: Year of a monthly period.
        business_days_total: Business days in the full window (>= 0).
        business_days_elapsed: Business days already closed (>= 0).
    """

    type: PeriodType = PeriodType.MONTHLY
    label: str = ""
    date: Optional[dt.date] = None
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    month: Optional[int] = None
    year: Optional[int] = None
    business_days_total: Number = 0.0
    business_days_elapsed: Number = 0.0

    @field_validator("date", "start_date", "end_date", "month", "year", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        """Empty form fields arrive as ``""``; treat them as missing."""
        if v == "" or v == 0:
            return None
        return v

    def sort_key(self) -> str:
        """Chronological key: start date, else day, else the first of the month."""
        if self.start_date is not None:
            return self.start_date.isoformat()
        if self.date is not None:
            return self.date.isoformat()
        return f"{self.year or 0:04d}-{self.month or 0:02d}-01"

    def same_window_as(self, other: "Period") -> bool:
        """True when both periods describe the same window of the same type.

        Custom ranges never match: they are ad-hoc and not part of history.
        """
        if self.type != other.type:
            return False
        if self.type == PeriodType.MONTHLY:
            return self.month == other.month and self.year == other.year
        if self.type == PeriodType.WEEKLY:
            return self.start_date == other.start_date and self.end_date == other.end_date
        if self.type == PeriodType.DAILY:
            return self.date == other.date
        return False
