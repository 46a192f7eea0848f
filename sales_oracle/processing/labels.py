"""
Human-readable period labels (pt-BR).

    daily    → ``06/01/2025``
    monthly  → ``Janeiro/2025``
    weekly   → ``Semana 02 – 06/01/2025 a 12/01/2025``
    custom   → ``06/01/2025 a 20/01/2025``

Missing fields never raise: the label falls back to a placeholder and
scoring proceeds with whatever numbers are present.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from sales_oracle.models.period import Period
from sales_oracle.taxonomy.classification import PeriodType
from sales_oracle.utils.time_utils import format_date_br, iso_week_number, month_name_pt

logger = logging.getLogger(__name__)

MISSING_DATE = "Data não informada"
MISSING_RANGE = "Intervalo não informado"
UNDEFINED_PERIOD = "Período não definido"
PERIOD_ERROR = "Erro no período"


def generate_period_label(period: Period, today: Optional[date] = None) -> str:
    """Build the display label for ``period``.

    Args:
        period: The reporting window.
        today:  Reference date for a monthly period without ``year``
            (defaults to the current date).

    Returns:
        The label, or one of the placeholder strings above.
    """
    try:
        if period.type == PeriodType.DAILY:
            if period.date is None:
                return MISSING_DATE
            return format_date_br(period.date)

        if period.type == PeriodType.MONTHLY:
            year = period.year or (today or date.today()).year
            return f"{month_name_pt(period.month)}/{year}"

        if period.type in (PeriodType.WEEKLY, PeriodType.CUSTOM):
            if period.start_date is None or period.end_date is None:
                return MISSING_RANGE
            span = f"{format_date_br(period.start_date)} a {format_date_br(period.end_date)}"
            if period.type == PeriodType.CUSTOM:
                return span
            return f"Semana {iso_week_number(period.start_date):02d} – {span}"

        return UNDEFINED_PERIOD
    except (TypeError, ValueError, AttributeError):
        logger.warning("Could not build label for period %r", period, exc_info=True)
        return PERIOD_ERROR
