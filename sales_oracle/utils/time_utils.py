"""
Date helpers for period labelling and history ordering.

Key concepts:
  - ISO-8601 week numbering: weeks start on Monday and week 1 is the week
    containing the year's first Thursday, so early-January dates can belong
    to week 52/53 of the previous year and late-December dates to week 1.
  - Brazilian day-first rendering (``DD/MM/YYYY``) for every user-facing label.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

PT_BR_MONTHS: tuple[str, ...] = (
    "Janeiro", "Fevereiro", "Março", "Abril", "Maio", "Junho",
    "Julho", "Agosto", "Setembro", "Outubro", "Novembro", "Dezembro",
)


def iso_week_number(d: date) -> int:
    """Return the ISO-8601 week number (1–53) of ``d``.

    Example:
        ``date(2025, 1, 6)`` is the Monday after 2025-01-01 (a Wednesday);
        week 1 started on 2024-12-30, so the result is ``2``.
    """
    return d.isocalendar().week


def format_date_br(d: date) -> str:
    """Render ``d`` as ``DD/MM/YYYY``."""
    return f"{d.day:02d}/{d.month:02d}/{d.year:04d}"


def month_name_pt(month: int | None) -> str:
    """Portuguese month name for a 1-based month; ``None``/0 counts as January.

    Out-of-range values fall back to the generic ``"Mês"``.
    """
    index = (month or 1) - 1
    if 0 <= index < len(PT_BR_MONTHS):
        return PT_BR_MONTHS[index]
    return "Mês"


def utc_now() -> datetime:
    """Current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


def to_iso_utc(dt: datetime) -> str:
    """Format an aware datetime as ``YYYY-MM-DDTHH:MM:SSZ``."""
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
