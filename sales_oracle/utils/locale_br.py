"""
Brazilian number rendering: ``.`` for thousands, ``,`` for decimals.

Used for every number embedded in alert text, summaries and prompts so the
output reads the same whatever the process locale is.
"""

from __future__ import annotations

import math

_SWAP = str.maketrans({",": ".", ".": ","})


def format_number_br(value: float | None, decimals: int = 0) -> str:
    """``1234567.891`` → ``"1.234.568"`` (or ``"1.234.567,89"`` with 2 decimals)."""
    if value is None or math.isnan(value) or math.isinf(value):
        return "0"
    return f"{value:,.{decimals}f}".translate(_SWAP)


def format_percent_br(value: float | None) -> str:
    """One-decimal percentage: ``12.345`` → ``"12,3%"``."""
    return f"{format_number_br(value, 1)}%"


def format_currency_br(value: float | None, show_symbol: bool = True, decimals: int = 0) -> str:
    """Currency without cents by default: ``1234.6`` → ``"R$ 1.235"``."""
    formatted = format_number_br(value, decimals)
    return f"R$ {formatted}" if show_symbol else formatted
