"""Tests for sales_oracle.utils.locale_br."""

from __future__ import annotations

import pytest

from sales_oracle.utils.locale_br import (
    format_currency_br,
    format_number_br,
    format_percent_br,
)


@pytest.mark.parametrize(
    "value, decimals, expected",
    [
        (1234567.891, 0, "1.234.568"),
        (1234567.891, 2, "1.234.567,89"),
        (0, 0, "0"),
        (-1500, 0, "-1.500"),
    ],
)
def test_format_number_br(value, decimals, expected) -> None:
    assert format_number_br(value, decimals) == expected


@pytest.mark.parametrize("value", [None, float("nan"), float("inf")])
def test_format_number_br_degenerate(value) -> None:
    assert format_number_br(value) == "0"


def test_format_percent_br() -> None:
    assert format_percent_br(12.345) == "12,3%"
    assert format_percent_br(1000) == "1.000,0%"


def test_format_currency_br() -> None:
    assert format_currency_br(1234.6) == "R$ 1.235"
    assert format_currency_br(1234.6, show_symbol=False) == "1.235"
    assert format_currency_br(10.5, decimals=2) == "R$ 10,50"
