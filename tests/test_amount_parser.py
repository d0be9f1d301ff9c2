"""Tests for amount, currency and period parsing."""

from decimal import Decimal

import pytest

from balancebook.domain.errors import ValidationError
from balancebook.utils.amount_parser import (
    parse_amount,
    parse_currency_code,
    parse_period,
    to_decimal,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("123.45", Decimal("123.45")),
        ("$1,234.56", Decimal("1234.56")),
        ("-$10", Decimal("-10")),
        ("(42.10)", Decimal("-42.10")),
        (" 0.00000001 ", Decimal("0.00000001")),
    ],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", "abc", "NaN", "Infinity"])
def test_parse_amount_rejects_garbage(raw):
    with pytest.raises(ValidationError):
        parse_amount(raw)


def test_to_decimal_accepts_exact_types():
    assert to_decimal(Decimal("1.10")) == Decimal("1.10")
    assert to_decimal(5) == Decimal("5")
    assert to_decimal("2.5") == Decimal("2.5")


def test_to_decimal_rejects_float_and_bool():
    with pytest.raises(ValidationError, match="not float"):
        to_decimal(0.1)
    with pytest.raises(ValidationError):
        to_decimal(True)
    with pytest.raises(ValidationError, match="cost"):
        to_decimal(None, "cost")


def test_parse_currency_code_normalizes():
    assert parse_currency_code(" usd ") == "USD"
    assert parse_currency_code("usdt") == "USDT"


@pytest.mark.parametrize("raw", ["", None, "U", "US D", "$$$", "ABCDEFGHIJK"])
def test_parse_currency_code_rejects_malformed(raw):
    with pytest.raises(ValidationError):
        parse_currency_code(raw)


def test_parse_period():
    assert parse_period("2024-01") == "2024-01"
    assert parse_period(" 2024-12 ") == "2024-12"
    for bad in ["2024-13", "2024-1", "24-01", "2024/01", ""]:
        with pytest.raises(ValidationError, match="YYYY-MM"):
            parse_period(bad)
