"""Utility functions for balancebook."""

from balancebook.utils.date_parser import parse_date, end_of_day, period_of
from balancebook.utils.amount_parser import parse_amount, parse_currency_code, parse_period

__all__ = [
    "parse_date",
    "end_of_day",
    "period_of",
    "parse_amount",
    "parse_currency_code",
    "parse_period",
]
