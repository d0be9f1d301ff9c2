"""Date parsing and date-boundary utilities."""

from datetime import date, datetime, time, timedelta
from typing import Optional, Union
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from balancebook.domain.errors import ValidationError

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

# Latest instant of a day as stored in timestamps (millisecond precision)
END_OF_DAY = time(23, 59, 59, 999000)


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "last month", "this year", etc.

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValidationError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    # Handle relative dates
    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    # Handle "last/this" + time period
    if date_str.startswith("last "):
        period = date_str[5:]
        if period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) - relativedelta(years=1)
        elif period == "week":
            # Monday of last week
            return today - timedelta(days=today.weekday() + 7)
        elif period in WEEKDAYS:
            # Last Monday, etc.; today never counts
            days_ago = (today.weekday() - WEEKDAYS.index(period)) % 7 or 7
            return today - timedelta(days=days_ago)

    elif date_str.startswith("this "):
        period = date_str[5:]
        if period == "month":
            return today.replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1)
        elif period == "week":
            return today - timedelta(days=today.weekday())

    # Try parsing as absolute date
    try:
        return date_parser.parse(date_str).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValidationError(f"Could not parse date '{date_str}': {e}") from e


def get_date_range(period: str) -> tuple[date, date]:
    """Get start and end dates for a named period.

    Args:
        period: this-month, this-year, this-week, last-month, last-year or last-week

    Returns:
        Tuple of (start_date, end_date), both inclusive

    Raises:
        ValidationError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()
    first_of_month = today.replace(day=1)
    first_of_year = today.replace(month=1, day=1)

    if period == "this-month":
        return (first_of_month, today)
    elif period == "this-year":
        return (first_of_year, today)
    elif period == "this-week":
        return (today - timedelta(days=today.weekday()), today)
    elif period == "last-month":
        # First day of last month to the day before the first of this one
        return ((today - relativedelta(months=1)).replace(day=1), first_of_month - timedelta(days=1))
    elif period == "last-year":
        # January 1 to December 31 of last year
        return (first_of_year - relativedelta(years=1), first_of_year - timedelta(days=1))
    elif period == "last-week":
        # Monday to Sunday of last week
        start_date = today - timedelta(days=today.weekday() + 7)
        return (start_date, start_date + timedelta(days=6))

    raise ValidationError(
        f"Unknown period: '{period}'. Supported periods: this-month, this-year, "
        "this-week, last-month, last-year, last-week"
    )


def start_of_day(value: Union[date, datetime]) -> datetime:
    """Return midnight of a date; datetimes are returned unchanged."""
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def end_of_day(value: Union[date, datetime]) -> datetime:
    """Return 23:59:59.999 of a date; datetimes are returned unchanged.

    A bare date used as an upper bound must include everything posted that
    day, while an explicit timestamp is already an exact inclusive bound.
    """
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, END_OF_DAY)


def period_of(value: Union[date, datetime]) -> str:
    """Return the "YYYY-MM" period containing a date."""
    return f"{value.year:04d}-{value.month:02d}"


def period_bounds(
    start: Optional[Union[date, datetime]], end: Optional[Union[date, datetime]]
) -> tuple[Optional[str], Optional[str]]:
    """Return the first and last "YYYY-MM" periods touched by a date range."""
    return (
        period_of(start) if start is not None else None,
        period_of(end) if end is not None else None,
    )


def validate_date_range(
    start: Optional[Union[date, datetime]], end: Optional[Union[date, datetime]]
) -> None:
    """Raise ValidationError when a range ends before it starts."""
    if start is None or end is None:
        return
    if start_of_day(start) > end_of_day(end):
        raise ValidationError(f"Invalid date range: {start} is after {end}")
