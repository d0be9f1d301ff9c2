"""Amount and currency parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

from balancebook.domain.errors import ValidationError

CURRENCY_CODE_PATTERN = re.compile(r"^[A-Z0-9]{2,10}$")
PERIOD_PATTERN = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "-$123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValidationError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValidationError("Empty amount string")

    # Remove whitespace
    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols
    amount_str = re.sub(r"[$€£¥]", "", amount_str)

    # Remove commas
    amount_str = amount_str.replace(",", "")

    # Remove whitespace again
    amount_str = amount_str.strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValidationError(f"Could not parse amount '{amount_str}'") from e
    if not amount.is_finite():
        raise ValidationError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount


def to_decimal(value: Decimal | int | str, field_name: str = "amount") -> Decimal:
    """Coerce an int, str or Decimal money value to Decimal.

    Floats are rejected so binary rounding never reaches a money field.
    """
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValidationError(f"Invalid {field_name}: {value}")
        return value
    if isinstance(value, bool) or isinstance(value, float):
        raise ValidationError(f"Invalid {field_name}: use Decimal or str, not {type(value).__name__}")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, str):
        return parse_amount(value)
    raise ValidationError(f"Invalid {field_name}: {value!r}")


def parse_currency_code(code: str) -> str:
    """Normalize and validate a currency code such as "usd" or "USDT".

    Raises:
        ValidationError: If the code is empty or malformed
    """
    if code is None or not str(code).strip():
        raise ValidationError("Currency code is required")
    normalized = str(code).strip().upper()
    if not CURRENCY_CODE_PATTERN.match(normalized):
        raise ValidationError(f"Invalid currency code '{code}'")
    return normalized


def parse_period(period: str) -> str:
    """Validate a calendar-month period in "YYYY-MM" form."""
    period = (period or "").strip()
    if not PERIOD_PATTERN.match(period):
        raise ValidationError(f"Invalid period '{period}': expected YYYY-MM")
    return period
