"""
Money Utilities - Safe Decimal operations for monetary values.

Catalog prices arrive as display strings such as "Rs.3,990"; parse_price is the
single conversion rule shared by the cart engine and the catalog API.
"""
import re
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

Number = Union[str, int, float, Decimal]

# Default precision for money operations (2 decimal places)
MONEY_PRECISION = Decimal("0.01")

# Precision for integer currencies (PKR amounts are shown without paisa)
INTEGER_PRECISION = Decimal("1")

CURRENCY_SYMBOLS = {
    "PKR": "Rs.",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}

_NON_NUMERIC = re.compile(r"[^0-9.]")
# A point right after a letter ends a label such as "Rs."
_LABEL_POINT = re.compile(r"(?<=[A-Za-z])\.")
_LEADING_NUMBER = re.compile(r"\d+(?:\.\d*)?|\.\d+")


def to_decimal(value: Union[Number, None]) -> Decimal:
    """
    Convert any value to Decimal safely.

    Args:
        value: Value to convert (str, int, float, Decimal, or None)

    Returns:
        Decimal representation of the value, or Decimal("0") if None/invalid
        or not finite (NaN, Infinity)
    """
    if value is None:
        return Decimal("0")

    try:
        if isinstance(value, Decimal):
            result = value
        elif isinstance(value, float):
            # Go through str to avoid binary float artifacts
            result = Decimal(str(value))
        else:
            result = Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")

    return result if result.is_finite() else Decimal("0")


def parse_price(value: Union[Number, None]) -> Decimal:
    """
    Convert a catalog price to a numeric amount.

    Numbers pass through. Strings lose every character that is not a digit or
    a decimal point (a point right after a letter is label punctuation), and
    the leading number of what remains is parsed, so "Rs.3,990" becomes 3990,
    "Rs. 1,234.50" becomes 1234.50 and "$.99" becomes 0.99. Empty, unparsable
    or non-finite input yields 0.
    """
    if value is None or isinstance(value, bool):
        return Decimal("0")

    if isinstance(value, (int, float, Decimal)):
        return to_decimal(value)

    digits = _NON_NUMERIC.sub("", _LABEL_POINT.sub("", str(value)))
    match = _LEADING_NUMBER.match(digits)
    if not match:
        return Decimal("0")
    return to_decimal(match.group(0))


def round_money(value: Number, to_int: bool = False) -> Decimal:
    """
    Round monetary value to appropriate precision.

    Args:
        value: Value to round
        to_int: If True, round to whole units

    Returns:
        Rounded Decimal value
    """
    precision = INTEGER_PRECISION if to_int else MONEY_PRECISION
    return to_decimal(value).quantize(precision, rounding=ROUND_HALF_UP)


def format_money(value: Number, currency: str = "PKR") -> str:
    """
    Format monetary value with currency symbol.

    Whole amounts are shown without decimals ("Rs. 3,990"), fractional ones
    with two ("Rs. 1,234.50").
    """
    decimal_value = round_money(value)
    symbol = CURRENCY_SYMBOLS.get(currency, currency)

    if decimal_value == decimal_value.to_integral_value():
        formatted = f"{int(decimal_value):,}"
    else:
        formatted = f"{decimal_value:,.2f}"

    if currency in ("USD", "EUR", "GBP"):
        return f"{symbol}{formatted}"
    return f"{symbol} {formatted}"


def to_float(value: Number) -> float:
    """
    Convert Decimal to float for JSON serialization.

    Use only at API boundaries, not for internal calculations.
    """
    return float(to_decimal(value))


def multiply(value: Number, factor: Number) -> Decimal:
    """Safe multiplication of monetary value by a factor."""
    return to_decimal(value) * to_decimal(factor)
