#!/usr/bin/env python3
"""
Currency Display Formatting

Presentation boundary for amounts produced by the settlement engine. The engine
works in plain numbers at the configured precision; this module only turns those
numbers into display strings.

Supported Styles:
- VND: "1.250.000 VND" (dot grouping, comma decimals, trailing zeros dropped)
- USD: "$1,250.50" (always two decimals)
- EUR: "1.250,50 €" (always two decimals)
- Anything else: "1,250.5 GBP" (comma grouping, trailing zeros dropped)
"""

from decimal import ROUND_HALF_UP, Decimal

from .rounding import DEFAULT_PRECISION, RoundingMethod, round_amount

DEFAULT_CURRENCY = "VND"


def _group_thousands(digits: str, separator: str) -> str:
    """Insert a separator every three digits from the right."""
    groups = []
    while len(digits) > 3:
        groups.insert(0, digits[-3:])
        digits = digits[:-3]
    groups.insert(0, digits)
    return separator.join(groups)


def format_number(
    amount: float,
    max_decimals: int = DEFAULT_PRECISION,
    min_decimals: int = 0,
    thousands_sep: str = ",",
    decimal_sep: str = ".",
) -> str:
    """
    Format a number with grouping and a bounded number of decimals.

    Args:
        amount: Value to format
        max_decimals: Maximum fraction digits shown
        min_decimals: Minimum fraction digits shown (trailing zeros kept up to this)
        thousands_sep: Grouping separator
        decimal_sep: Decimal separator

    Returns:
        Formatted number string

    Examples:
        format_number(1234567.5) -> "1,234,567.5"
        format_number(1234567.5, thousands_sep=".", decimal_sep=",") -> "1.234.567,5"
        format_number(3, min_decimals=2) -> "3.00"
    """
    quantum = Decimal(1).scaleb(-max_decimals)
    value = Decimal(str(amount)).quantize(quantum, rounding=ROUND_HALF_UP)
    is_negative = value < 0
    text = f"{abs(value):f}"

    if "." in text:
        integer_part, fraction = text.split(".")
    else:
        integer_part, fraction = text, ""

    fraction = fraction.rstrip("0")
    if len(fraction) < min_decimals:
        fraction = fraction.ljust(min_decimals, "0")

    result = _group_thousands(integer_part, thousands_sep)
    if fraction:
        result = f"{result}{decimal_sep}{fraction}"
    if is_negative and (integer_part.strip("0") or fraction.strip("0")):
        result = f"-{result}"
    return result


def format_currency(
    amount: float,
    currency: str = DEFAULT_CURRENCY,
    precision: int = DEFAULT_PRECISION,
    method: RoundingMethod | str = RoundingMethod.ROUND,
) -> str:
    """
    Format an amount for display in the given currency.

    The amount is first passed through the rounding policy so displayed values
    match the numbers used in the settlement.

    Examples:
        format_currency(1250000) -> "1.250.000 VND"
        format_currency(1250.5, "USD") -> "$1,250.50"
        format_currency(-3.5, "USD") -> "-$3.50"
        format_currency(1250.5, "EUR") -> "1.250,50 €"
        format_currency(1250.5, "GBP") -> "1,250.5 GBP"
    """
    rounded = round_amount(amount, precision, method)
    code = (currency or DEFAULT_CURRENCY).upper()

    if code == "VND":
        return f"{format_number(rounded, precision, 0, '.', ',')} VND"
    if code == "USD":
        body = format_number(abs(rounded), max(precision, 2), 2, ",", ".")
        return f"-${body}" if rounded < 0 else f"${body}"
    if code == "EUR":
        return f"{format_number(rounded, max(precision, 2), 2, '.', ',')} €"
    return f"{format_number(rounded, precision, 0, ',', '.')} {code}"


def format_percentage(fraction: float) -> str:
    """
    Format a 0-1 fraction as a percentage with one decimal.

    Example:
        format_percentage(0.256) -> "25.6%"
    """
    return f"{fraction * 100:.1f}%"
