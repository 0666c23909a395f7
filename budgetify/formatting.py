"""Formatting utilities for currency and percentage display.

The aggregation modules return raw floats; these helpers are for the
presentation side only.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[float, int, Decimal]

CURRENCY_SYMBOLS = {
    "USD": "$",
    "INR": "₹",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CAD": "C$",
    "AUD": "A$",
    "SGD": "S$",
    "AED": "د.إ",
    "CNY": "¥",
    "BTC": "₿",
}

# Currencies displayed without a fractional part
WHOLE_UNIT_CURRENCIES = {"INR", "JPY"}


def round_currency(value: Number, places: int = 2) -> float:
    """Round half-up to ``places`` decimals (banker's rounding is not wanted for money).

    Example:
        >>> round_currency(2.675)
        2.68
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _group_indian(digits: str) -> str:
    # 12,34,567 style grouping: last three digits, then pairs
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_currency(amount: Number, currency: str = "INR") -> str:
    """Format a currency amount for display.

    Args:
        amount: The amount to format
        currency: ISO currency code (or ``BTC``)

    Returns:
        Formatted currency string (e.g. "₹1,20,000", "$1,234.56", "₿0.00100000")

    Example:
        >>> format_currency(1234.5, "USD")
        '$1,234.50'
    """
    code = currency.upper()
    if code == "BTC":
        return f"₿{float(amount):.8f}"
    symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")
    sign = "-" if amount < 0 else ""
    magnitude = abs(amount)
    if code in WHOLE_UNIT_CURRENCIES:
        whole = f"{round_currency(magnitude, 0):.0f}"
        body = _group_indian(whole) if code == "INR" else f"{int(whole):,}"
    else:
        body = f"{round_currency(magnitude):,.2f}"
    return f"{sign}{symbol}{body}"


def format_percent(percent: Number) -> str:
    """Format a percentage value with one decimal place.

    Example:
        >>> format_percent(12.345)
        '12.3%'
    """
    return f"{float(percent):.1f}%"


def safe_percent(part: Number, whole: Number) -> float:
    """Return ``part / whole * 100`` or ``0.0`` when ``whole`` is zero."""
    if not whole:
        return 0.0
    return float(part) / float(whole) * 100
