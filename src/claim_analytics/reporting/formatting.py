"""
Number formatting for KPI cards, tables and chart axes.

All rounding is half-up on Decimal so the same raw value always renders
to the same string. Overflowed sums render as "∞" and NaN as "N/A".
"""

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Literal

DigitGrouping = Literal["indian", "international"]


def _non_finite(value: float) -> str | None:
    if math.isnan(value):
        return "N/A"
    if math.isinf(value):
        return "-∞" if value < 0 else "∞"
    return None


def _round(value: float, places: int) -> Decimal:
    quantum = Decimal(1).scaleb(-places)
    with localcontext() as ctx:
        # Room for every integer digit of the largest finite float
        ctx.prec = 320 + places
        return Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)


def group_digits(digits: str, grouping: DigitGrouping = "indian") -> str:
    """
    Insert thousands separators into a string of digits.

    Indian grouping keeps the last three digits together and groups the
    rest in pairs (12,34,567); international grouping uses threes.
    """
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    size = 2 if grouping == "indian" else 3
    groups: list[str] = []
    while head:
        groups.insert(0, head[-size:])
        head = head[:-size]
    return ",".join(groups + [tail])


def format_number(
    value: float, places: int = 0, grouping: DigitGrouping = "indian"
) -> str:
    """Format a number with grouped digits and a fixed number of decimals."""
    special = _non_finite(value)
    if special is not None:
        return special
    rounded = _round(value, places)
    sign = "-" if rounded < 0 else ""
    text = f"{rounded.copy_abs():.{places}f}"
    whole, _, fraction = text.partition(".")
    grouped = group_digits(whole, grouping)
    return f"{sign}{grouped}.{fraction}" if fraction else f"{sign}{grouped}"


def format_count(value: int, grouping: DigitGrouping = "indian") -> str:
    return format_number(value, 0, grouping)


def format_currency(
    value: float, symbol: str = "₹", grouping: DigitGrouping = "indian"
) -> str:
    """Integer-rounded, grouped amount with a currency prefix (₹1,23,457)."""
    text = format_number(value, 0, grouping)
    if text.startswith("-"):
        return f"-{symbol}{text[1:]}"
    return f"{symbol}{text}"


def format_compact(value: float) -> str:
    """
    Short axis label using crore / lakh / thousand suffixes.

    Examples:
        25000000 -> "2.5Cr", 150000 -> "1.5L", 2500 -> "2.5K", 250 -> "250"
    """
    special = _non_finite(value)
    if special is not None:
        return special
    if value >= 1e7:
        return f"{_round(value / 1e7, 1)}Cr"
    if value >= 1e5:
        return f"{_round(value / 1e5, 1)}L"
    if value >= 1e3:
        return f"{_round(value / 1e3, 1)}K"
    return format_number(value, 0)
