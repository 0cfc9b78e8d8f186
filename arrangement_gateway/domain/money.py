"""Money arithmetic and display helpers - all amounts are integer cents"""

from decimal import Decimal
from enum import Enum


class RoundingPolicy(str, Enum):
    """
    Rounding applied to every inexact division in billing math.

    ALWAYS_ROUND_UP is the collection policy: periodic amounts never
    under-collect, so any rounding surplus goes to the collector.
    """

    ALWAYS_ROUND_UP = "always_round_up"
    ROUND_DOWN = "round_down"


DEFAULT_ROUNDING_POLICY = RoundingPolicy.ALWAYS_ROUND_UP


def divide(numerator: int, denominator: int, policy: RoundingPolicy = DEFAULT_ROUNDING_POLICY) -> int:
    """
    Integer division of cents under a rounding policy.

    Uses integer arithmetic only (no float), so results are exact for any size.
    """
    if denominator <= 0:
        raise ValueError("denominator must be positive")

    if policy is RoundingPolicy.ALWAYS_ROUND_UP:
        return -(-numerator // denominator)
    return numerator // denominator


def format_currency_from_cents(cents: int | None) -> str:
    """Format cents as US dollars, e.g. 123456 -> "$1,234.56" ("" for None)"""
    if cents is None:
        return ""

    sign = "-" if cents < 0 else ""
    dollars = Decimal(abs(cents)) / 100
    return f"{sign}${dollars:,.2f}"


def format_percentage(value: int | float | Decimal) -> str:
    """Format a percentage with at most two decimals and no trailing zeros: 50 -> "50", 33.5 -> "33.5" """
    quantized = Decimal(str(value)).quantize(Decimal("0.01"))
    text = f"{quantized:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
