"""Decimal helpers for rupee amounts, units and NAV values."""
import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

TWO_PLACES = Decimal("0.01")
WHOLE = Decimal("1")
ZERO = Decimal("0")


def to_decimal(value: Any) -> Optional[Decimal]:
    """
    Coerce a JSON number (or numeric string) into a finite Decimal.

    Booleans, NaN, infinities and unparsable values yield None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        # repr() keeps the shortest round-tripping form, so 0.1 stays 0.1
        value = repr(value)
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return result if result.is_finite() else None


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def round_whole(value: Decimal) -> Decimal:
    return value.quantize(WHOLE, rounding=ROUND_HALF_UP)


def clamp(value: Decimal, low: Decimal, high: Decimal) -> Decimal:
    return max(low, min(high, value))


def format_inr(value: Decimal) -> str:
    """Render an amount the way descriptions show it: no trailing zeros."""
    normalized = value.normalize()
    if normalized == normalized.to_integral_value():
        return str(normalized.quantize(WHOLE))
    return format(normalized, "f")


def positive_amount(value: Any) -> Optional[Decimal]:
    """
    Finite amount rounded half-up to paise, else None.

    Amounts that round to zero or below are rejected, since rows store two
    decimal places and require a positive amount.
    """
    amount = to_decimal(value)
    if amount is None:
        return None
    amount = quantize_money(amount)
    return amount if amount > ZERO else None
