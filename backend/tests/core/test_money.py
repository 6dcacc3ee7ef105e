"""
Money Helper Tests

Coercion and rounding rules shared by every amount-handling service.
"""

import math
from decimal import Decimal

import pytest

from kosh.core.money import clamp, format_inr, positive_amount, quantize_money, round_whole, to_decimal


@pytest.mark.parametrize("value", [None, True, False, "abc", "", float("nan"), math.inf, "Infinity", [1]])
def test_to_decimal_rejects_non_numbers(value):
    """Booleans, non-finite and unparsable values are not amounts."""
    assert to_decimal(value) is None


def test_to_decimal_keeps_float_precision():
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_decimal("  250.50 ") == Decimal("250.50")
    assert to_decimal(7) == Decimal("7")


def test_positive_amount_requires_strictly_positive():
    assert positive_amount(0) is None
    assert positive_amount(-5) is None
    assert positive_amount("12.5") == Decimal("12.5")


def test_positive_amount_rounds_to_paise():
    assert positive_amount("10.005") == Decimal("10.01")
    assert positive_amount(0.004) is None
    assert positive_amount("0.005") == Decimal("0.01")


def test_rounding_is_half_up():
    assert round_whole(Decimal("17.5")) == Decimal("18")
    assert round_whole(Decimal("2.5")) == Decimal("3")
    assert quantize_money(Decimal("0.125")) == Decimal("0.13")


def test_clamp_and_format():
    assert clamp(Decimal("150"), Decimal("0"), Decimal("100")) == Decimal("100")
    assert clamp(Decimal("-3"), Decimal("0"), Decimal("100")) == Decimal("0")
    assert format_inr(Decimal("1000.00")) == "1000"
    assert format_inr(Decimal("3.50")) == "3.5"
