from decimal import Decimal

import pytest

from storefront.domain.pricing.rounding import from_cents, money_str, q2, to_cents, to_decimal


def test_q2_rounds_half_up():
    assert q2(Decimal("2.345")) == Decimal("2.35")
    assert q2(Decimal("2.344")) == Decimal("2.34")


def test_to_decimal_accepts_numbers_and_strings():
    assert to_decimal(5) == Decimal("5")
    assert to_decimal("12.50") == Decimal("12.50")
    assert to_decimal(None, default=Decimal("0")) == Decimal("0")


def test_to_decimal_rejects_none_without_default_and_bool():
    with pytest.raises(ValueError):
        to_decimal(None)
    with pytest.raises(ValueError):
        to_decimal(True)


def test_cents_conversion():
    assert to_cents(Decimal("2.50")) == 250
    assert from_cents(105) == Decimal("1.05")
    assert money_str(Decimal("90")) == "90.00"
