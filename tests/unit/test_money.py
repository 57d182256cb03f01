from decimal import Decimal

import pytest

from storefront.utils.money import D, parse_money, round_money, to_number


def test_round_money_is_half_up():
    assert round_money(Decimal("2.345")) == Decimal("2.35")
    assert round_money(Decimal("2.344")) == Decimal("2.34")


def test_d_accepts_floats_without_binary_noise():
    assert D(0.1) == Decimal("0.1")
    assert D(None) == Decimal("0")


@pytest.mark.parametrize("raw,expected", [
    ("10.50", Decimal("10.50")),
    (" 3 ", Decimal("3")),
    (7, Decimal("7")),
    (2.5, Decimal("2.5")),
])
def test_parse_money_valid(raw, expected):
    assert parse_money(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "abc", True, "NaN", "Infinity", [1]])
def test_parse_money_invalid(raw):
    assert parse_money(raw) is None


def test_to_number():
    assert to_number(Decimal("9.999")) == 10.0
