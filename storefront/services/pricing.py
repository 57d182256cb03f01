# storefront/services/pricing.py
"""
Cart pricing.

Pure arithmetic over already-loaded data: no database access, no clock.
Amounts are ``Decimal`` end to end; rounding (2 dp, half-up) happens once,
on the three outputs.
"""
from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from ..utils.money import D, Money, ZERO, round_money, to_number
from .coupon_service import CouponSnapshot, PERCENTAGE, FIXED

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class CartLine:
    product_id: int
    unit_price: Money
    quantity: int

    def __post_init__(self):
        price = D(self.unit_price)
        if price < 0:
            raise ValueError("unit_price must be >= 0")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity < 1:
            raise ValueError("quantity must be an integer >= 1")
        object.__setattr__(self, "unit_price", price)

    @property
    def amount(self) -> Money:
        # unrounded on purpose; rounding happens on the cart subtotal
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class CartTotals:
    subtotal: Money
    discount: Money
    total: Money

    def as_api(self):
        return {
            "subtotal": to_number(self.subtotal),
            "discount": to_number(self.discount),
            "total": to_number(self.total),
        }


def coupon_discount(subtotal: Money, coupon: Optional[CouponSnapshot]) -> Money:
    if coupon is None:
        return ZERO
    value = D(coupon.discount_value)
    if coupon.discount_type == PERCENTAGE:
        return subtotal * (value / HUNDRED)
    if coupon.discount_type == FIXED:
        return value
    raise ValueError(f"unknown discount type: {coupon.discount_type!r}")


def price_cart(lines: Iterable[CartLine], applied_coupon: Optional[CouponSnapshot] = None) -> CartTotals:
    """
    subtotal = sum(unit_price * quantity)
    discount = subtotal * value / 100 (percentage) | value (fixed) | 0
    total    = max(subtotal - discount, 0)

    A fixed discount larger than the subtotal is reported as-is; only the
    total is clamped.
    """
    subtotal = sum((line.amount for line in lines), ZERO)
    discount = coupon_discount(subtotal, applied_coupon)
    total = max(subtotal - discount, ZERO)
    return CartTotals(
        subtotal=round_money(subtotal),
        discount=round_money(discount),
        total=round_money(total),
    )
