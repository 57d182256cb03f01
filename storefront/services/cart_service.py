from __future__ import annotations
import logging
from datetime import datetime

from ..extensions import db
from ..model import Cart, CartItem, Product
from ..utils.errors import InvalidCoupon, NotFound
from .coupon_service import CouponSnapshot, validate_coupon
from .pricing import CartLine, CartTotals, price_cart

logger = logging.getLogger(__name__)


def get_or_create_cart(user_id: int) -> Cart:
    cart = Cart.query.filter_by(user_id=user_id).first()
    if not cart:
        cart = Cart(user_id=user_id)
        db.session.add(cart)
        db.session.flush()
    return cart


def _find_item(cart: Cart, item_id: int) -> CartItem:
    item = next((i for i in cart.items if i.id == item_id), None)
    if not item:
        raise NotFound("Cart item not found")
    return item


def add_item(cart: Cart, product: Product, quantity: int, color: str | None = None, size: str | None = None) -> CartItem:
    # same product + same options -> one line
    item = next(
        (i for i in cart.items
         if i.product_id == product.id and i.color == color and i.size == size),
        None,
    )
    if item:
        item.quantity += quantity
    else:
        item = CartItem(product_id=product.id, quantity=quantity, color=color, size=size)
        cart.items.append(item)
    db.session.flush()
    return item


def update_item(cart: Cart, item_id: int, quantity: int) -> CartItem:
    item = _find_item(cart, item_id)
    item.quantity = quantity
    return item


def remove_item(cart: Cart, item_id: int) -> None:
    item = _find_item(cart, item_id)
    cart.items.remove(item)


class CartContext:
    """
    Per-user pricing context: the cart's lines plus its applied-coupon slot.

    Slot transitions:
        NONE    --apply(code)-->  APPLIED   (only when the code validates)
        APPLIED --apply(code)-->  APPLIED   (replaced, last apply wins)
        APPLIED --remove------->  NONE
        APPLIED --clear-------->  NONE
    """

    def __init__(self, cart: Cart):
        self.cart = cart

    @classmethod
    def for_user(cls, user_id: int) -> "CartContext":
        return cls(get_or_create_cart(user_id))

    # ---- applied coupon ----
    def apply_coupon(self, code, now: datetime | None = None) -> CouponSnapshot:
        snapshot = validate_coupon(code, now)   # raises; slot untouched on failure
        previous = self.cart.coupon_code
        self.cart.coupon_code = snapshot.code
        if previous and previous != snapshot.code:
            logger.info("cart %s: coupon %r replaced by %r", self.cart.id, previous, snapshot.code)
        else:
            logger.info("cart %s: coupon %r applied", self.cart.id, snapshot.code)
        return snapshot

    def remove_coupon(self) -> None:
        if self.cart.coupon_code:
            logger.info("cart %s: coupon %r removed", self.cart.id, self.cart.coupon_code)
        self.cart.coupon_code = None

    def applied_coupon(self, now: datetime | None = None) -> CouponSnapshot | None:
        """Re-validated on every read; a coupon that expired or ran out is dropped."""
        code = self.cart.coupon_code
        if not code:
            return None
        try:
            return validate_coupon(code, now)
        except InvalidCoupon as e:
            logger.info("cart %s: dropping stale coupon %r (%s)", self.cart.id, code, e.reason)
            self.cart.coupon_code = None
            return None

    # ---- lines ----
    def clear(self) -> None:
        self.cart.items.clear()
        self.cart.coupon_code = None

    def lines(self) -> list[CartLine]:
        # price basis is the product's current price; color/size add nothing
        return [
            CartLine(product_id=i.product_id, unit_price=i.product.price, quantity=i.quantity)
            for i in self.cart.items
        ]

    def totals(self, now: datetime | None = None) -> CartTotals:
        return price_cart(self.lines(), self.applied_coupon(now))
