# storefront/services/order_service.py
from __future__ import annotations
import logging

from ..extensions import db
from ..model import Address, Order, OrderItem
from ..utils.errors import ApiError, InvalidCoupon, NotFound, ValidationError
from ..utils.money import round_money
from .cart_service import CartContext
from . import coupon_service
from .coupon_service import consume_coupon, release_coupon

logger = logging.getLogger(__name__)


def checkout(user_id: int, address_id: int | None = None, payment_method: str | None = None) -> Order:
    """
    Turn the caller's cart into an order.

    Totals come from the same pricing path as ``GET /api/cart/total``; the
    applied coupon is re-validated and its use counted in the same
    transaction. Any failure rolls everything back, cart included.
    """
    ctx = CartContext.for_user(user_id)
    cart = ctx.cart
    if not cart.items:
        raise ValidationError({"cart": "cart is empty"}, message="Cart is empty")

    address = None
    if address_id is not None:
        address = db.session.get(Address, address_id)
        if not address or address.user_id != user_id:
            raise NotFound("Address not found")

    try:
        now = coupon_service.utcnow()
        applied_code = cart.coupon_code
        coupon = ctx.applied_coupon(now)
        if applied_code and coupon is None:
            # keep the emptied slot so the next attempt prices without it
            db.session.commit()
            raise InvalidCoupon("applied coupon no longer valid")
        totals = ctx.totals(now)

        order = Order(
            user_id=user_id,
            address_id=address.id if address else None,
            payment_method=(payment_method or "cash").strip() or "cash",
            status="pending",
            coupon_id=coupon.coupon_id if coupon else None,
            coupon_code=coupon.code if coupon else None,
            subtotal=totals.subtotal,
            discount=totals.discount,
            total=totals.total,
        )
        for item in cart.items:
            p = item.product
            order.items.append(OrderItem(
                product_id=item.product_id,
                name=p.name_en,
                color=item.color,
                size=item.size,
                unit_price=round_money(p.price),
                quantity=item.quantity,
                line_total=round_money(p.price * item.quantity),
            ))
        db.session.add(order)

        if coupon:
            consume_coupon(coupon.coupon_id, now)

        ctx.clear()
        db.session.commit()
    except ApiError:
        db.session.rollback()
        raise

    logger.info("order %s created for user %s (total=%s, coupon=%s)",
                order.id, user_id, order.total, order.coupon_code)
    return order


def set_status(order: Order, status: str) -> Order:
    previous = order.status
    if previous == "cancelled" and status != previous:
        raise ValidationError({"status": "cancelled orders cannot change status"})
    # a pending order that never shipped gives its coupon use back
    if status == "cancelled" and previous == "pending" and order.coupon_id:
        release_coupon(order.coupon_id)
    order.status = status
    db.session.commit()
    logger.info("order %s: status %s -> %s", order.id, previous, status)
    return order


def delete_order(order: Order) -> None:
    order_id, status = order.id, order.status
    if status == "pending" and order.coupon_id:
        release_coupon(order.coupon_id)
    db.session.delete(order)
    db.session.commit()
    logger.info("order %s deleted (status=%s)", order_id, status)
