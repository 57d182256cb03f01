# storefront/cart/routes.py
from __future__ import annotations
from flask_jwt_extended import jwt_required

from ..extensions import db
from ..model import Product
from ..services.cart_service import CartContext, add_item, remove_item, update_item
from ..utils.api import ok
from ..utils.decorators import require_user
from ..utils.errors import NotFound, ValidationError
from ..utils.parsing import clean_str, json_body, parse_opt_int
from . import bp

# ---- helpers ---------------------------------------------------------------

def _context() -> CartContext:
    return CartContext.for_user(require_user().id)


def _quantity(data: dict, required: bool = True) -> int:
    if "quantity" not in data:
        if required:
            raise ValidationError({"quantity": "quantity is required"})
        return 1
    qty = parse_opt_int(data.get("quantity"))
    if qty is None:
        raise ValidationError({"quantity": "quantity must be an integer"})
    if qty < 1:
        raise ValidationError({"quantity": "quantity must be >= 1"})
    return qty


def _cart_payload(ctx: CartContext) -> dict:
    totals = ctx.totals()
    return {**ctx.cart.as_api(), "totals": totals.as_api()}

# ---- endpoints -------------------------------------------------------------

@bp.get("")
@jwt_required()
def list_items():
    ctx = _context()
    payload = _cart_payload(ctx)
    db.session.commit()   # persists a stale-coupon drop, if any
    return ok("Cart items retrieved successfully", payload)


@bp.post("")
@jwt_required()
def add_to_cart():
    """
    Body: { "product_id": int, "quantity": int, "color"?: str, "size"?: str }
    Adding the same product with the same options again increases its quantity.
    """
    data = json_body()
    errors = {}
    product_id = parse_opt_int(data.get("product_id"))
    if product_id is None:
        errors["product_id"] = "product_id is required"
    try:
        qty = _quantity(data)
    except ValidationError as e:
        errors.update(e.errors)
    if errors:
        raise ValidationError(errors)

    product = db.session.get(Product, product_id)
    if not product or product.status is False:
        raise NotFound("Product not found")

    color, size = clean_str(data.get("color")) or None, clean_str(data.get("size")) or None
    if color and product.colors and color not in product.colors:
        raise ValidationError({"color": f"color must be one of {', '.join(product.colors)}"})
    if size and product.sizes and size not in product.sizes:
        raise ValidationError({"size": f"size must be one of {', '.join(product.sizes)}"})

    ctx = _context()
    item = add_item(ctx.cart, product, qty, color=color, size=size)
    db.session.commit()
    return ok("Item added to cart successfully", {"item": item.as_api()}, status=201)


@bp.put("/<int:item_id>")
@bp.patch("/<int:item_id>")
@jwt_required()
def update_cart_item(item_id: int):
    """Body: { "quantity": int >= 1 }"""
    qty = _quantity(json_body())
    ctx = _context()
    item = update_item(ctx.cart, item_id, qty)
    db.session.commit()
    return ok("Cart item updated successfully", {"item": item.as_api()})


@bp.delete("/<int:item_id>")
@jwt_required()
def remove_cart_item(item_id: int):
    ctx = _context()
    remove_item(ctx.cart, item_id)
    db.session.commit()
    return ok("Item removed from cart")


@bp.delete("/clear")
@jwt_required()
def clear_cart():
    # clearing the lines also clears the applied coupon
    ctx = _context()
    ctx.clear()
    db.session.commit()
    return ok("Cart cleared successfully")


@bp.post("/discount")
@jwt_required()
def apply_discount():
    """
    Body: { "code": "SUMMER10" }
    Replaces any coupon already applied to this cart.
    """
    data = json_body()
    ctx = _context()
    snapshot = ctx.apply_coupon(data.get("code"))
    db.session.commit()
    return ok("Coupon applied successfully", {"coupon": snapshot.as_api()}, coupon=snapshot.as_api())


@bp.delete("/discount")
@jwt_required()
def remove_discount():
    ctx = _context()
    ctx.remove_coupon()
    db.session.commit()
    return ok("Coupon removed successfully")


@bp.get("/total")
@jwt_required()
def cart_total():
    ctx = _context()
    totals = ctx.totals().as_api()
    coupon = ctx.cart.coupon_code
    db.session.commit()
    return ok(
        "Cart total calculated successfully",
        {**totals, "coupon_code": coupon},
        **totals,
    )
