# storefront/coupon/routes.py
from __future__ import annotations
import logging
from flask import request
from flask_jwt_extended import jwt_required

from ..extensions import db
from ..model import Coupon
from ..services.coupon_service import parse_coupon_payload, validate_coupon
from ..utils.api import ok
from ..utils.decorators import role_at_least, role_required
from ..utils.errors import Conflict
from ..utils.parsing import json_body, paginate, parse_bool
from ..utils.money import to_number
from . import bp

logger = logging.getLogger(__name__)


def _ensure_unique_code(code: str, exclude_id: int | None = None):
    q = Coupon.query.filter(Coupon.code == code)
    if exclude_id is not None:
        q = q.filter(Coupon.id != exclude_id)
    if q.first():
        raise Conflict("Coupon code already exists")


@bp.get("")
@role_at_least("manager")
def list_coupons():
    """
    Query params:
      active   -> true/false
      page, per_page
    """
    q = Coupon.query
    active = request.args.get("active")
    if active is not None:
        q = q.filter(Coupon.is_active == parse_bool(active))

    page_data = paginate(q.order_by(Coupon.id.desc()))
    return ok("Coupons", {
        "coupons": [c.as_api() for c in page_data["items"]],
        "meta": page_data["meta"],
    })


@bp.get("/check")
@jwt_required()
def check_coupon():
    """GET /api/coupons/check?code=SUMMER10 -> { valid, discount_type, discount_value }"""
    snapshot = validate_coupon(request.args.get("code"))
    result = {
        "valid": True,
        "discount_type": snapshot.discount_type,
        "discount_value": to_number(snapshot.discount_value),
    }
    return ok("Coupon is valid", result, **result)


@bp.get("/<int:coupon_id>")
@role_at_least("manager")
def get_coupon(coupon_id: int):
    c = Coupon.query.get_or_404(coupon_id, description="Coupon not found")
    return ok("Coupon", {"coupon": c.as_api()})


@bp.post("")
@role_required("admin")
def create_coupon():
    values = parse_coupon_payload(json_body())
    _ensure_unique_code(values["code"])

    c = Coupon(**values)
    db.session.add(c)
    db.session.commit()
    logger.info("coupon %r created (id=%s)", c.code, c.id)
    return ok("Coupon created", {"coupon": c.as_api()}, status=201)


@bp.put("/<int:coupon_id>")
@bp.patch("/<int:coupon_id>")
@role_required("admin")
def update_coupon(coupon_id: int):
    c = Coupon.query.get_or_404(coupon_id, description="Coupon not found")
    values = parse_coupon_payload(json_body(), existing=c)
    if "code" in values:
        _ensure_unique_code(values["code"], exclude_id=c.id)

    for field, value in values.items():
        setattr(c, field, value)
    db.session.commit()
    return ok("Coupon updated", {"coupon": c.as_api()})


@bp.delete("/<int:coupon_id>")
@role_required("admin")
def delete_coupon(coupon_id: int):
    c = Coupon.query.get_or_404(coupon_id, description="Coupon not found")
    db.session.delete(c)
    db.session.commit()
    logger.info("coupon %s deleted", coupon_id)
    return ok("Coupon deleted", {"id": coupon_id})
