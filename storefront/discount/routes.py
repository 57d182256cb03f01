# storefront/discount/routes.py
from __future__ import annotations
from flask import request
from flask_jwt_extended import jwt_required

from ..extensions import db
from ..model import Discount
from ..services.coupon_service import validate_discount
from ..utils.api import ok
from ..utils.decorators import role_required
from ..utils.errors import Conflict, ValidationError
from ..utils.money import parse_money, to_number
from ..utils.parsing import json_body, paginate, parse_bool, parse_iso8601
from . import bp

_REQUIRED_TEXT = ("name", "name_ar", "description", "description_ar", "discount_code")


def _validated(data: dict) -> dict:
    """Full payload; create and update both require every field."""
    errors, values = {}, {}
    for field in _REQUIRED_TEXT:
        v = data.get(field)
        if not isinstance(v, str) or not v.strip():
            errors[field] = f"{field} is required"
        else:
            values[field] = v.strip()

    pct = parse_money(data.get("discount_percentage"))
    if pct is None:
        errors["discount_percentage"] = "discount_percentage must be numeric"
    elif pct < 0 or pct > 100:
        errors["discount_percentage"] = "discount_percentage must be between 0 and 100"
    else:
        values["discount_percentage"] = pct

    for field in ("start_date", "end_date"):
        dt = parse_iso8601(data.get(field))
        if dt is None:
            errors[field] = f"{field} must be a valid date"
        else:
            values[field] = dt
    if "start_date" in values and "end_date" in values and values["end_date"] < values["start_date"]:
        errors["end_date"] = "end_date must be after or equal to start_date"

    values["is_active"] = parse_bool(data.get("is_active"), True)

    if errors:
        raise ValidationError(errors)
    return values


def _ensure_unique_code(code: str, exclude_id: int | None = None):
    q = Discount.query.filter(Discount.discount_code == code)
    if exclude_id is not None:
        q = q.filter(Discount.id != exclude_id)
    if q.first():
        raise Conflict("Discount code already exists")


@bp.get("")
@jwt_required()
def list_discounts():
    page_data = paginate(Discount.query.order_by(Discount.id.desc()))
    return ok("Discounts", {
        "discounts": [d.as_api() for d in page_data["items"]],
        "meta": page_data["meta"],
    })


@bp.get("/check")
@jwt_required()
def check_discount():
    snapshot = validate_discount(request.args.get("code"))
    result = {"valid": True, "discount_percentage": to_number(snapshot.discount_value)}
    return ok("Discount is valid", result, **result)


@bp.get("/<int:discount_id>")
@jwt_required()
def get_discount(discount_id: int):
    d = Discount.query.get_or_404(discount_id, description="Discount not found")
    return ok("Discount", {"discount": d.as_api()})


@bp.post("")
@role_required("admin")
def create_discount():
    values = _validated(json_body())
    _ensure_unique_code(values["discount_code"])
    d = Discount(**values)
    db.session.add(d)
    db.session.commit()
    return ok("Discount created", {"discount": d.as_api()}, status=201)


@bp.put("/<int:discount_id>")
@role_required("admin")
def update_discount(discount_id: int):
    d = Discount.query.get_or_404(discount_id, description="Discount not found")
    values = _validated(json_body())
    _ensure_unique_code(values["discount_code"], exclude_id=d.id)
    for field, value in values.items():
        setattr(d, field, value)
    db.session.commit()
    return ok("Discount updated", {"discount": d.as_api()})


@bp.delete("/<int:discount_id>")
@role_required("admin")
def delete_discount(discount_id: int):
    d = Discount.query.get_or_404(discount_id, description="Discount not found")
    db.session.delete(d)
    db.session.commit()
    return ok("Discount deleted", {"id": discount_id})
