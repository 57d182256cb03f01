# storefront/order/routes.py
from datetime import timedelta

from flask import request
from flask_jwt_extended import jwt_required

from ..extensions import db
from ..model import ORDER_STATUSES, Order
from ..services.order_service import checkout, delete_order as remove_order, set_status
from ..utils.api import ok, page_payload
from ..utils.decorators import is_staff, require_user, role_at_least, role_required
from ..utils.errors import NotFound, ValidationError
from ..utils.parsing import json_body, paginate, parse_iso8601, parse_opt_int
from . import bp


def _get_order(order_id) -> Order:
    o = db.session.get(Order, order_id)
    if not o:
        raise NotFound("Order not found")
    return o


@bp.post("")
@jwt_required()
def create_order():
    user = require_user()
    data = json_body()
    address_id = None
    if data.get("address_id") is not None:
        address_id = parse_opt_int(data.get("address_id"))
        if address_id is None:
            raise ValidationError({"address_id": "address_id must be an integer"})
    payment_method = data.get("payment_method")
    if payment_method is not None and not isinstance(payment_method, str):
        raise ValidationError({"payment_method": "payment_method must be a string"})

    order = checkout(user.id, address_id=address_id, payment_method=payment_method)
    return ok("Order placed", {"order": order.as_api()}, status=201)


@bp.get("")
@jwt_required()
def list_orders():
    """
    Query params:
      - page, per_page
      - status=pending|processing|shipped|delivered|cancelled
      - user_id (staff only)
      - start=YYYY-MM-DD
      - end=YYYY-MM-DD (inclusive)
    """
    user = require_user()
    q = Order.query
    if is_staff(user):
        uid = parse_opt_int(request.args.get("user_id"))
        if uid is not None:
            q = q.filter(Order.user_id == uid)
    else:
        q = q.filter(Order.user_id == user.id)

    status = request.args.get("status")
    if status:
        q = q.filter(Order.status == status)

    start = parse_iso8601(request.args.get("start"))
    end = parse_iso8601(request.args.get("end"))
    if start:
        q = q.filter(Order.created_at >= start)
    if end:
        # make end inclusive for the whole day
        q = q.filter(Order.created_at < end + timedelta(days=1))

    page_data = paginate(q.order_by(Order.created_at.desc(), Order.id.desc()))
    return ok("Orders", page_payload("orders", page_data, Order.as_api))


@bp.get("/<int:order_id>")
@jwt_required()
def get_order(order_id: int):
    user = require_user()
    o = _get_order(order_id)
    if o.user_id != user.id and not is_staff(user):
        # don't reveal other users' order ids
        raise NotFound("Order not found")
    return ok("Order", {"order": o.as_api()})


@bp.put("/<int:order_id>")
@bp.patch("/<int:order_id>")
@role_at_least("manager")
def update_order_status(order_id: int):
    o = _get_order(order_id)
    status = (json_body().get("status") or "")
    status = status.strip().lower() if isinstance(status, str) else ""
    if status not in ORDER_STATUSES:
        raise ValidationError({"status": f"status must be one of: {', '.join(ORDER_STATUSES)}"})
    set_status(o, status)
    return ok("Order status updated", {"order": o.as_api()})


@bp.put("/<int:order_id>/tracking")
@role_at_least("manager")
def update_tracking(order_id: int):
    o = _get_order(order_id)
    tracking = json_body().get("tracking_number")
    if not isinstance(tracking, str) or not tracking.strip():
        raise ValidationError({"tracking_number": "tracking_number is required"})
    tracking = tracking.strip()
    if len(tracking) > 255:
        raise ValidationError({"tracking_number": "tracking_number must be at most 255 characters"})
    o.tracking_number = tracking
    db.session.commit()
    return ok("Tracking number updated", {"order": o.as_api()})


@bp.delete("/<int:order_id>")
@role_required("admin")
def delete_order(order_id: int):
    remove_order(_get_order(order_id))
    return ok("Order deleted", {"id": order_id})
