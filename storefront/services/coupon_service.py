# storefront/services/coupon_service.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import and_, or_, update

from ..extensions import db
from ..model import Coupon, Discount, DISCOUNT_TYPES
from ..utils.errors import InvalidCoupon, ValidationError
from ..utils.money import parse_money, to_number
from ..utils.parsing import parse_bool, parse_iso8601, parse_opt_int

logger = logging.getLogger(__name__)

PERCENTAGE, FIXED = DISCOUNT_TYPES
DISCOUNT_ERROR_MESSAGE = "Discount expired or invalid"


def utcnow() -> datetime:
    # naive UTC, same as stored start/end dates
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True)
class CouponSnapshot:
    """What pricing needs from a validated code, frozen at validation time."""
    coupon_id: int
    code: str
    discount_type: str
    discount_value: Decimal

    def as_api(self):
        return {
            "id": self.coupon_id,
            "code": self.code,
            "discount_type": self.discount_type,
            "discount_value": to_number(self.discount_value),
        }


def snapshot_of(coupon: Coupon) -> CouponSnapshot:
    return CouponSnapshot(
        coupon_id=coupon.id,
        code=coupon.code,
        discount_type=coupon.discount_type,
        discount_value=Decimal(str(coupon.discount_value or 0)),
    )


def coupon_rejection_reason(coupon: Coupon | None, now: datetime) -> str | None:
    """None when usable at ``now``. Window bounds are inclusive; missing bounds are open."""
    if coupon is None:
        return "unknown code"
    if not coupon.is_active:
        return "inactive"
    if coupon.start_date is not None and now < coupon.start_date:
        return "not started"
    if coupon.end_date is not None and now > coupon.end_date:
        return "expired"
    max_uses = coupon.max_uses or 0
    if max_uses > 0 and (coupon.used_count or 0) >= max_uses:
        return "usage exhausted"
    return None


def find_coupon_by_code(code: str) -> Coupon | None:
    return Coupon.query.filter(Coupon.code == code).first()


def _require_code(code) -> str:
    if not isinstance(code, str) or not code.strip():
        raise ValidationError({"code": "code is required"})
    return code


def validate_coupon(code, now: datetime | None = None) -> CouponSnapshot:
    """
    Decide whether ``code`` currently grants a discount.

    Args:
        code: coupon code, matched exactly as stored
        now: evaluation time (naive UTC); defaults to the current time

    Returns:
        CouponSnapshot of the matched coupon

    Raises:
        ValidationError: blank code
        InvalidCoupon: unknown, inactive, outside its window or used up
    """
    code = _require_code(code)
    now = now or utcnow()
    coupon = find_coupon_by_code(code)
    reason = coupon_rejection_reason(coupon, now)
    if reason:
        logger.info("coupon %r rejected: %s", code, reason)
        raise InvalidCoupon(reason)
    return snapshot_of(coupon)


def consume_coupon(coupon_id: int, now: datetime | None = None) -> None:
    """
    Count one use of a coupon, guarded in a single UPDATE.

    Runs inside the caller's transaction (checkout). Two concurrent checkouts
    cannot both take the last use: the WHERE clause re-checks the cap, so the
    loser updates zero rows.
    """
    now = now or utcnow()
    stmt = (
        update(Coupon)
        .where(
            Coupon.id == coupon_id,
            Coupon.is_active.is_(True),
            or_(Coupon.start_date.is_(None), Coupon.start_date <= now),
            or_(Coupon.end_date.is_(None), Coupon.end_date >= now),
            or_(Coupon.max_uses == 0, Coupon.used_count < Coupon.max_uses),
        )
        .values(used_count=Coupon.used_count + 1)
        .execution_options(synchronize_session=False)
    )
    result = db.session.execute(stmt)
    if result.rowcount != 1:
        logger.warning("coupon %s could not be consumed (exhausted or no longer valid)", coupon_id)
        raise InvalidCoupon("lost usage race")
    logger.info("coupon %s consumed", coupon_id)


def release_coupon(coupon_id: int) -> None:
    """Give back one use (order cancelled). Never drops below zero."""
    stmt = (
        update(Coupon)
        .where(and_(Coupon.id == coupon_id, Coupon.used_count > 0))
        .values(used_count=Coupon.used_count - 1)
        .execution_options(synchronize_session=False)
    )
    db.session.execute(stmt)


# ---- discounts (percentage-only promotions) ---------------------------------

def discount_rejection_reason(discount: Discount | None, now: datetime) -> str | None:
    if discount is None:
        return "unknown code"
    if not discount.is_active:
        return "inactive"
    if now < discount.start_date:
        return "not started"
    if now > discount.end_date:
        return "expired"
    return None


def validate_discount(code, now: datetime | None = None) -> CouponSnapshot:
    code = _require_code(code)
    now = now or utcnow()
    discount = Discount.query.filter(Discount.discount_code == code).first()
    reason = discount_rejection_reason(discount, now)
    if reason:
        logger.info("discount %r rejected: %s", code, reason)
        raise InvalidCoupon(reason, message=DISCOUNT_ERROR_MESSAGE)
    return CouponSnapshot(
        coupon_id=discount.id,
        code=discount.discount_code,
        discount_type=PERCENTAGE,
        discount_value=Decimal(str(discount.discount_percentage)),
    )


# ---- admin payloads ----------------------------------------------------------

def parse_coupon_payload(data: dict, existing: Coupon | None = None) -> dict:
    """
    Validate a create (``existing is None``) or partial update payload.

    Returns the column values to assign; raises ValidationError with every
    failing field at once.
    """
    errors = {}
    values = {}
    creating = existing is None

    def current(field):
        return values.get(field, getattr(existing, field, None))

    if creating or "code" in data:
        code = data.get("code")
        if not isinstance(code, str) or not code.strip():
            errors["code"] = "code is required"
        elif len(code.strip()) > 64:
            errors["code"] = "code must be at most 64 characters"
        else:
            values["code"] = code.strip()

    if "description" in data:
        values["description"] = data.get("description")

    if creating or "discount_type" in data:
        dtype = str(data.get("discount_type") or PERCENTAGE).lower().strip()
        if dtype not in DISCOUNT_TYPES:
            errors["discount_type"] = "discount_type must be 'percentage' or 'fixed'"
        else:
            values["discount_type"] = dtype

    if creating or "discount_value" in data:
        dval = parse_money(data.get("discount_value"))
        if dval is None:
            errors["discount_value"] = "discount_value must be numeric"
        elif dval < 0:
            errors["discount_value"] = "discount_value must be >= 0"
        else:
            values["discount_value"] = dval

    if "discount_type" not in errors and "discount_value" not in errors:
        dtype, dval = current("discount_type"), current("discount_value")
        if dtype == PERCENTAGE and dval is not None and parse_money(dval) > 100:
            errors["discount_value"] = "percentage discount must be <= 100"

    for field in ("max_uses", "used_count"):
        if field in data:
            n = parse_opt_int(data.get(field))
            if n is None or n < 0:
                errors[field] = f"{field} must be an integer >= 0"
            else:
                values[field] = n
        elif creating:
            values[field] = 1 if field == "max_uses" else 0

    if "max_uses" not in errors and "used_count" not in errors:
        max_uses, used = current("max_uses") or 0, current("used_count") or 0
        if max_uses > 0 and used > max_uses:
            errors["used_count"] = "used_count cannot exceed max_uses"

    for field in ("start_date", "end_date"):
        if field in data:
            raw = data.get(field)
            if raw in (None, ""):
                values[field] = None
            else:
                parsed = parse_iso8601(raw)
                if parsed is None:
                    errors[field] = f"Invalid datetime format for {field}"
                else:
                    values[field] = parsed

    if "start_date" not in errors and "end_date" not in errors:
        start, end = current("start_date"), current("end_date")
        if start and end and end < start:
            errors["end_date"] = "end_date must be after or equal to start_date"

    if "is_active" in data:
        values["is_active"] = parse_bool(data.get("is_active"), True)
    elif creating:
        values["is_active"] = True

    if errors:
        raise ValidationError(errors)
    return values
