# --- storefront/model/coupon.py ---

from ..extensions import db
from sqlalchemy.sql import func
from ..utils.money import to_number

DISCOUNT_TYPES = ("percentage", "fixed")


class Coupon(db.Model):
    __tablename__ = "coupon"

    id = db.Column(db.Integer, primary_key=True)
    # exact match, case-sensitive as stored
    code = db.Column(db.String(64), unique=True, nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)

    # "percentage" or "fixed"
    discount_type = db.Column(db.String(16), nullable=False, default="percentage")
    discount_value = db.Column(db.Numeric(8, 2), nullable=False, default=0)

    # 0 = unlimited
    max_uses = db.Column(db.Integer, nullable=False, default=1)
    used_count = db.Column(db.Integer, nullable=False, default=0)

    # None = open bound
    start_date = db.Column(db.DateTime, nullable=True)
    end_date = db.Column(db.DateTime, nullable=True)

    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)

    created_at = db.Column(db.DateTime, server_default=func.now())
    updated_at = db.Column(db.DateTime, onupdate=func.now(), server_default=func.now())

    __table_args__ = (
        db.CheckConstraint("used_count >= 0", name="ck_coupon_used_count_non_negative"),
        db.CheckConstraint("max_uses >= 0", name="ck_coupon_max_uses_non_negative"),
        db.CheckConstraint("discount_value >= 0", name="ck_coupon_value_non_negative"),
    )

    def __repr__(self):
        return f"<Coupon id={self.id} code={self.code!r}>"

    def as_api(self):
        return {
            "id": self.id,
            "code": self.code,
            "description": self.description,
            "discount_type": self.discount_type,
            "discount_value": to_number(self.discount_value or 0),
            "max_uses": self.max_uses,
            "used_count": self.used_count,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
