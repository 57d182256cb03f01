from datetime import datetime
from ..extensions import db
from ..utils.money import to_number

ORDER_STATUSES = ("pending", "processing", "shipped", "delivered", "cancelled")


class Order(db.Model):
    __tablename__ = "orders"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    address_id = db.Column(db.Integer, db.ForeignKey("address.id", ondelete="SET NULL"), nullable=True)
    status = db.Column(db.String(20), default="pending", nullable=False, index=True)
    payment_method = db.Column(db.String(32), default="cash", nullable=False)
    tracking_number = db.Column(db.String(255))

    # Money snapshot
    coupon_id = db.Column(db.Integer, nullable=True)   # not a FK; coupons may be deleted later
    coupon_code = db.Column(db.String(64))
    subtotal = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    discount = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    total = db.Column(db.Numeric(12, 2), nullable=False, default=0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    user = db.relationship("User", lazy="joined")
    address = db.relationship("Address", lazy="joined")
    items = db.relationship(
        "OrderItem",
        backref="order",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def as_api(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "status": self.status,
            "payment_method": self.payment_method,
            "tracking_number": self.tracking_number,
            "address": self.address.as_dict() if self.address else None,
            "coupon_code": self.coupon_code,
            "money": {
                "subtotal": to_number(self.subtotal or 0),
                "discount": to_number(self.discount or 0),
                "total": to_number(self.total or 0),
            },
            "items": [i.as_api() for i in self.items],
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class OrderItem(db.Model):
    __tablename__ = "order_items"

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=False, index=True)

    product_id = db.Column(db.Integer, index=True)
    name = db.Column(db.String(255))
    color = db.Column(db.String(64))
    size = db.Column(db.String(64))

    unit_price = db.Column(db.Numeric(12, 2))
    quantity = db.Column(db.Integer, nullable=False)
    line_total = db.Column(db.Numeric(12, 2))

    def as_api(self):
        return {
            "product_id": self.product_id,
            "name": self.name,
            "color": self.color,
            "size": self.size,
            "unit_price": to_number(self.unit_price or 0),
            "quantity": self.quantity,
            "line_total": to_number(self.line_total or 0),
        }
