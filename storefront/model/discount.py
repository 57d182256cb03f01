# --- storefront/model/discount.py ---
from sqlalchemy.sql import func
from ..extensions import db
from ..utils.money import to_number


class Discount(db.Model):
    """Percentage-only promotion keyed by ``discount_code``; always date-bounded."""
    __tablename__ = "discount"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    name_ar = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    description_ar = db.Column(db.Text, nullable=False)
    discount_code = db.Column(db.String(64), unique=True, nullable=False, index=True)
    discount_percentage = db.Column(db.Numeric(5, 2), nullable=False)
    start_date = db.Column(db.DateTime, nullable=False)
    end_date = db.Column(db.DateTime, nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)

    created_at = db.Column(db.DateTime, server_default=func.now())
    updated_at = db.Column(db.DateTime, onupdate=func.now(), server_default=func.now())

    def as_api(self):
        return {
            "id": self.id,
            "name": self.name,
            "name_ar": self.name_ar,
            "description": self.description,
            "description_ar": self.description_ar,
            "discount_code": self.discount_code,
            "discount_percentage": to_number(self.discount_percentage or 0),
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "is_active": self.is_active,
        }
