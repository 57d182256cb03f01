# --- storefront/model/address.py ---
from ..extensions import db


class Address(db.Model):
    __tablename__ = "address"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    country = db.Column(db.String(120))
    city = db.Column(db.String(120), nullable=False)
    street = db.Column(db.String(255), nullable=False)
    building = db.Column(db.String(120), nullable=False)
    zip_code = db.Column(db.String(32))
    is_default = db.Column(db.Boolean, nullable=False, default=False)

    def as_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "country": self.country,
            "city": self.city,
            "street": self.street,
            "building": self.building,
            "zip_code": self.zip_code,
            "is_default": self.is_default,
        }
