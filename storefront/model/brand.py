# --- storefront/model/brand.py ---
from ..extensions import db


class Brand(db.Model):
    __tablename__ = "brand"

    id = db.Column(db.Integer, primary_key=True)
    name_en = db.Column(db.String(120), nullable=False)
    name_ar = db.Column(db.String(120), nullable=False)
    description_en = db.Column(db.Text)
    description_ar = db.Column(db.Text)
    logo = db.Column(db.String(512))
    status = db.Column(db.Boolean, default=True, nullable=False)

    products = db.relationship("Product", backref="brand", lazy=True)

    def as_dict(self):
        return {
            "id": self.id,
            "name_en": self.name_en,
            "name_ar": self.name_ar,
            "description_en": self.description_en,
            "description_ar": self.description_ar,
            "logo": self.logo,
            "status": self.status,
        }
