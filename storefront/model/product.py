# storefront/model/product.py
from sqlalchemy.sql import func
from ..extensions import db
from ..utils.money import to_number


class Product(db.Model):
    __tablename__ = "product"

    id = db.Column(db.Integer, primary_key=True)
    name_en = db.Column(db.String(255), nullable=False, index=True)
    name_ar = db.Column(db.String(255), nullable=False)
    description_en = db.Column(db.Text)
    description_ar = db.Column(db.Text)
    image = db.Column(db.String(512))                 # path or URL, stored as-is

    colors = db.Column(db.JSON)                       # ["red", "blue"]
    sizes = db.Column(db.JSON)                        # ["S", "M", "L"]

    price = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    status = db.Column(db.Boolean, default=True, index=True)

    category_id = db.Column(db.Integer, db.ForeignKey("category.id", ondelete="CASCADE"), nullable=False, index=True)
    subcategory_id = db.Column(db.Integer, db.ForeignKey("subcategory.id", ondelete="SET NULL"), nullable=True, index=True)
    brand_id = db.Column(db.Integer, db.ForeignKey("brand.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = db.Column(db.DateTime, server_default=func.now())
    updated_at = db.Column(db.DateTime, onupdate=func.now(), server_default=func.now())

    subcategory = db.relationship("SubCategory", lazy="joined")

    def as_api(self):
        return {
            "id": self.id,
            "name_en": self.name_en,
            "name_ar": self.name_ar,
            "description_en": self.description_en,
            "description_ar": self.description_ar,
            "image": self.image,
            "colors": self.colors or [],
            "sizes": self.sizes or [],
            "price": to_number(self.price or 0),
            "status": self.status,
            "category_id": self.category_id,
            "subcategory_id": self.subcategory_id,
            "brand_id": self.brand_id,
            "category": self.category.as_dict() if self.category else None,
            "brand": self.brand.as_dict() if self.brand else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
