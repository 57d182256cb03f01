#  --- storefront/model/review.py ---
from datetime import datetime
from ..extensions import db


class Review(db.Model):
    __tablename__ = "review"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey("product.id", ondelete="CASCADE"), nullable=False, index=True)
    rating = db.Column(db.Integer, nullable=False)
    comment = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    user = db.relationship("User", lazy="joined")
    product = db.relationship("Product", lazy="joined")

    __table_args__ = (
        db.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_review_rating_range"),
    )

    def as_api(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "product_id": self.product_id,
            "rating": self.rating,
            "comment": self.comment,
            "user": {"id": self.user.id, "name": self.user.name} if self.user else None,
            "product": {"id": self.product.id, "name_en": self.product.name_en} if self.product else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
