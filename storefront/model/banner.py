from ..extensions import db
from sqlalchemy.sql import func


class Banner(db.Model):
    __tablename__ = "banner"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    title_ar = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    description_ar = db.Column(db.Text)
    image = db.Column(db.String(512), nullable=False)
    link_url = db.Column(db.String(1024))
    order = db.Column(db.Integer, nullable=True)      # display position
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(db.DateTime, server_default=func.now())
    updated_at = db.Column(db.DateTime, onupdate=func.now(), server_default=func.now())

    def as_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "title_ar": self.title_ar,
            "description": self.description,
            "description_ar": self.description_ar,
            "image": self.image,
            "link_url": self.link_url,
            "order": self.order,
            "is_active": self.is_active,
        }
