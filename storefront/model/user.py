# --- storefront/model/user.py ---
from sqlalchemy.sql import func
from ..extensions import db


class User(db.Model):
    __tablename__ = "user"

    id = db.Column(db.Integer, primary_key=True)
    firstname = db.Column(db.String(255), nullable=False)
    lastname = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False, default="")
    role = db.Column(db.String(50), nullable=False, default="user", index=True)  # user, manager, admin
    created_at = db.Column(db.DateTime, server_default=func.now())

    @property
    def name(self):
        return f"{self.firstname} {self.lastname}".strip()

    def as_dict(self):
        return {
            "id": self.id,
            "firstname": self.firstname,
            "lastname": self.lastname,
            "name": self.name,
            "email": self.email,
            "role": self.role,
        }


class TokenBlocklist(db.Model):
    """Revoked JWTs (logout)."""
    __tablename__ = "token_blocklist"

    id = db.Column(db.Integer, primary_key=True)
    jti = db.Column(db.String(64), unique=True, nullable=False, index=True)
    created_at = db.Column(db.DateTime, server_default=func.now())
