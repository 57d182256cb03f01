"""
Pytest configuration and shared fixtures
"""

from decimal import Decimal
from types import SimpleNamespace

import pytest
from flask_jwt_extended import create_access_token
from werkzeug.security import generate_password_hash

from storefront import create_app
from storefront.config import TestConfig
from storefront.extensions import db
from storefront.model import Brand, Category, Coupon, Product, User

PASSWORD = "secret123"


@pytest.fixture
def app():
    """Fresh app on an in-memory SQLite database for each test."""
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def make_user(email, role="user", firstname="Test", lastname="User"):
    user = User(
        firstname=firstname,
        lastname=lastname,
        email=email,
        password_hash=generate_password_hash(PASSWORD),
        role=role,
    )
    db.session.add(user)
    db.session.commit()
    return user


def auth_headers(user):
    token = create_access_token(identity=str(user.id))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin(app):
    return make_user("admin@example.com", role="admin", firstname="Ada")


@pytest.fixture
def manager(app):
    return make_user("manager@example.com", role="manager", firstname="Max")


@pytest.fixture
def user(app):
    return make_user("user@example.com", firstname="Uma")


@pytest.fixture
def other_user(app):
    return make_user("other@example.com", firstname="Omar")


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def manager_headers(manager):
    return auth_headers(manager)


@pytest.fixture
def user_headers(user):
    return auth_headers(user)


@pytest.fixture
def other_headers(other_user):
    return auth_headers(other_user)


@pytest.fixture
def catalog(app):
    """One category, one brand, a 50.00 shirt (red/blue, M/L) and a 30.00 cap."""
    category = Category(name_en="Clothing", name_ar="ملابس")
    brand = Brand(name_en="Acme", name_ar="أكمي")
    db.session.add_all([category, brand])
    db.session.flush()

    shirt = Product(
        name_en="Shirt", name_ar="قميص", price=Decimal("50.00"),
        colors=["red", "blue"], sizes=["M", "L"],
        category_id=category.id, brand_id=brand.id,
    )
    cap = Product(
        name_en="Cap", name_ar="قبعة", price=Decimal("30.00"),
        colors=[], sizes=[],
        category_id=category.id, brand_id=brand.id,
    )
    db.session.add_all([shirt, cap])
    db.session.commit()
    return SimpleNamespace(category=category, brand=brand, shirt=shirt, cap=cap)


@pytest.fixture
def make_coupon(app):
    """Factory for coupons; defaults to an open-ended, unlimited 10% code."""
    def _make(code="SAVE10", **kwargs):
        values = dict(
            discount_type="percentage",
            discount_value=Decimal("10"),
            max_uses=0,
            used_count=0,
            is_active=True,
        )
        values.update(kwargs)
        coupon = Coupon(code=code, **values)
        db.session.add(coupon)
        db.session.commit()
        return coupon
    return _make

