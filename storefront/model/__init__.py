# ------ storefront/model/__init__.py ------

from .user import User, TokenBlocklist
from .category import Category, SubCategory
from .brand import Brand
from .product import Product
from .cart import Cart, CartItem
from .coupon import Coupon, DISCOUNT_TYPES
from .discount import Discount
from .address import Address
from .order import Order, OrderItem, ORDER_STATUSES
from .review import Review
from .banner import Banner

__all__ = [
    "User",
    "TokenBlocklist",
    "Category",
    "SubCategory",
    "Brand",
    "Product",
    "Cart",
    "CartItem",
    "Coupon",
    "DISCOUNT_TYPES",
    "Discount",
    "Address",
    "Order",
    "OrderItem",
    "ORDER_STATUSES",
    "Review",
    "Banner",
]
