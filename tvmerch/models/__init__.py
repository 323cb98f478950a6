"""Models package initialization"""

from .base import Base
from .user import User, UserRole
from .product import Product, ProductCategory
from .order import Order, OrderStatus, PaymentStatus, PaymentMethod
from .coupon import Coupon, CouponState, DiscountType

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Product",
    "ProductCategory",
    "Order",
    "OrderStatus",
    "PaymentStatus",
    "PaymentMethod",
    "Coupon",
    "CouponState",
    "DiscountType",
]
