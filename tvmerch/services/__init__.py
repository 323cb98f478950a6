"""Services package"""

from .coupon_service import CouponLedger
from .email_service import EmailService
from .user_service import UserService

__all__ = [
    "CouponLedger",
    "EmailService",
    "UserService",
]
