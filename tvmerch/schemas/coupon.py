"""Coupon validation result schemas"""

from pydantic import BaseModel
from typing import Optional
import uuid

from .base import BaseSchema, Money, OptionalMoney

class AppliedCoupon(BaseSchema):
    """Public coupon fields plus the discount computed for one order amount"""
    id: uuid.UUID
    code: str
    name: str
    discount_type: str
    discount_value: Money
    discount: Money
    min_order_amount: Money
    max_discount: OptionalMoney = None
    per_user_limit: int
    used_count: int
    total_quantity: int

class CouponValidationResult(BaseModel):
    """Tagged outcome: either valid with a coupon, or invalid with a message"""
    valid: bool
    message: Optional[str] = None
    coupon: Optional[AppliedCoupon] = None

    @classmethod
    def reject(cls, message: str) -> "CouponValidationResult":
        return cls(valid=False, message=message)

    @classmethod
    def accept(cls, coupon: AppliedCoupon) -> "CouponValidationResult":
        return cls(valid=True, coupon=coupon)

class CouponValidateRequest(BaseModel):
    """Public discount preview request"""
    code: Optional[str] = None
    user_id: Optional[str] = None
    order_amount: Optional[Money] = None
