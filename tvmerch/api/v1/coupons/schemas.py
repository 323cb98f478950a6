"""
Coupon administration schemas
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict
from datetime import datetime
import uuid

from tvmerch.models.coupon import DiscountType
from tvmerch.schemas.base import BaseSchema, Money, OptionalMoney
from tvmerch.utils.helpers import to_naive_utc

class CouponBase(BaseModel):
    """Fields shared by create and update"""

    @field_validator("code", check_fields=False)
    @classmethod
    def canonical_code(cls, v):
        if v is None:
            return v
        v = v.strip().upper()
        if not v:
            raise ValueError("Coupon code cannot be empty")
        return v

    @field_validator("start_date", "end_date", check_fields=False)
    @classmethod
    def naive_utc(cls, v):
        return to_naive_utc(v)

class CouponCreate(CouponBase):
    """Schema for creating a coupon"""
    code: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    discount_type: DiscountType = DiscountType.PERCENTAGE
    discount_value: Money = Field(..., ge=0)
    min_order_amount: Money = Field(0, ge=0)
    max_discount: OptionalMoney = Field(None, ge=0)
    start_date: datetime
    end_date: datetime
    total_quantity: int = Field(..., ge=1)
    per_user_limit: int = Field(1, ge=1)
    applicable_categories: List[str] = Field(default_factory=lambda: ["All"])

class CouponUpdate(CouponBase):
    """Schema for partial coupon updates"""
    code: Optional[str] = Field(None, max_length=50)
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    discount_type: Optional[DiscountType] = None
    discount_value: OptionalMoney = Field(None, ge=0)
    min_order_amount: OptionalMoney = Field(None, ge=0)
    max_discount: OptionalMoney = Field(None, ge=0)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    total_quantity: Optional[int] = Field(None, ge=1)
    per_user_limit: Optional[int] = Field(None, ge=1)
    applicable_categories: Optional[List[str]] = None
    is_active: Optional[bool] = None

class CouponResponse(BaseSchema):
    """Full coupon record for the admin panel"""
    id: uuid.UUID
    code: str
    name: str
    description: Optional[str]
    discount_type: str
    discount_value: Money
    min_order_amount: Money
    max_discount: OptionalMoney
    start_date: datetime
    end_date: datetime
    total_quantity: int
    used_count: int
    per_user_limit: int
    user_usage: Dict[str, int]
    applicable_categories: List[str]
    is_active: bool
    state: str
    created_at: datetime
    updated_at: datetime

class CouponEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    coupon: CouponResponse

class CouponListResponse(BaseModel):
    success: bool = True
    count: int
    coupons: List[CouponResponse]

class CouponUsageStat(BaseModel):
    code: str
    name: str
    used: int
    total: int
    usage_percentage: float

class CouponUsageStatsResponse(BaseModel):
    success: bool = True
    stats: List[CouponUsageStat]
