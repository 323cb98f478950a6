"""
Coupon and discount models
"""

from sqlalchemy import Column, String, Integer, Numeric, Boolean, Index, CheckConstraint, Text, DateTime, JSON
from datetime import datetime
from typing import Optional
import enum

from tvmerch.utils.helpers import utcnow
from .base import Base, TimestampedModel, UUIDModel, VersionedModel, SerializableModel

class DiscountType(str, enum.Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"

class CouponState(str, enum.Enum):
    """Derived state, computed from stored fields and the clock"""
    ACTIVE = "active"
    SCHEDULED = "scheduled"
    EXPIRED = "expired"
    EXHAUSTED = "exhausted"
    DISABLED = "disabled"

class Coupon(Base, TimestampedModel, UUIDModel, VersionedModel, SerializableModel):
    """Discount coupons and promo codes"""

    __tablename__ = "coupons"

    code = Column(String(50), unique=True, nullable=False, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)

    # Discount details
    discount_type = Column(String(20), nullable=False, default=DiscountType.PERCENTAGE.value)
    discount_value = Column(Numeric(10, 2), nullable=False)

    # Conditions
    min_order_amount = Column(Numeric(10, 2), nullable=False, default=0)
    max_discount = Column(Numeric(10, 2), nullable=True)  # percentage coupons only

    # Validity
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)

    # Usage limits
    total_quantity = Column(Integer, nullable=False)
    used_count = Column(Integer, nullable=False, default=0)
    per_user_limit = Column(Integer, nullable=False, default=1)
    user_usage = Column(JSON, nullable=False, default=dict)  # user id -> redemptions

    # Applicability (stored only)
    applicable_categories = Column(JSON, nullable=False, default=lambda: ["All"])

    # Status
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint("discount_value >= 0", name="check_non_negative_discount"),
        CheckConstraint("total_quantity >= 1", name="check_positive_total_quantity"),
        CheckConstraint("per_user_limit >= 1", name="check_positive_per_user_limit"),
        CheckConstraint("used_count >= 0", name="check_non_negative_used_count"),
        Index("idx_coupons_active_window", "is_active", "start_date", "end_date"),
    )

    def usage_for(self, user_id) -> int:
        """Redemptions recorded for one user; absent entries count as zero"""
        if user_id is None:
            return 0
        return int((self.user_usage or {}).get(str(user_id), 0))

    @property
    def is_exhausted(self) -> bool:
        return self.used_count >= self.total_quantity

    def state(self, now: Optional[datetime] = None) -> CouponState:
        """Current lifecycle state of the coupon"""
        now = now or utcnow()

        if not self.is_active:
            return CouponState.DISABLED
        if now < self.start_date:
            return CouponState.SCHEDULED
        if now > self.end_date:
            return CouponState.EXPIRED
        if self.is_exhausted:
            return CouponState.EXHAUSTED
        return CouponState.ACTIVE
