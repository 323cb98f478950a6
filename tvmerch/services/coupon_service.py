"""
Coupon ledger: coupon validation and redemption accounting
"""

from typing import Optional, Union
from datetime import datetime
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
import logging
import uuid

from tvmerch.models.coupon import Coupon, DiscountType
from tvmerch.schemas.coupon import AppliedCoupon, CouponValidationResult
from tvmerch.core.exceptions import CouponRedemptionException, NotFoundException
from tvmerch.utils.helpers import format_amount, round_to_unit, to_decimal, utcnow

logger = logging.getLogger(__name__)

UserId = Optional[Union[str, uuid.UUID]]

def normalize_code(code: str) -> str:
    return (code or "").strip().upper()

def user_key(user_id: UserId) -> Optional[str]:
    """Key into user_usage; blank identifiers mean no user"""
    key = str(user_id).strip() if user_id is not None else ""
    return key or None

def per_user_limit_message(used: int, limit: int) -> str:
    return (
        f"You have already used this coupon {used} time(s). "
        f"Maximum {limit} per user."
    )

def compute_discount(coupon: Coupon, order_amount: Decimal) -> Decimal:
    """
    Discount a coupon grants on an order amount

    Percentage discounts are capped by max_discount when set. The result
    never exceeds the order amount and is rounded to whole currency units.
    """
    discount_value = to_decimal(coupon.discount_value)

    if coupon.discount_type == DiscountType.PERCENTAGE.value:
        discount = order_amount * discount_value / 100
        if coupon.max_discount and discount > coupon.max_discount:
            discount = to_decimal(coupon.max_discount)
    else:
        discount = discount_value

    if discount > order_amount:
        discount = order_amount

    return round_to_unit(discount)

class CouponLedger:
    """
    Validates coupon codes against an order and records redemptions

    Business-rule failures come back as CouponValidationResult values;
    only storage errors propagate as exceptions.
    """

    # Re-reads allowed when a concurrent redemption bumps the row version
    MAX_REDEMPTION_ATTEMPTS = 5

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_code(self, code: str, active_only: bool = False) -> Optional[Coupon]:
        query = select(Coupon).where(Coupon.code == normalize_code(code))
        if active_only:
            query = query.where(Coupon.is_active.is_(True))
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def validate(
        self,
        code: str,
        user_id: UserId,
        order_amount: Union[Decimal, int, float],
        now: Optional[datetime] = None
    ) -> CouponValidationResult:
        """
        Validate coupon and calculate discount

        Args:
            code: Coupon code, any case
            user_id: Customer identifier; per-user limits are skipped when blank
            order_amount: Order subtotal the discount is computed against
            now: Clock override (naive UTC)

        Returns:
            Tagged validation result
        """
        now = now or utcnow()
        order_amount = to_decimal(order_amount)

        coupon = await self.get_by_code(code, active_only=True)
        if not coupon:
            return CouponValidationResult.reject("Invalid coupon code")

        if now < coupon.start_date:
            return CouponValidationResult.reject("Coupon is not yet active")

        if now > coupon.end_date:
            return CouponValidationResult.reject("Coupon has expired")

        if coupon.used_count >= coupon.total_quantity:
            return CouponValidationResult.reject("Coupon usage limit reached")

        key = user_key(user_id)
        if key is not None:
            used = coupon.usage_for(key)
            if used >= coupon.per_user_limit:
                return CouponValidationResult.reject(
                    per_user_limit_message(used, coupon.per_user_limit)
                )

        if order_amount < coupon.min_order_amount:
            return CouponValidationResult.reject(
                f"Minimum order amount ₹{format_amount(coupon.min_order_amount)} required"
            )

        discount = compute_discount(coupon, order_amount)

        return CouponValidationResult.accept(
            AppliedCoupon(
                id=coupon.id,
                code=coupon.code,
                name=coupon.name,
                discount_type=coupon.discount_type,
                discount_value=coupon.discount_value,
                discount=discount,
                min_order_amount=coupon.min_order_amount,
                max_discount=coupon.max_discount,
                per_user_limit=coupon.per_user_limit,
                used_count=coupon.used_count,
                total_quantity=coupon.total_quantity,
            )
        )

    async def _reload(self, coupon_id: uuid.UUID) -> Optional[Coupon]:
        result = await self.db.execute(
            select(Coupon)
            .where(Coupon.id == coupon_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def record_redemption(
        self,
        coupon: Union[Coupon, uuid.UUID],
        user_id: UserId = None
    ) -> None:
        """
        Count one redemption against the global and per-user counters

        The increment is a single conditional UPDATE guarded by the row
        version and the global cap, so concurrent redemptions can neither
        lose updates nor push used_count past total_quantity. Callers must
        invoke this once per order; every call increments.

        Raises:
            NotFoundException: Coupon no longer exists
            CouponRedemptionException: A cap was reached before the write
        """
        coupon_id = coupon.id if isinstance(coupon, Coupon) else coupon
        key = user_key(user_id)

        for attempt in range(1, self.MAX_REDEMPTION_ATTEMPTS + 1):
            current = await self._reload(coupon_id)
            if current is None:
                raise NotFoundException("Coupon not found")

            if current.used_count >= current.total_quantity:
                raise CouponRedemptionException("Coupon usage limit reached")

            usage = dict(current.user_usage or {})
            if key is not None:
                used = int(usage.get(key, 0))
                if used >= current.per_user_limit:
                    raise CouponRedemptionException(
                        per_user_limit_message(used, current.per_user_limit)
                    )
                usage[key] = used + 1

            result = await self.db.execute(
                update(Coupon)
                .where(
                    Coupon.id == coupon_id,
                    Coupon.version == current.version,
                    Coupon.used_count < Coupon.total_quantity,
                )
                .values(
                    used_count=Coupon.used_count + 1,
                    user_usage=usage,
                    version=Coupon.version + 1,
                    updated_at=utcnow(),
                )
                .execution_options(synchronize_session=False)
            )

            if result.rowcount == 1:
                logger.info(
                    f"Coupon {current.code} redeemed: used {current.used_count + 1}/"
                    f"{current.total_quantity}"
                    + (f", user {key} count {usage[key]}" if key else "")
                )
                await self._reload(coupon_id)
                return

            logger.info(
                f"Coupon {current.code} changed during redemption, retrying "
                f"(attempt {attempt}/{self.MAX_REDEMPTION_ATTEMPTS})"
            )

        raise CouponRedemptionException(
            "Coupon is being redeemed by other orders, please try again"
        )
