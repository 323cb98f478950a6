"""
Coupon administration service
Create/update/delete/list work on the Coupon rows directly; validation and
redemption go through the CouponLedger.
"""

from typing import List
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging
import uuid

from tvmerch.models.coupon import Coupon, DiscountType
from tvmerch.core.exceptions import (
    BadRequestException,
    CouponInUseException,
    DuplicateResourceException,
    NotFoundException,
)
from tvmerch.utils.helpers import percentage
from .schemas import CouponCreate, CouponResponse, CouponUpdate, CouponUsageStat

logger = logging.getLogger(__name__)

def to_response(coupon: Coupon, now: datetime = None) -> CouponResponse:
    data = coupon.to_dict()
    data["state"] = coupon.state(now).value
    return CouponResponse(**data)

def check_window(start_date: datetime, end_date: datetime) -> None:
    if start_date >= end_date:
        raise BadRequestException("End date must be after start date", error_code="INVALID_DATE_RANGE")

class CouponAdminService:
    """Coupon CRUD for the admin panel"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _code_taken(self, code: str) -> bool:
        result = await self.db.execute(select(Coupon.id).where(Coupon.code == code))
        return result.first() is not None

    async def get_coupon(self, coupon_id: uuid.UUID) -> Coupon:
        coupon = await self.db.get(Coupon, coupon_id)
        if not coupon:
            raise NotFoundException("Coupon not found")
        return coupon

    async def list_coupons(self) -> List[Coupon]:
        result = await self.db.execute(
            select(Coupon).order_by(Coupon.created_at.desc())
        )
        return list(result.scalars().all())

    async def create_coupon(self, data: CouponCreate) -> Coupon:
        """
        Create a coupon

        Raises:
            DuplicateResourceException: Code already exists
            BadRequestException: Validity window is empty
        """
        if await self._code_taken(data.code):
            raise DuplicateResourceException("Coupon code already exists")

        check_window(data.start_date, data.end_date)

        coupon = Coupon(
            code=data.code,
            name=data.name,
            description=data.description,
            discount_type=data.discount_type.value,
            discount_value=data.discount_value,
            min_order_amount=data.min_order_amount or 0,
            max_discount=data.max_discount if data.discount_type == DiscountType.PERCENTAGE else None,
            start_date=data.start_date,
            end_date=data.end_date,
            total_quantity=data.total_quantity,
            used_count=0,
            per_user_limit=data.per_user_limit,
            user_usage={},
            applicable_categories=data.applicable_categories or ["All"],
            is_active=True,
        )
        self.db.add(coupon)
        await self.db.flush()

        logger.info(f"Coupon {coupon.code} created")
        return coupon

    async def update_coupon(self, coupon_id: uuid.UUID, data: CouponUpdate) -> Coupon:
        """
        Apply a partial update

        Raises:
            NotFoundException: Unknown coupon
            DuplicateResourceException: New code belongs to another coupon
            BadRequestException: Resulting validity window is empty
        """
        coupon = await self.get_coupon(coupon_id)
        changes = data.model_dump(exclude_unset=True)

        new_code = changes.get("code")
        if new_code and new_code != coupon.code and await self._code_taken(new_code):
            raise DuplicateResourceException("Coupon code already exists")

        if "discount_type" in changes and changes["discount_type"] is not None:
            changes["discount_type"] = DiscountType(changes["discount_type"]).value

        check_window(
            changes.get("start_date") or coupon.start_date,
            changes.get("end_date") or coupon.end_date,
        )

        # Counters belong to the ledger
        changed = coupon.apply_changes(
            {k: v for k, v in changes.items() if v is not None or k in ("description", "max_discount")},
            protected=("id", "used_count", "user_usage", "version"),
        )
        await self.db.flush()

        logger.info(f"Coupon {coupon.code} updated: {sorted(changed)}")
        return coupon

    async def delete_coupon(self, coupon_id: uuid.UUID) -> None:
        """
        Delete an unused coupon

        Raises:
            NotFoundException: Unknown coupon
            CouponInUseException: Coupon has been redeemed
        """
        coupon = await self.get_coupon(coupon_id)
        if coupon.used_count > 0:
            raise CouponInUseException()

        await self.db.delete(coupon)
        await self.db.flush()
        logger.info(f"Coupon {coupon.code} deleted")

    async def usage_stats(self) -> List[CouponUsageStat]:
        result = await self.db.execute(
            select(Coupon.code, Coupon.name, Coupon.used_count, Coupon.total_quantity)
            .order_by(Coupon.used_count.desc())
        )
        return [
            CouponUsageStat(
                code=row.code,
                name=row.name,
                used=row.used_count,
                total=row.total_quantity,
                usage_percentage=percentage(row.used_count, row.total_quantity),
            )
            for row in result.all()
        ]
