"""
Coupon API routes
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
import uuid
import logging

from tvmerch.core.database import get_db
from tvmerch.core.exceptions import BadRequestException
from tvmerch.core.security import require_admin
from tvmerch.schemas.base import MessageResponse
from tvmerch.schemas.coupon import CouponValidateRequest, CouponValidationResult
from tvmerch.services.coupon_service import CouponLedger
from .schemas import (
    CouponCreate,
    CouponEnvelope,
    CouponListResponse,
    CouponUpdate,
    CouponUsageStatsResponse,
)
from .services import CouponAdminService, to_response

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post(
    "/validate",
    response_model=CouponValidationResult,
    response_model_exclude_none=True,
    summary="Validate coupon",
    description="Preview the discount a coupon gives on an order amount"
)
async def validate_coupon(
    request: CouponValidateRequest,
    db: AsyncSession = Depends(get_db)
):
    """Public discount preview"""
    if not request.code or not request.code.strip() or not request.order_amount:
        raise BadRequestException("Coupon code and order amount are required")

    ledger = CouponLedger(db)
    return await ledger.validate(request.code, request.user_id, request.order_amount)

@router.get(
    "/stats/usage",
    response_model=CouponUsageStatsResponse,
    summary="Coupon usage statistics"
)
async def coupon_usage_stats(
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = CouponAdminService(db)
    return CouponUsageStatsResponse(stats=await service.usage_stats())

@router.get(
    "/",
    response_model=CouponListResponse,
    summary="List coupons"
)
async def list_coupons(
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """All coupons, newest first"""
    service = CouponAdminService(db)
    coupons = [to_response(c) for c in await service.list_coupons()]
    return CouponListResponse(count=len(coupons), coupons=coupons)

@router.get(
    "/{coupon_id}",
    response_model=CouponEnvelope,
    summary="Get coupon"
)
async def get_coupon(
    coupon_id: uuid.UUID,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = CouponAdminService(db)
    coupon = await service.get_coupon(coupon_id)
    return CouponEnvelope(coupon=to_response(coupon))

@router.post(
    "/",
    response_model=CouponEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create coupon"
)
async def create_coupon(
    data: CouponCreate,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = CouponAdminService(db)
    coupon = await service.create_coupon(data)
    return CouponEnvelope(message="Coupon created successfully", coupon=to_response(coupon))

@router.put(
    "/{coupon_id}",
    response_model=CouponEnvelope,
    summary="Update coupon"
)
async def update_coupon(
    coupon_id: uuid.UUID,
    data: CouponUpdate,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = CouponAdminService(db)
    coupon = await service.update_coupon(coupon_id, data)
    return CouponEnvelope(message="Coupon updated successfully", coupon=to_response(coupon))

@router.delete(
    "/{coupon_id}",
    response_model=MessageResponse,
    summary="Delete coupon",
    description="Only coupons that were never redeemed can be deleted"
)
async def delete_coupon(
    coupon_id: uuid.UUID,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = CouponAdminService(db)
    await service.delete_coupon(coupon_id)
    return MessageResponse(message="Coupon deleted successfully")
