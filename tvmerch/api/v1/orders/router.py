"""
Order API routes
"""

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import logging

from tvmerch.core.database import get_db
from tvmerch.services.email_service import EmailService, get_email_service
from tvmerch.utils.helpers import utcnow
from .schemas import (
    OrderCreate,
    OrderEnvelope,
    OrderHealthResponse,
    OrderListResponse,
    OrderResponse,
)
from .services import OrderService

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get(
    "/health",
    response_model=OrderHealthResponse,
    summary="Order routes health check"
)
async def orders_health():
    return OrderHealthResponse(message="Order routes are working", timestamp=utcnow())

@router.post(
    "/",
    response_model=OrderEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create order",
    description="Place an order from the storefront checkout"
)
async def create_order(
    order_data: OrderCreate,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    email_service: EmailService = Depends(get_email_service)
):
    """Create new order"""
    service = OrderService(db)
    order = await service.create_order(order_data)

    # Email never blocks or fails the order
    background_tasks.add_task(email_service.send_order_confirmation, order)

    return OrderEnvelope(
        message="Order created successfully",
        order=OrderResponse.model_validate(order)
    )

@router.get(
    "/track/{order_id}",
    response_model=OrderEnvelope,
    summary="Track order",
    description="Look up an order by its public id and the email it was placed with"
)
async def track_order(
    order_id: str,
    email: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    service = OrderService(db)
    order = await service.track_order(order_id, email)
    return OrderEnvelope(order=OrderResponse.model_validate(order))

@router.get(
    "/user/{email}",
    response_model=OrderListResponse,
    summary="Orders by customer email"
)
async def orders_for_email(
    email: str,
    db: AsyncSession = Depends(get_db)
):
    """My Orders page, newest first"""
    service = OrderService(db)
    orders = await service.list_for_email(email)
    return OrderListResponse(
        orders=[OrderResponse.model_validate(o) for o in orders],
        count=len(orders)
    )

@router.get(
    "/{order_id}",
    response_model=OrderEnvelope,
    summary="Get order details",
    description="Accepts the public order id or the internal UUID"
)
async def get_order(
    order_id: str,
    db: AsyncSession = Depends(get_db)
):
    service = OrderService(db)
    order = await service.get_order(order_id)
    return OrderEnvelope(order=OrderResponse.model_validate(order))
