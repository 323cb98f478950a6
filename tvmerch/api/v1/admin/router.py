"""Admin management endpoints"""

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import logging

from tvmerch.api.v1.orders.schemas import OrderEnvelope, OrderResponse
from tvmerch.api.v1.orders.services import NOTIFY_STATUSES, OrderService
from tvmerch.core.config import settings
from tvmerch.core.database import get_db
from tvmerch.core.exceptions import (
    BadRequestException,
    InternalServerException,
    UnauthorizedException,
)
from tvmerch.core.security import SecurityUtils, require_admin
from tvmerch.schemas.base import MessageResponse
from tvmerch.services.email_service import EmailService, get_email_service
from tvmerch.utils.dependencies import get_pagination_params
from tvmerch.utils.pagination import PaginationParams
from .schemas import (
    AdminLoginRequest,
    AdminLoginResponse,
    AdminOrderListResponse,
    AdminUser,
    AdminUserListResponse,
    DashboardResponse,
    EmailConfigResponse,
    EmailSettings,
    OrderStatusUpdate,
    PaymentVerificationRequest,
    TestEmailRequest,
)
from .services import AdminService

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/login", response_model=AdminLoginResponse)
async def admin_login(credentials: AdminLoginRequest):
    """Exchange the configured admin credentials for a token"""
    if not SecurityUtils.verify_admin_credentials(credentials.email, credentials.password):
        logger.warning(f"Failed admin login for {credentials.email}")
        raise UnauthorizedException("Invalid admin credentials", error_code="INVALID_CREDENTIALS")

    logger.info("Admin logged in")
    return AdminLoginResponse(token=SecurityUtils.create_admin_token())

@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Get admin dashboard statistics"""
    return DashboardResponse(**await AdminService(db).dashboard())

@router.get("/orders", response_model=AdminOrderListResponse)
async def list_orders(
    status: Optional[str] = Query(None, description="Status filter; 'pending' and 'all' are accepted"),
    pagination: PaginationParams = Depends(get_pagination_params),
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    result = await OrderService(db).list_orders(pagination, status=status)
    return AdminOrderListResponse(
        orders=[OrderResponse.model_validate(o) for o in result.items],
        total_orders=result.total,
        total_pages=result.pages,
        current_page=result.page
    )

@router.put("/orders/{order_id}/status", response_model=OrderEnvelope)
async def update_order_status(
    order_id: str,
    data: OrderStatusUpdate,
    background_tasks: BackgroundTasks,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    email_service: EmailService = Depends(get_email_service)
):
    """Move an order along its lifecycle and notify the customer"""
    order, changed = await OrderService(db).update_status(
        order_id,
        data.status,
        tracking_number=data.tracking_number,
        tracking_url=data.tracking_url,
        carrier=data.carrier,
        admin_notes=data.admin_notes,
    )

    if changed and order.status in NOTIFY_STATUSES:
        background_tasks.add_task(email_service.send_order_status_update, order, order.status)

    return OrderEnvelope(
        message="Order status updated successfully",
        order=OrderResponse.model_validate(order)
    )

@router.post("/orders/{order_id}/verify-payment", response_model=OrderEnvelope)
async def verify_payment(
    order_id: str,
    data: PaymentVerificationRequest,
    background_tasks: BackgroundTasks,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    email_service: EmailService = Depends(get_email_service)
):
    """Approve or reject the payment on an order"""
    order = await OrderService(db).verify_payment(order_id, data.action, data.utr_number)

    background_tasks.add_task(email_service.send_payment_status, order, order.payment_status)

    return OrderEnvelope(
        message=f"Payment {data.action.strip().lower()}d successfully",
        order=OrderResponse.model_validate(order)
    )

@router.get("/users", response_model=AdminUserListResponse)
async def get_all_users(
    pagination: PaginationParams = Depends(get_pagination_params),
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Customers, newest first"""
    result = await AdminService(db).list_users(pagination)
    return AdminUserListResponse(
        users=[AdminUser.model_validate(u) for u in result.items],
        total_users=result.total,
        total_pages=result.pages,
        current_page=result.page
    )

@router.get("/email/config", response_model=EmailConfigResponse)
async def email_config(
    verify: bool = Query(False, description="Also log in to the SMTP server"),
    admin: dict = Depends(require_admin),
    email_service: EmailService = Depends(get_email_service)
):
    connection = None
    if verify:
        connection = (await email_service.verify_connection())["message"]

    return EmailConfigResponse(
        configured=email_service.is_configured,
        config=EmailSettings(
            email_host=settings.SMTP_HOST or "Not configured",
            email_user="Configured" if settings.SMTP_USER else "Not configured",
            email_from=settings.SMTP_FROM_EMAIL or settings.SMTP_USER or "Not configured",
        ),
        connection=connection
    )

@router.post("/email/test", response_model=MessageResponse)
async def send_test_email(
    data: TestEmailRequest,
    admin: dict = Depends(require_admin),
    email_service: EmailService = Depends(get_email_service)
):
    if not data.email or not data.email.strip():
        raise BadRequestException("Email is required", error_code="EMAIL_REQUIRED")

    if not email_service.is_configured:
        raise BadRequestException(
            "Email service not configured. Please set SMTP_USER and SMTP_PASSWORD",
            error_code="EMAIL_NOT_CONFIGURED"
        )

    if not await email_service.send_test_email(data.email.strip()):
        raise InternalServerException("Failed to send test email", error_code="EMAIL_SEND_FAILED")

    return MessageResponse(message="Test email sent successfully")
