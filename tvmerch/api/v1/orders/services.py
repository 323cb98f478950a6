"""
Order service layer
Handles order placement, lookup and admin status management
"""

from typing import List, Optional, Dict, Any, Tuple
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging
import uuid

from tvmerch.models.order import Order, OrderStatus, PaymentMethod, PaymentStatus
from tvmerch.core.config import settings
from tvmerch.core.exceptions import (
    BadRequestException,
    InvalidOrderTransitionException,
    NotFoundException,
)
from tvmerch.services.coupon_service import CouponLedger, normalize_code
from tvmerch.services.user_service import UserService, normalize_email
from tvmerch.utils.helpers import generate_order_id, to_decimal, utcnow
from tvmerch.utils.pagination import Page, PaginationParams, paginate
from .schemas import OrderCreate, OrderItemIn, ShippingAddress
from .state_machine import OrderStateMachine

logger = logging.getLogger(__name__)

# Admin filter aliases used by the dashboard
STATUS_ALIASES = {
    "pending": OrderStatus.PAYMENT_PENDING.value,
}

# Statuses that trigger a customer email when entered
NOTIFY_STATUSES = {
    OrderStatus.PROCESSING.value,
    OrderStatus.SHIPPED.value,
    OrderStatus.DELIVERED.value,
    OrderStatus.CANCELLED.value,
}

PAYMENT_ACTIONS = ("approve", "reject")

def clean_utr(utr_number: Optional[str]) -> str:
    """Keep only the digits of a UPI transaction reference"""
    return "".join(ch for ch in str(utr_number or "") if ch.isdigit())

def compute_charges(
    subtotal: Decimal,
    payment_method: str
) -> Tuple[Decimal, Decimal, Decimal, str]:
    """
    Delivery, handling, payment discount and initial payment status

    Delivery is free from the configured threshold upwards. COD carries a
    handling charge and is collected on delivery; UPI earns a flat discount.
    """
    if subtotal >= settings.FREE_DELIVERY_THRESHOLD:
        delivery = Decimal("0")
    else:
        delivery = to_decimal(settings.DELIVERY_CHARGE)

    if payment_method == PaymentMethod.COD.value:
        return delivery, to_decimal(settings.COD_HANDLING_CHARGE), Decimal("0"), PaymentStatus.TO_COLLECT.value

    return delivery, Decimal("0"), to_decimal(settings.UPI_DISCOUNT), PaymentStatus.PENDING.value

def format_shipping_address(
    address: Optional[ShippingAddress],
    email: str,
    user_name: Optional[str]
) -> Dict[str, Any]:
    address = address or ShippingAddress()
    street = f"{address.house_flat} {address.street}".strip()
    return {
        "full_name": address.full_name or user_name or "Customer",
        "email": address.email or email,
        "phone": address.phone,
        "address": address.address or street or "Not provided",
        "city": address.city,
        "state": address.state,
        "pincode": address.pincode,
        "country": address.country,
    }

def items_subtotal(items: List[OrderItemIn]) -> Decimal:
    return sum((item.price * item.quantity for item in items), Decimal("0"))

class OrderService:
    """Order service for business logic"""

    # Regenerations allowed when a random public id collides
    MAX_ORDER_ID_ATTEMPTS = 5

    def __init__(self, db: AsyncSession):
        self.db = db
        self.coupon_ledger = CouponLedger(db)
        self.user_service = UserService(db)
        self.state_machine = OrderStateMachine()

    async def _new_order_id(self) -> str:
        for _ in range(self.MAX_ORDER_ID_ATTEMPTS):
            candidate = generate_order_id()
            taken = await self.db.scalar(select(Order.id).where(Order.order_id == candidate))
            if taken is None:
                return candidate
        raise BadRequestException("Order ID already exists. Please try again.", error_code="ORDER_ID_COLLISION")

    async def create_order(self, data: OrderCreate) -> Order:
        """
        Place an order

        The coupon, if any, is validated against the subtotal. A coupon that
        fails validation is dropped and the order goes through without it; a
        coupon that passes is redeemed in the same transaction as the insert.

        Raises:
            BadRequestException: Missing email/items, bad payment method or UTR
            CouponRedemptionException: Coupon caps were hit between validation and write
        """
        if not data.user_email or not data.user_email.strip():
            raise BadRequestException("User email is required", error_code="EMAIL_REQUIRED")

        if not data.items:
            raise BadRequestException("Items are required", error_code="ITEMS_REQUIRED")

        email = normalize_email(data.user_email)

        payment_method = (data.payment_method or "").strip().upper()
        if payment_method not in {m.value for m in PaymentMethod}:
            raise BadRequestException(
                'Invalid payment method. Use "UPI" or "COD"', error_code="INVALID_PAYMENT_METHOD"
            )

        utr_number = ""
        if payment_method == PaymentMethod.UPI.value:
            if not data.utr_number or not str(data.utr_number).strip():
                raise BadRequestException(
                    "UTR number is required for UPI payments", error_code="UTR_REQUIRED"
                )
            utr_number = clean_utr(data.utr_number)
            if len(utr_number) != 12:
                raise BadRequestException(
                    "UTR must be 12 digits for UPI payments", error_code="INVALID_UTR"
                )

        user = await self.user_service.get_or_create(email, data.user_name)

        subtotal = data.subtotal_amount or items_subtotal(data.items)

        applied = None
        code = normalize_code(data.coupon_code)
        if code:
            result = await self.coupon_ledger.validate(code, user.id, subtotal)
            if result.valid:
                applied = result.coupon
            else:
                logger.warning(f"Coupon {code} not applied to order for {email}: {result.message}")

        delivery, handling, discount, payment_status = compute_charges(subtotal, payment_method)
        if data.delivery_charge is not None:
            delivery = data.delivery_charge
        if data.handling_charge is not None and data.discount is not None:
            handling, discount = data.handling_charge, data.discount

        coupon_discount = applied.discount if applied else Decimal("0")

        # A client total may include a coupon discount that was just refused
        coupon_dropped = bool(code) and applied is None
        if data.total_amount and not coupon_dropped:
            total = data.total_amount
        else:
            total = max(subtotal + delivery + handling - discount - coupon_discount, Decimal("0"))

        order = Order(
            order_id=await self._new_order_id(),
            user_id=user.id,
            user_email=email,
            user_name=(data.user_name or "").strip() or user.name,
            items=[item.model_dump(mode="json") for item in data.items],
            shipping_address=format_shipping_address(data.shipping_address, email, data.user_name),
            subtotal_amount=subtotal,
            delivery_charge=delivery,
            handling_charge=handling,
            discount=discount,
            coupon_code=applied.code if applied else "",
            coupon_discount=coupon_discount,
            coupon_details=applied.model_dump(mode="json") if applied else None,
            total_amount=total,
            payment_method=payment_method,
            payment_status=payment_status,
            utr_number=utr_number,
            status=OrderStatus.PAYMENT_PENDING.value,
            tracking_number="",
            admin_notes="",
        )
        self.db.add(order)
        await self.db.flush()

        if applied:
            await self.coupon_ledger.record_redemption(applied.id, user.id)

        logger.info(
            f"Order {order.order_id} created for {email}: {payment_method}, total {total}"
            + (f", coupon {applied.code} -{coupon_discount}" if applied else "")
        )
        return order

    async def get_by_order_id(self, order_id: str) -> Optional[Order]:
        result = await self.db.execute(
            select(Order).where(Order.order_id == (order_id or "").strip())
        )
        return result.scalar_one_or_none()

    async def get_order(self, identifier: str) -> Order:
        """
        Find an order by public order id, falling back to the primary key

        Raises:
            NotFoundException: No such order
        """
        order = await self.get_by_order_id(identifier)
        if order is None:
            try:
                order = await self.db.get(Order, uuid.UUID(str(identifier).strip()))
            except ValueError:
                order = None

        if order is None:
            raise NotFoundException("Order not found")
        return order

    async def track_order(self, order_id: str, email: Optional[str]) -> Order:
        """Public tracking needs the order id and the email it was placed with"""
        if not email or not email.strip():
            raise BadRequestException("Email is required for tracking", error_code="EMAIL_REQUIRED")

        result = await self.db.execute(
            select(Order).where(
                Order.order_id == order_id.strip(),
                Order.user_email == normalize_email(email),
            )
        )
        order = result.scalar_one_or_none()
        if order is None:
            raise NotFoundException("Order not found. Please check your Order ID and Email.")
        return order

    async def list_for_email(self, email: str) -> List[Order]:
        result = await self.db.execute(
            select(Order)
            .where(Order.user_email == normalize_email(email))
            .order_by(Order.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_orders(
        self,
        params: PaginationParams,
        status: Optional[str] = None
    ) -> Page:
        """
        Paginated order list for the admin panel

        Args:
            status: Status filter; "all" or empty means no filter, "pending"
                means payment_pending
            params: Page number and size

        Returns:
            One page of orders, newest first
        """
        query = select(Order).order_by(Order.created_at.desc())

        if status and status != "all":
            query = query.where(Order.status == STATUS_ALIASES.get(status, status))

        return await paginate(self.db, query, params)

    async def update_status(
        self,
        identifier: str,
        new_status: str,
        tracking_number: Optional[str] = None,
        tracking_url: Optional[str] = None,
        carrier: Optional[str] = None,
        admin_notes: Optional[str] = None
    ) -> Tuple[Order, bool]:
        """
        Move an order through the status machine

        Re-sending the current status only updates the tracking details.

        Returns:
            The order and whether its status changed

        Raises:
            BadRequestException: Unknown status
            InvalidOrderTransitionException: Transition not allowed
            NotFoundException: No such order
        """
        try:
            target = self.state_machine.parse(new_status)
        except ValueError:
            raise BadRequestException("Invalid status", error_code="INVALID_STATUS")

        order = await self.get_order(identifier)
        old_status = order.status
        changed = old_status != target.value

        if changed and not self.state_machine.can_transition(old_status, target):
            raise InvalidOrderTransitionException(old_status, target.value)

        order.status = target.value
        now = utcnow()
        if target == OrderStatus.SHIPPED and not order.shipped_at:
            order.shipped_at = now
        elif target == OrderStatus.DELIVERED and not order.delivered_at:
            order.delivered_at = now

        if tracking_number is not None:
            order.tracking_number = tracking_number
        if tracking_url is not None:
            order.tracking_url = tracking_url
        if carrier is not None:
            order.carrier = carrier
        if admin_notes is not None:
            order.admin_notes = admin_notes

        await self.db.flush()
        logger.info(f"Order {order.order_id} status {old_status} -> {order.status}")
        return order, changed

    async def verify_payment(
        self,
        identifier: str,
        action: str,
        utr_number: Optional[str] = None
    ) -> Order:
        """
        Approve or reject a payment

        Approval marks the payment verified and confirms an order still
        waiting on payment. Rejection fails the payment and cancels the order.

        Raises:
            BadRequestException: Unknown action
            InvalidOrderTransitionException: Order can no longer be cancelled
            NotFoundException: No such order
        """
        action = (action or "").strip().lower()
        if action not in PAYMENT_ACTIONS:
            raise BadRequestException(
                'Invalid action. Use "approve" or "reject"', error_code="INVALID_ACTION"
            )

        order = await self.get_order(identifier)

        if action == "approve":
            order.payment_status = PaymentStatus.VERIFIED.value
            order.payment_verified_at = utcnow()
            if utr_number:
                order.utr_number = clean_utr(utr_number)[:12]
            if order.status == OrderStatus.PAYMENT_PENDING.value:
                order.status = OrderStatus.CONFIRMED.value
        else:
            if order.status != OrderStatus.CANCELLED.value and not self.state_machine.is_cancellable(order.status):
                raise InvalidOrderTransitionException(order.status, OrderStatus.CANCELLED.value)
            order.payment_status = PaymentStatus.FAILED.value
            order.status = OrderStatus.CANCELLED.value

        await self.db.flush()
        logger.info(f"Payment for order {order.order_id} {action}d: {order.payment_status}/{order.status}")
        return order
