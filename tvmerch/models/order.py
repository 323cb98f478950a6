"""Order model"""

from sqlalchemy import Column, String, Numeric, ForeignKey, Text, DateTime, JSON, Uuid
import enum

from .base import Base, TimestampedModel, UUIDModel, SerializableModel

class OrderStatus(str, enum.Enum):
    PAYMENT_PENDING = "payment_pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    FAILED = "failed"
    TO_COLLECT = "to_collect"

class PaymentMethod(str, enum.Enum):
    UPI = "UPI"
    COD = "COD"

class Order(Base, TimestampedModel, UUIDModel, SerializableModel):
    """Customer order with a snapshot of any coupon applied at checkout"""

    __tablename__ = "orders"

    # Order identification
    order_id = Column(String(32), unique=True, nullable=False, index=True)

    # Customer
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=True, index=True)
    user_email = Column(String(255), nullable=False, index=True)
    user_name = Column(String(100), nullable=False)

    # Contents
    items = Column(JSON, nullable=False, default=list)
    shipping_address = Column(JSON, nullable=False, default=dict)

    # Amounts
    subtotal_amount = Column(Numeric(10, 2), nullable=False, default=0)
    delivery_charge = Column(Numeric(10, 2), nullable=False, default=0)
    handling_charge = Column(Numeric(10, 2), nullable=False, default=0)
    discount = Column(Numeric(10, 2), nullable=False, default=0)
    total_amount = Column(Numeric(10, 2), nullable=False)

    # Coupon snapshot, not re-validated after creation
    coupon_code = Column(String(50), nullable=False, default="")
    coupon_discount = Column(Numeric(10, 2), nullable=False, default=0)
    coupon_details = Column(JSON, nullable=True)

    # Payment
    payment_method = Column(String(10), nullable=False, default=PaymentMethod.UPI.value)
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value)
    utr_number = Column(String(12), nullable=False, default="")

    # Status
    status = Column(String(30), nullable=False, default=OrderStatus.PAYMENT_PENDING.value, index=True)

    # Tracking
    tracking_number = Column(String(100), nullable=False, default="")
    tracking_url = Column(String(500), nullable=True)
    carrier = Column(String(100), nullable=True)

    admin_notes = Column(Text, nullable=False, default="")

    # Timestamps
    expected_delivery = Column(DateTime, nullable=True)
    payment_verified_at = Column(DateTime, nullable=True)
    shipped_at = Column(DateTime, nullable=True)
    delivered_at = Column(DateTime, nullable=True)
