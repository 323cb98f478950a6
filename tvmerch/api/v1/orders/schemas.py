"""
Order schemas for request/response validation
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime
import uuid

from tvmerch.schemas.base import BaseSchema, Money, OptionalMoney

class OrderItemIn(BaseModel):
    """Line item as sent by the storefront cart"""
    product_id: Optional[str] = None
    name: str = "Product"
    quantity: int = Field(1, ge=1)
    size: str = "One Size"
    price: Money = Field(0, ge=0)
    image: str = ""

class ShippingAddress(BaseModel):
    """Delivery address; blanks are filled from the customer details"""
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: str = ""
    address: Optional[str] = None
    house_flat: str = ""
    street: str = ""
    city: str = ""
    state: str = ""
    pincode: str = ""
    country: str = "India"

class OrderCreate(BaseModel):
    """
    Schema for creating order

    Charges left out are computed from the subtotal and payment method.
    """
    user_email: Optional[str] = None
    user_name: Optional[str] = None
    items: Optional[List[OrderItemIn]] = None
    shipping_address: Optional[ShippingAddress] = None

    subtotal_amount: OptionalMoney = Field(None, ge=0)
    delivery_charge: OptionalMoney = Field(None, ge=0)
    handling_charge: OptionalMoney = Field(None, ge=0)
    discount: OptionalMoney = Field(None, ge=0)
    total_amount: OptionalMoney = Field(None, ge=0)

    coupon_code: Optional[str] = Field(None, max_length=50)

    payment_method: str = "UPI"
    utr_number: Optional[str] = ""

class OrderResponse(BaseSchema):
    """Schema for order response"""
    id: uuid.UUID
    order_id: str
    user_id: Optional[uuid.UUID] = None
    user_email: str
    user_name: str

    items: List[Dict[str, Any]]
    shipping_address: Dict[str, Any]

    # Amounts
    subtotal_amount: Money
    delivery_charge: Money
    handling_charge: Money
    discount: Money
    coupon_code: str
    coupon_discount: Money
    coupon_details: Optional[Dict[str, Any]] = None
    total_amount: Money

    # Payment
    payment_method: str
    payment_status: str
    utr_number: str

    # Status and shipping
    status: str
    tracking_number: str
    tracking_url: Optional[str] = None
    carrier: Optional[str] = None
    admin_notes: str
    expected_delivery: Optional[datetime] = None
    payment_verified_at: Optional[datetime] = None
    shipped_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None

    created_at: datetime
    updated_at: datetime

class OrderEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    order: OrderResponse

class OrderListResponse(BaseModel):
    success: bool = True
    orders: List[OrderResponse]
    count: int

class OrderHealthResponse(BaseModel):
    success: bool = True
    message: str
    timestamp: datetime
