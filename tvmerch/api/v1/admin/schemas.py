"""Admin panel schemas"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime
import uuid

from tvmerch.api.v1.orders.schemas import OrderResponse
from tvmerch.schemas.base import BaseSchema, Money

class AdminLoginRequest(BaseModel):
    email: str
    password: str

class AdminLoginResponse(BaseModel):
    success: bool = True
    message: str = "Admin login successful"
    token: str

class AdminStats(BaseModel):
    total_orders: int
    pending_orders: int
    completed_orders: int
    total_users: int
    total_products: int
    low_stock_products: int

class RecentOrder(BaseModel):
    id: uuid.UUID
    order_id: str
    customer: str
    amount: Money
    status: str
    date: datetime

class DailySales(BaseModel):
    date: date
    sales: Money
    orders: int

class DashboardResponse(BaseModel):
    success: bool = True
    stats: AdminStats
    recent_orders: List[RecentOrder]
    sales_data: List[DailySales]

class AdminOrderListResponse(BaseModel):
    success: bool = True
    orders: List[OrderResponse]
    total_orders: int
    total_pages: int
    current_page: int

class OrderStatusUpdate(BaseModel):
    status: str
    tracking_number: Optional[str] = Field(None, max_length=100)
    tracking_url: Optional[str] = Field(None, max_length=500)
    carrier: Optional[str] = Field(None, max_length=100)
    admin_notes: Optional[str] = None

class PaymentVerificationRequest(BaseModel):
    action: str
    utr_number: Optional[str] = None

class AdminUser(BaseSchema):
    id: uuid.UUID
    name: str
    email: str
    phone: Optional[str] = None
    role: str
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime

class AdminUserListResponse(BaseModel):
    success: bool = True
    users: List[AdminUser]
    total_users: int
    total_pages: int
    current_page: int

class EmailSettings(BaseModel):
    email_host: str
    email_user: str
    email_from: str

class EmailConfigResponse(BaseModel):
    success: bool = True
    configured: bool
    config: EmailSettings
    connection: Optional[str] = None

class TestEmailRequest(BaseModel):
    email: Optional[str] = None
