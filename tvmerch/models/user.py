"""
User model
Customers are created on first order, keyed by email
"""

from sqlalchemy import Column, String, Boolean, DateTime
import enum

from .base import Base, TimestampedModel, UUIDModel, SerializableModel

class UserRole(str, enum.Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"

class User(Base, TimestampedModel, UUIDModel, SerializableModel):
    """Store customer"""

    __tablename__ = "users"

    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    phone = Column(String(20), nullable=True)
    role = Column(String(20), nullable=False, default=UserRole.CUSTOMER.value)

    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime, nullable=True)
