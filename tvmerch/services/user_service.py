"""
User service for customer lookup
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging

from tvmerch.models.user import User, UserRole

logger = logging.getLogger(__name__)

def normalize_email(email: str) -> str:
    return (email or "").strip().lower()

class UserService:
    """Customer accounts are keyed by email and created on first order"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def get_or_create(self, email: str, name: Optional[str] = None) -> User:
        """
        Find a customer by email, creating one if needed

        Args:
            email: Customer email, any case
            name: Display name; defaults to the email's local part

        Returns:
            Persisted user (flushed, not committed)
        """
        email = normalize_email(email)
        user = await self.get_by_email(email)
        if user:
            return user

        user = User(
            email=email,
            name=(name or "").strip() or email.split("@")[0],
            role=UserRole.CUSTOMER.value,
        )
        self.db.add(user)
        await self.db.flush()
        logger.info(f"Created customer account for {email}")
        return user
