"""
Admin dashboard and customer listing
"""

from typing import Any, Dict
from collections import defaultdict
from datetime import timedelta
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from tvmerch.core.config import settings
from tvmerch.models.order import Order, OrderStatus
from tvmerch.models.product import Product
from tvmerch.models.user import User
from tvmerch.utils.helpers import utcnow
from tvmerch.utils.pagination import Page, PaginationParams, paginate

RECENT_ORDERS = 10
SALES_WINDOW_DAYS = 7

class AdminService:
    """Read-side queries for the admin panel"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _count(self, model, *criteria) -> int:
        query = select(func.count()).select_from(model)
        if criteria:
            query = query.where(*criteria)
        return await self.db.scalar(query) or 0

    async def dashboard(self) -> Dict[str, Any]:
        """
        Headline counts, latest orders and delivered sales per day

        Returns:
            Dict with stats, recent_orders and sales_data
        """
        stats = {
            "total_orders": await self._count(Order),
            "pending_orders": await self._count(Order, Order.status == OrderStatus.PAYMENT_PENDING.value),
            "completed_orders": await self._count(Order, Order.status == OrderStatus.DELIVERED.value),
            "total_users": await self._count(User),
            "total_products": await self._count(Product),
            "low_stock_products": await self._count(Product, Product.quantity < settings.LOW_STOCK_THRESHOLD),
        }

        result = await self.db.execute(
            select(Order).order_by(Order.created_at.desc()).limit(RECENT_ORDERS)
        )
        recent_orders = [
            {
                "id": order.id,
                "order_id": order.order_id,
                "customer": order.user_name or "Unknown",
                "amount": order.total_amount,
                "status": order.status,
                "date": order.created_at,
            }
            for order in result.scalars().all()
        ]

        since = utcnow() - timedelta(days=SALES_WINDOW_DAYS)
        result = await self.db.execute(
            select(Order.created_at, Order.total_amount).where(
                Order.created_at >= since,
                Order.status == OrderStatus.DELIVERED.value,
            )
        )
        sales = defaultdict(lambda: {"sales": Decimal("0"), "orders": 0})
        for created_at, total in result.all():
            day = sales[created_at.date()]
            day["sales"] += total
            day["orders"] += 1

        sales_data = [
            {"date": day, **values} for day, values in sorted(sales.items())
        ]

        return {"stats": stats, "recent_orders": recent_orders, "sales_data": sales_data}

    async def list_users(self, params: PaginationParams) -> Page:
        query = select(User).order_by(User.created_at.desc())
        return await paginate(self.db, query, params)
