"""
Offset pagination for listing endpoints
"""

from dataclasses import dataclass
from typing import Any, Sequence

from pydantic import BaseModel, Field
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select


class PaginationParams(BaseModel):
    """Page number and page size taken from the query string"""
    page: int = Field(1, ge=1)
    size: int = Field(20, ge=1, le=100)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size


@dataclass
class Page:
    items: Sequence[Any]
    total: int
    page: int
    size: int

    @property
    def pages(self) -> int:
        return (self.total + self.size - 1) // self.size


async def paginate(db: AsyncSession, query: Select, params: PaginationParams) -> Page:
    """
    Run ``query`` for one page of ORM rows

    The total is counted over the same filters with ordering stripped.
    """
    total = await db.scalar(
        select(func.count()).select_from(query.order_by(None).subquery())
    ) or 0
    result = await db.execute(query.offset(params.offset).limit(params.size))
    return Page(
        items=result.scalars().all(),
        total=total,
        page=params.page,
        size=params.size,
    )
