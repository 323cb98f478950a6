"""Utilities package"""

from .helpers import format_amount, format_currency, generate_order_id, utcnow
from .pagination import Page, PaginationParams, paginate

__all__ = [
    "format_amount",
    "format_currency",
    "generate_order_id",
    "utcnow",
    "Page",
    "paginate",
    "PaginationParams",
]
