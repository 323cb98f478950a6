"""
Helper utilities
"""

import random
import string
from decimal import Decimal, ROUND_HALF_UP
from datetime import datetime, timezone
from typing import Optional, Union

Number = Union[Decimal, int, float, str]

def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the form stored in the database"""
    return datetime.now(timezone.utc).replace(tzinfo=None)

def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize an aware datetime to naive UTC; naive values are assumed UTC"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)

def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps floats like 0.1 from dragging binary noise along
    return Decimal(str(value))

def round_to_unit(amount: Number) -> Decimal:
    """
    Round to the nearest whole currency unit, halves rounding up

    Args:
        amount: Amount to round

    Returns:
        Whole-unit Decimal
    """
    return to_decimal(amount).quantize(Decimal("1"), rounding=ROUND_HALF_UP)

def format_amount(amount: Number) -> str:
    """
    Render an amount without a trailing zero fraction

    500.00 -> "500", 499.50 -> "499.5"
    """
    value = to_decimal(amount)
    whole = value.quantize(Decimal("1"))
    if whole == value:
        return str(whole)
    return f"{value:f}".rstrip("0")

def format_currency(
    amount: Number,
    currency: str = "INR"
) -> str:
    """
    Format amount as currency

    Args:
        amount: Amount to format
        currency: Currency code

    Returns:
        Formatted currency string
    """
    value = to_decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    if currency == "INR":
        integer_part, decimal_part = f"{value:f}".split(".")
        sign = ""
        if integer_part.startswith("-"):
            sign, integer_part = "-", integer_part[1:]

        # Indian grouping: last 3 digits, then groups of 2
        if len(integer_part) > 3:
            result = integer_part[-3:]
            integer_part = integer_part[:-3]

            while integer_part:
                result = integer_part[-2:] + "," + result
                integer_part = integer_part[:-2]

            return f"{sign}₹{result}.{decimal_part}"
        return f"{sign}₹{integer_part}.{decimal_part}"

    # Default formatting for other currencies
    return f"{currency} {value:.2f}"

def generate_order_id(now: Optional[datetime] = None) -> str:
    """Public order id: ORD + YYYYMMDD + 4 random digits"""
    now = now or utcnow()
    suffix = "".join(random.choices(string.digits, k=4))
    return f"ORD{now:%Y%m%d}{suffix}"

def percentage(part: Number, whole: Number, places: int = 1) -> float:
    """part/whole as a percentage rounded to the given number of places"""
    whole = to_decimal(whole)
    if whole == 0:
        return 0.0
    value = to_decimal(part) * 100 / whole
    return float(value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP))

def generate_sku(category: str, now: Optional[datetime] = None) -> str:
    """Stock keeping unit: category prefix, millisecond tail and 4 random digits"""
    now = now or utcnow()
    prefix = (category or "GEN")[:3].upper()
    millis = str(int(now.replace(tzinfo=timezone.utc).timestamp() * 1000))[-6:]
    return f"{prefix}-{millis}-{random.randint(1000, 9999)}"
