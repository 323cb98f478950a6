"""Tests for formatting and id helpers"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
import re

import pytest

from tvmerch.utils.helpers import (
    format_amount,
    format_currency,
    generate_order_id,
    generate_sku,
    percentage,
    round_to_unit,
    to_naive_utc,
)


@pytest.mark.parametrize(
    "amount, expected",
    [
        (Decimal("500.00"), "500"),
        (Decimal("499.50"), "499.5"),
        (Decimal("0.25"), "0.25"),
        (1200, "1200"),
    ],
)
def test_format_amount(amount, expected):
    assert format_amount(amount) == expected


@pytest.mark.parametrize(
    "amount, expected",
    [
        (Decimal("0"), "₹0.00"),
        (Decimal("999.5"), "₹999.50"),
        (Decimal("1234567.891"), "₹12,34,567.89"),
        (100000, "₹1,00,000.00"),
    ],
)
def test_format_currency_uses_indian_grouping(amount, expected):
    assert format_currency(amount) == expected


def test_format_currency_other_code():
    assert format_currency(Decimal("12.5"), currency="USD") == "USD 12.50"


def test_round_to_unit_halves_round_up():
    assert round_to_unit(Decimal("100.5")) == Decimal("101")
    assert round_to_unit(Decimal("100.49")) == Decimal("100")
    assert round_to_unit(2.5) == Decimal("3")


def test_generate_order_id_format():
    order_id = generate_order_id(datetime(2025, 3, 7, 12, 0))
    assert re.fullmatch(r"ORD20250307\d{4}", order_id)


def test_generate_sku_format():
    sku = generate_sku("t-shirts", datetime(2025, 3, 7, 12, 0))
    assert re.fullmatch(r"T-S-\d{6}-\d{4}", sku)


def test_percentage():
    assert percentage(1, 3) == 33.3
    assert percentage(5, 0) == 0.0
    assert percentage(2, 4, places=0) == 50.0


def test_to_naive_utc():
    aware = datetime(2025, 1, 1, 5, 30, tzinfo=timezone(timedelta(hours=5, minutes=30)))
    assert to_naive_utc(aware) == datetime(2025, 1, 1, 0, 0)
    naive = datetime(2025, 1, 1, 10, 0)
    assert to_naive_utc(naive) is naive
    assert to_naive_utc(None) is None
