"""Tests for email rendering and delivery guards"""

from datetime import datetime
from decimal import Decimal

import pytest

from tvmerch.models.order import Order
from tvmerch.services.email_service import EmailService


@pytest.fixture
def order():
    return Order(
        order_id="ORD202503071234",
        user_email="fan@example.com",
        user_name="Big <Fan>",
        items=[{"name": "Logo Tee", "size": "M", "quantity": 2, "price": 299.0}],
        shipping_address={"full_name": "Big Fan", "address": "12B MG Road", "city": "Bengaluru"},
        subtotal_amount=Decimal("598"),
        delivery_charge=Decimal("0"),
        handling_charge=Decimal("0"),
        discount=Decimal("10"),
        coupon_code="SAVE10",
        coupon_discount=Decimal("60"),
        total_amount=Decimal("528"),
        payment_method="UPI",
        payment_status="pending",
        utr_number="123456789012",
        status="payment_pending",
        tracking_number="",
        created_at=datetime(2025, 3, 7, 10, 0),
    )


@pytest.fixture
def outbox(monkeypatch):
    sent = []

    async def fake_send(self, to_email, subject, html_content, text_content=None):
        sent.append({"to": to_email, "subject": subject, "html": html_content, "text": text_content})
        return True

    monkeypatch.setattr(EmailService, "send_email", fake_send)
    return sent


async def test_send_skipped_when_not_configured():
    service = EmailService()
    service.smtp_user = None
    service.smtp_password = None

    assert service.is_configured is False
    assert await service.send_email("fan@example.com", "Hi", "<p>Hi</p>") is False


async def test_order_confirmation_renders_order(order, outbox):
    assert await EmailService().send_order_confirmation(order) is True

    mail = outbox[0]
    assert mail["to"] == "fan@example.com"
    assert mail["subject"] == "Order Confirmed - ORD202503071234"
    assert "Logo Tee (M) x 2" in mail["html"]
    assert "₹598.00" in mail["html"]
    assert "Coupon SAVE10: -₹60.00" in mail["html"]
    assert "FREE" in mail["html"]
    assert "Big &lt;Fan&gt;" in mail["html"]
    assert "orderId=ORD202503071234" in mail["html"]
    assert "₹528.00" in mail["text"]


async def test_cod_verification_is_worded_as_collection(order, outbox):
    order.payment_method = "COD"

    await EmailService().send_payment_status(order, "verified")

    assert outbox[0]["subject"] == "COD Collected - ORD202503071234"


async def test_payment_rejection_subject(order, outbox):
    await EmailService().send_payment_status(order, "failed")
    assert outbox[0]["subject"] == "Payment Rejected - ORD202503071234"


async def test_status_update_only_for_customer_facing_statuses(order, outbox):
    service = EmailService()

    assert await service.send_order_status_update(order, "confirmed") is False
    assert await service.send_order_status_update(order, "shipped") is True
    assert [m["subject"] for m in outbox] == ["Order Shipped - ORD202503071234"]
