"""Transactional email: template rendering and SMTP delivery"""

import aiosmtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Any, Dict, Optional
import logging
from jinja2 import Environment, select_autoescape

from tvmerch.core.config import settings
from tvmerch.models.order import Order, OrderStatus, PaymentMethod, PaymentStatus
from tvmerch.utils.helpers import format_currency

logger = logging.getLogger(__name__)

_env = Environment(autoescape=select_autoescape(default_for_string=True))
_env.filters["inr"] = format_currency

ORDER_CONFIRMATION_TEMPLATE = _env.from_string("""
<html>
  <body style="font-family: Arial, sans-serif; color: #333; max-width: 600px; margin: 0 auto;">
    <div style="background: #2563eb; color: white; padding: 24px; text-align: center;">
      <h1>Order Confirmed!</h1>
      <p>Thank you for shopping with {{ store_name }}</p>
    </div>
    <h2>Hello {{ order.user_name }},</h2>
    <p>Your order <strong>{{ order.order_id }}</strong> was placed on {{ order.created_at.strftime('%B %d, %Y') }}.</p>
    <table style="width: 100%; border-collapse: collapse;">
      {% for item in order.items %}
      <tr>
        <td>{{ item.name }} ({{ item.size }}) x {{ item.quantity }}</td>
        <td style="text-align: right;">{{ (item.price * item.quantity) | inr }}</td>
      </tr>
      {% endfor %}
    </table>
    <p>Subtotal: {{ order.subtotal_amount | inr }}</p>
    <p>Delivery: {% if order.delivery_charge == 0 %}FREE{% else %}{{ order.delivery_charge | inr }}{% endif %}</p>
    {% if order.handling_charge %}<p>Handling: {{ order.handling_charge | inr }}</p>{% endif %}
    {% if order.discount %}<p>Payment discount: -{{ order.discount | inr }}</p>{% endif %}
    {% if order.coupon_code %}<p>Coupon {{ order.coupon_code }}: -{{ order.coupon_discount | inr }}</p>{% endif %}
    <p style="font-size: 18px; font-weight: bold;">Total: {{ order.total_amount | inr }}</p>
    <p>Payment: {{ order.payment_method }}{% if order.utr_number %} (UTR {{ order.utr_number }}){% endif %}</p>
    {% if order.payment_method == 'UPI' %}
    <p>We will verify your payment and confirm the order shortly.</p>
    {% endif %}
    <h3>Shipping to</h3>
    <p>
      {{ order.shipping_address.get('full_name', '') }}<br>
      {{ order.shipping_address.get('address', '') }}<br>
      {{ order.shipping_address.get('city', '') }} {{ order.shipping_address.get('state', '') }} {{ order.shipping_address.get('pincode', '') }}
    </p>
    <p><a href="{{ track_url }}">Track your order</a></p>
  </body>
</html>
""")

STATUS_UPDATE_TEMPLATE = _env.from_string("""
<html>
  <body style="font-family: Arial, sans-serif; color: #333; max-width: 600px; margin: 0 auto;">
    <h2>Hello {{ order.user_name }},</h2>
    <p>{{ headline }}</p>
    <p>Order: <strong>{{ order.order_id }}</strong></p>
    {% if order.tracking_number %}
    <p>Tracking number: {{ order.tracking_number }}{% if order.carrier %} ({{ order.carrier }}){% endif %}</p>
    {% endif %}
    <p>Order total: {{ order.total_amount | inr }}</p>
    <p><a href="{{ track_url }}">View order</a></p>
  </body>
</html>
""")

STATUS_SUBJECTS = {
    OrderStatus.PROCESSING.value: ("Order Processing", "Your order is being prepared."),
    OrderStatus.SHIPPED.value: ("Order Shipped", "Your order is on its way!"),
    OrderStatus.DELIVERED.value: ("Order Delivered", "Your order has been delivered. Enjoy!"),
    OrderStatus.CANCELLED.value: ("Order Cancelled", "Your order has been cancelled."),
}

PAYMENT_SUBJECTS = {
    PaymentStatus.VERIFIED.value: ("Payment Verified", "We have verified your payment and confirmed your order."),
    PaymentStatus.FAILED.value: ("Payment Rejected", "We could not verify your payment, so the order was cancelled."),
}

class EmailService:
    """Email service using SMTP"""

    def __init__(self):
        self.smtp_host = settings.SMTP_HOST
        self.smtp_port = settings.SMTP_PORT
        self.smtp_user = settings.SMTP_USER
        self.smtp_password = settings.SMTP_PASSWORD
        self.from_email = settings.SMTP_FROM_EMAIL or settings.SMTP_USER
        self.from_name = settings.SMTP_FROM_NAME

    @property
    def is_configured(self) -> bool:
        return bool(self.smtp_user and self.smtp_password)

    def _smtp_client(self) -> aiosmtplib.SMTP:
        implicit_tls = self.smtp_port == 465
        return aiosmtplib.SMTP(
            hostname=self.smtp_host,
            port=self.smtp_port,
            use_tls=implicit_tls,
            start_tls=not implicit_tls,
        )

    async def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None
    ) -> bool:
        """
        Send email asynchronously

        Args:
            to_email: Recipient email
            subject: Email subject
            html_content: HTML content
            text_content: Plain text content

        Returns:
            True if sent successfully
        """
        if not self.is_configured:
            logger.warning(f"Email not configured, skipping '{subject}' to {to_email}")
            return False

        msg = MIMEMultipart('alternative')
        msg['Subject'] = subject
        msg['From'] = f"{self.from_name} <{self.from_email}>"
        msg['To'] = to_email

        if text_content:
            msg.attach(MIMEText(text_content, 'plain', 'utf-8'))
        msg.attach(MIMEText(html_content, 'html', 'utf-8'))

        try:
            async with self._smtp_client() as smtp:
                await smtp.login(self.smtp_user, self.smtp_password)
                await smtp.send_message(msg)
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to_email}: {str(e)}")
            return False

        logger.info(f"Email sent to {to_email}: {subject}")
        return True

    async def verify_connection(self) -> Dict[str, Any]:
        """Check that the SMTP server accepts our credentials"""
        if not self.is_configured:
            return {"success": False, "message": "Email service not configured"}

        try:
            async with self._smtp_client() as smtp:
                await smtp.login(self.smtp_user, self.smtp_password)
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error(f"Email config error: {str(e)}")
            return {"success": False, "message": "Email configuration error"}

        return {"success": True, "message": "Email server is ready"}

    def _track_url(self, order: Order) -> str:
        return f"{settings.FRONTEND_URL}/track-order?orderId={order.order_id}&email={order.user_email}"

    async def send_order_confirmation(self, order: Order) -> bool:
        """Send order confirmation email"""
        html_content = ORDER_CONFIRMATION_TEMPLATE.render(
            order=order,
            store_name=settings.SMTP_FROM_NAME,
            track_url=self._track_url(order),
        )
        text_content = (
            f"Your order {order.order_id} has been placed.\n"
            f"Total: {format_currency(order.total_amount)}\n"
        )
        return await self.send_email(
            to_email=order.user_email,
            subject=f"Order Confirmed - {order.order_id}",
            html_content=html_content,
            text_content=text_content,
        )

    async def send_payment_status(self, order: Order, payment_status: str) -> bool:
        """Send payment verified/rejected email"""
        if payment_status not in PAYMENT_SUBJECTS:
            logger.warning(f"No payment email for status {payment_status}")
            return False

        title, headline = PAYMENT_SUBJECTS[payment_status]
        if order.payment_method == PaymentMethod.COD.value and payment_status == PaymentStatus.VERIFIED.value:
            title, headline = "COD Collected", "We have received your cash on delivery payment."

        html_content = STATUS_UPDATE_TEMPLATE.render(
            order=order, headline=headline, track_url=self._track_url(order)
        )
        return await self.send_email(
            to_email=order.user_email,
            subject=f"{title} - {order.order_id}",
            html_content=html_content,
        )

    async def send_order_status_update(self, order: Order, new_status: str) -> bool:
        """Send order status change email"""
        if new_status not in STATUS_SUBJECTS:
            logger.warning(f"No status email for status {new_status}")
            return False

        title, headline = STATUS_SUBJECTS[new_status]
        html_content = STATUS_UPDATE_TEMPLATE.render(
            order=order, headline=headline, track_url=self._track_url(order)
        )
        return await self.send_email(
            to_email=order.user_email,
            subject=f"{title} - {order.order_id}",
            html_content=html_content,
        )

    async def send_test_email(self, to_email: str) -> bool:
        html_content = _env.from_string(
            "<p>This is a test email from {{ store_name }}. Your email settings work.</p>"
        ).render(store_name=settings.SMTP_FROM_NAME)
        return await self.send_email(
            to_email=to_email,
            subject=f"{settings.SMTP_FROM_NAME} test email",
            html_content=html_content,
        )

email_service = EmailService()

def get_email_service() -> EmailService:
    """Dependency returning the shared email service"""
    return email_service
