"""Shared fixtures: in-memory database, API client and coupon factory"""

import os

os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from datetime import timedelta
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient

import tvmerch.models  # noqa: F401
from tvmerch.core.database import build_engine, build_session_factory, create_tables, get_db
from tvmerch.main import app
from tvmerch.models.coupon import Coupon
from tvmerch.services.email_service import get_email_service
from tvmerch.utils.helpers import utcnow

ADMIN_TOKEN = "admin-token-1700000000000"


class StubEmailService:
    """Records outgoing mail instead of talking to SMTP"""

    is_configured = True

    def __init__(self):
        self.sent = []

    async def send_order_confirmation(self, order):
        self.sent.append(("confirmation", order.order_id))
        return True

    async def send_order_status_update(self, order, new_status):
        self.sent.append(("status", order.order_id, new_status))
        return True

    async def send_payment_status(self, order, payment_status):
        self.sent.append(("payment", order.order_id, payment_status))
        return True

    async def send_test_email(self, to_email):
        self.sent.append(("test", to_email))
        return True

    async def verify_connection(self):
        return {"success": True, "message": "Email server is ready"}


@pytest.fixture
async def engine():
    engine = build_engine("sqlite+aiosqlite://")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def email_stub():
    return StubEmailService()


@pytest.fixture
async def client(session_factory, email_stub):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_service] = lambda: email_stub

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def make_coupon(db_session):
    """Persist a coupon that is live right now unless told otherwise"""

    async def _make(**overrides) -> Coupon:
        now = utcnow()
        fields = dict(
            code="SAVE10",
            name="Save 10%",
            discount_type="percentage",
            discount_value=Decimal("10"),
            min_order_amount=Decimal("500"),
            max_discount=Decimal("100"),
            start_date=now - timedelta(days=1),
            end_date=now + timedelta(days=30),
            total_quantity=50,
            used_count=0,
            per_user_limit=1,
            user_usage={},
            is_active=True,
        )
        fields.update(overrides)
        coupon = Coupon(**fields)
        db_session.add(coupon)
        await db_session.commit()
        return coupon

    return _make
