"""Tests for the coupon HTTP endpoints"""

from datetime import timedelta
import uuid

from tvmerch.utils.helpers import utcnow


def coupon_payload(**overrides):
    now = utcnow()
    payload = {
        "code": "welcome5",
        "name": "Welcome offer",
        "description": "5% off your first order",
        "discount_type": "percentage",
        "discount_value": 5,
        "min_order_amount": 300,
        "max_discount": 50,
        "start_date": (now - timedelta(days=1)).isoformat(),
        "end_date": (now + timedelta(days=30)).isoformat(),
        "total_quantity": 100,
        "per_user_limit": 2,
    }
    payload.update(overrides)
    return payload


class TestValidateEndpoint:

    async def test_valid_coupon_preview(self, client, make_coupon):
        await make_coupon()
        response = await client.post(
            "/api/v1/coupons/validate", json={"code": "save10", "order_amount": 1200}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["valid"] is True
        assert "message" not in body
        assert body["coupon"]["code"] == "SAVE10"
        assert body["coupon"]["discount"] == 100

    async def test_business_rejection_is_200(self, client, make_coupon):
        await make_coupon()
        response = await client.post(
            "/api/v1/coupons/validate", json={"code": "SAVE10", "order_amount": 400}
        )

        assert response.status_code == 200
        assert response.json() == {
            "valid": False,
            "message": "Minimum order amount ₹500 required",
        }

    async def test_per_user_limit_uses_user_id(self, client, make_coupon):
        await make_coupon(user_usage={"user-1": 1})
        response = await client.post(
            "/api/v1/coupons/validate",
            json={"code": "SAVE10", "order_amount": 1200, "user_id": "user-1"},
        )
        assert response.json()["message"] == "You have already used this coupon 1 time(s). Maximum 1 per user."

    async def test_code_and_amount_required(self, client):
        missing_code = await client.post("/api/v1/coupons/validate", json={"order_amount": 100})
        zero_amount = await client.post("/api/v1/coupons/validate", json={"code": "X", "order_amount": 0})

        for response in (missing_code, zero_amount):
            assert response.status_code == 400
            assert response.json()["success"] is False
            assert response.json()["message"] == "Coupon code and order amount are required"

    async def test_validate_is_public(self, client):
        response = await client.post(
            "/api/v1/coupons/validate", json={"code": "NOPE", "order_amount": 100}
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Invalid coupon code"


class TestCouponAdmin:

    async def test_admin_routes_require_token(self, client):
        missing = await client.get("/api/v1/coupons/")
        wrong = await client.get("/api/v1/coupons/", headers={"Authorization": "Bearer nope"})

        assert missing.status_code == 401
        assert missing.json()["message"] == "No admin token provided"
        assert wrong.status_code == 401
        assert wrong.json()["message"] == "Invalid admin token"

    async def test_create_stores_uppercase_code(self, client, admin_headers):
        response = await client.post("/api/v1/coupons/", json=coupon_payload(), headers=admin_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Coupon created successfully"
        assert body["coupon"]["code"] == "WELCOME5"
        assert body["coupon"]["used_count"] == 0
        assert body["coupon"]["user_usage"] == {}
        assert body["coupon"]["state"] == "active"
        assert body["coupon"]["applicable_categories"] == ["All"]

    async def test_fixed_coupon_drops_max_discount(self, client, admin_headers):
        response = await client.post(
            "/api/v1/coupons/",
            json=coupon_payload(discount_type="fixed", discount_value=40, max_discount=10),
            headers=admin_headers,
        )
        assert response.status_code == 201
        assert response.json()["coupon"]["max_discount"] is None

    async def test_duplicate_code_conflict(self, client, admin_headers):
        await client.post("/api/v1/coupons/", json=coupon_payload(), headers=admin_headers)
        response = await client.post(
            "/api/v1/coupons/", json=coupon_payload(code="WELCOME5"), headers=admin_headers
        )

        assert response.status_code == 409
        assert response.json()["message"] == "Coupon code already exists"

    async def test_bad_date_window(self, client, admin_headers):
        now = utcnow()
        response = await client.post(
            "/api/v1/coupons/",
            json=coupon_payload(
                start_date=now.isoformat(), end_date=(now - timedelta(days=1)).isoformat()
            ),
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["message"] == "End date must be after start date"

    async def test_list_get_update(self, client, admin_headers):
        created = await client.post("/api/v1/coupons/", json=coupon_payload(), headers=admin_headers)
        coupon_id = created.json()["coupon"]["id"]

        listing = await client.get("/api/v1/coupons/", headers=admin_headers)
        assert listing.json()["count"] == 1

        fetched = await client.get(f"/api/v1/coupons/{coupon_id}", headers=admin_headers)
        assert fetched.json()["coupon"]["name"] == "Welcome offer"

        updated = await client.put(
            f"/api/v1/coupons/{coupon_id}",
            json={"name": "Welcome back", "is_active": False},
            headers=admin_headers,
        )
        assert updated.status_code == 200
        assert updated.json()["message"] == "Coupon updated successfully"
        assert updated.json()["coupon"]["name"] == "Welcome back"
        assert updated.json()["coupon"]["state"] == "disabled"
        assert updated.json()["coupon"]["code"] == "WELCOME5"

    async def test_update_to_taken_code_conflicts(self, client, admin_headers):
        await client.post("/api/v1/coupons/", json=coupon_payload(code="FIRST"), headers=admin_headers)
        second = await client.post("/api/v1/coupons/", json=coupon_payload(code="SECOND"), headers=admin_headers)

        response = await client.put(
            f"/api/v1/coupons/{second.json()['coupon']['id']}",
            json={"code": "first"},
            headers=admin_headers,
        )
        assert response.status_code == 409

    async def test_unknown_coupon(self, client, admin_headers):
        response = await client.get(f"/api/v1/coupons/{uuid.uuid4()}", headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["message"] == "Coupon not found"

    async def test_delete_unused_coupon(self, client, admin_headers):
        created = await client.post("/api/v1/coupons/", json=coupon_payload(), headers=admin_headers)
        coupon_id = created.json()["coupon"]["id"]

        response = await client.delete(f"/api/v1/coupons/{coupon_id}", headers=admin_headers)
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Coupon deleted successfully"}

        gone = await client.get(f"/api/v1/coupons/{coupon_id}", headers=admin_headers)
        assert gone.status_code == 404

    async def test_delete_blocked_after_use(self, client, admin_headers, make_coupon):
        coupon = await make_coupon(used_count=1)
        response = await client.delete(f"/api/v1/coupons/{coupon.id}", headers=admin_headers)

        assert response.status_code == 409
        assert response.json()["message"] == "Cannot delete coupon that has been used"

    async def test_usage_stats(self, client, admin_headers, make_coupon):
        await make_coupon(code="BUSY", total_quantity=3, used_count=1)
        await make_coupon(code="IDLE", total_quantity=10, used_count=0)

        response = await client.get("/api/v1/coupons/stats/usage", headers=admin_headers)

        assert response.status_code == 200
        stats = response.json()["stats"]
        assert [s["code"] for s in stats] == ["BUSY", "IDLE"]
        assert stats[0]["used"] == 1
        assert stats[0]["total"] == 3
        assert stats[0]["usage_percentage"] == 33.3
        assert stats[1]["usage_percentage"] == 0.0
