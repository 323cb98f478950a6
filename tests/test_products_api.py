"""Tests for the product catalog endpoints"""

from decimal import Decimal
import uuid

import pytest

from tvmerch.api.v1.products.services import derive_pricing
from tvmerch.models.product import Product


def product_payload(**overrides):
    payload = {
        "name": "Logo Tee",
        "description": "Cotton tee with the show logo",
        "category": "t-shirts",
        "show_name": "Space Cadets",
        "price": 499,
        "discount": 50,
        "sizes": ["S", "M", "L"],
        "quantity": 25,
        "tags": ["logo", "cotton"],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_product(db_session):
    async def _make(**overrides) -> Product:
        fields = dict(
            name="Mug",
            description="Ceramic mug",
            category="mugs",
            show_name="Space Cadets",
            price=Decimal("299"),
            mrp=Decimal("399"),
            discount=25,
            sizes=["One Size"],
            quantity=10,
            images=[],
            tags=[],
        )
        fields.update(overrides)
        product = Product(**fields)
        db_session.add(product)
        await db_session.commit()
        return product

    return _make


class TestDerivePricing:

    def test_mrp_from_discount(self):
        assert derive_pricing(Decimal("499"), None, 50) == (Decimal("998"), 50)

    def test_discount_from_mrp(self):
        assert derive_pricing(Decimal("300"), Decimal("400"), None) == (Decimal("400"), 25)

    def test_no_discount(self):
        assert derive_pricing(Decimal("300"), None, None) == (Decimal("300"), 0)


class TestCatalog:

    async def test_list_filters_and_paginates(self, client, make_product):
        await make_product(name="Mug A")
        await make_product(name="Mug B", featured=True)
        await make_product(name="Tee", category="t-shirts")
        await make_product(name="Hidden", is_active=False)

        everything = await client.get("/api/v1/products/")
        mugs = await client.get("/api/v1/products/", params={"category": "mugs", "limit": 1})
        featured = await client.get("/api/v1/products/", params={"featured": "true"})

        assert everything.json()["total_products"] == 3
        assert mugs.json()["total_products"] == 2
        assert mugs.json()["total_pages"] == 2
        assert len(mugs.json()["products"]) == 1
        assert [p["name"] for p in featured.json()["products"]] == ["Mug B"]

    async def test_search(self, client, make_product):
        await make_product(name="Captain Mug")
        await make_product(name="Poster", category="posters", tags=["captain"])
        await make_product(name="Cap", category="caps")

        response = await client.get("/api/v1/products/search", params={"q": "captain"})

        assert response.json()["count"] == 2
        assert {p["name"] for p in response.json()["products"]} == {"Captain Mug", "Poster"}

    async def test_shelves_and_categories(self, client, make_product):
        await make_product(name="Star", featured=True, is_best_seller=True)
        await make_product(name="Seller", category="caps", sales_count=4)
        await make_product(name="Plain", category="caps")

        featured = await client.get("/api/v1/products/featured")
        best = await client.get("/api/v1/products/best-sellers")
        categories = await client.get("/api/v1/products/categories")
        caps = await client.get("/api/v1/products/category/CAPS")

        assert [p["name"] for p in featured.json()["products"]] == ["Star"]
        assert [p["name"] for p in best.json()["products"]] == ["Star", "Seller"]
        assert categories.json()["categories"] == ["caps", "mugs"]
        assert caps.json()["count"] == 2

    async def test_get_product(self, client, make_product):
        product = await make_product()

        found = await client.get(f"/api/v1/products/{product.id}")
        missing = await client.get(f"/api/v1/products/{uuid.uuid4()}")

        assert found.json()["product"]["name"] == "Mug"
        assert found.json()["product"]["in_stock"] is True
        assert missing.status_code == 404
        assert missing.json()["message"] == "Product not found"


class TestProductAdmin:

    async def test_create_requires_admin(self, client):
        response = await client.post("/api/v1/products/", json=product_payload())
        assert response.status_code == 401

    async def test_create_generates_sku_and_mrp(self, client, admin_headers):
        response = await client.post("/api/v1/products/", json=product_payload(), headers=admin_headers)

        assert response.status_code == 201
        product = response.json()["product"]
        assert product["sku"].startswith("T-S-")
        assert product["mrp"] == 998
        assert product["discount"] == 50
        assert product["is_active"] is True

    async def test_duplicate_sku(self, client, admin_headers):
        await client.post("/api/v1/products/", json=product_payload(sku="tee-1"), headers=admin_headers)
        response = await client.post(
            "/api/v1/products/", json=product_payload(sku="TEE-1"), headers=admin_headers
        )

        assert response.status_code == 409
        assert response.json()["message"] == "SKU already exists. Please use a different SKU."

    async def test_update_recomputes_mrp(self, client, admin_headers, make_product):
        product = await make_product()

        response = await client.put(
            f"/api/v1/products/{product.id}",
            json={"price": 300, "discount": 40},
            headers=admin_headers,
        )

        assert response.status_code == 200
        updated = response.json()["product"]
        assert updated["price"] == 300
        assert updated["mrp"] == 500
        assert updated["discount"] == 40

    async def test_delete(self, client, admin_headers, make_product):
        product = await make_product()

        response = await client.delete(f"/api/v1/products/{product.id}", headers=admin_headers)
        again = await client.delete(f"/api/v1/products/{product.id}", headers=admin_headers)

        assert response.json()["message"] == "Product deleted successfully"
        assert again.status_code == 404
