"""
Product service layer
Handles catalog queries and admin product management
"""

from typing import List, Optional, Tuple
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_, String, cast
import logging
import uuid

from tvmerch.models.product import Product
from tvmerch.core.exceptions import DuplicateResourceException, NotFoundException
from tvmerch.utils.helpers import generate_sku, percentage, round_to_unit, to_decimal
from tvmerch.utils.pagination import Page, PaginationParams, paginate
from .schemas import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)

# Size of the featured / best-seller shelves
SHELF_SIZE = 8
SEARCH_LIMIT = 20

def derive_pricing(
    price: Decimal,
    mrp: Optional[Decimal],
    discount: Optional[int]
) -> Tuple[Decimal, int]:
    """
    Fill in whichever of mrp and discount percent is missing

    A missing mrp is reconstructed from price and discount; a missing
    discount is derived from how far price sits below mrp.
    """
    price = to_decimal(price)
    if mrp is None:
        mrp = round_to_unit(price / (1 - Decimal(discount) / 100)) if discount else price
    mrp = to_decimal(mrp)

    if discount is None:
        discount = int(percentage(mrp - price, mrp, places=0)) if mrp > price else 0
    return mrp, discount

class ProductService:
    """Product service for business logic"""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _active(self):
        return select(Product).where(Product.is_active.is_(True))

    async def _sku_taken(self, sku: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
        query = select(Product.id).where(Product.sku == sku)
        if exclude_id is not None:
            query = query.where(Product.id != exclude_id)
        return await self.db.scalar(query) is not None

    async def list_products(
        self,
        category: Optional[str] = None,
        featured: Optional[bool] = None,
        params: Optional[PaginationParams] = None
    ) -> Page:
        """
        Catalog page, newest first

        Args:
            category: Category filter; "all" means no filter
            featured: Only featured products when True
            params: Page number and size

        Returns:
            One page of active products
        """
        query = self._active().order_by(Product.created_at.desc())
        if category and category != "all":
            query = query.where(Product.category == category)
        if featured:
            query = query.where(Product.featured.is_(True))
        return await paginate(self.db, query, params or PaginationParams())

    async def search(self, q: str) -> List[Product]:
        """Case-insensitive match on name, description, category, show and tags"""
        term = f"%{q.strip()}%"
        result = await self.db.execute(
            self._active()
            .where(
                or_(
                    Product.name.ilike(term),
                    Product.description.ilike(term),
                    Product.category.ilike(term),
                    Product.show_name.ilike(term),
                    cast(Product.tags, String).ilike(term),
                )
            )
            .order_by(Product.sales_count.desc())
            .limit(SEARCH_LIMIT)
        )
        return list(result.scalars().all())

    async def featured(self) -> List[Product]:
        result = await self.db.execute(
            self._active()
            .where(Product.featured.is_(True))
            .order_by(Product.created_at.desc())
            .limit(SHELF_SIZE)
        )
        return list(result.scalars().all())

    async def best_sellers(self) -> List[Product]:
        result = await self.db.execute(
            self._active()
            .where(or_(Product.is_best_seller.is_(True), Product.sales_count > 0))
            .order_by(Product.is_best_seller.desc(), Product.sales_count.desc())
            .limit(SHELF_SIZE)
        )
        return list(result.scalars().all())

    async def categories(self) -> List[str]:
        result = await self.db.execute(
            select(Product.category)
            .where(Product.is_active.is_(True))
            .distinct()
            .order_by(Product.category)
        )
        return list(result.scalars().all())

    async def by_category(self, category: str) -> List[Product]:
        result = await self.db.execute(
            self._active()
            .where(func.lower(Product.category) == category.strip().lower())
            .order_by(Product.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_product(self, product_id: uuid.UUID) -> Product:
        product = await self.db.get(Product, product_id)
        if not product:
            raise NotFoundException("Product not found")
        return product

    async def create_product(self, data: ProductCreate) -> Product:
        """
        Create new product

        Raises:
            DuplicateResourceException: SKU already in use
        """
        if data.sku and await self._sku_taken(data.sku):
            raise DuplicateResourceException("SKU already exists. Please use a different SKU.")

        mrp, discount = derive_pricing(data.price, data.mrp, data.discount)
        category = data.category.value

        product = Product(
            **data.model_dump(exclude={"mrp", "discount", "sku", "category", "sizes"}),
            category=category,
            mrp=mrp,
            discount=discount,
            sizes=data.sizes or ["One Size"],
            sku=data.sku or generate_sku(category),
        )
        self.db.add(product)
        await self.db.flush()

        logger.info(f"Product {product.sku} created: {product.name}")
        return product

    async def update_product(self, product_id: uuid.UUID, data: ProductUpdate) -> Product:
        """
        Apply a partial update, keeping mrp and discount consistent

        Raises:
            NotFoundException: Unknown product
            DuplicateResourceException: SKU belongs to another product
        """
        product = await self.get_product(product_id)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("sku") and await self._sku_taken(changes["sku"], exclude_id=product.id):
            raise DuplicateResourceException("SKU already exists. Please use a different SKU.")

        if changes.get("category") is not None:
            changes["category"] = changes["category"].value

        price = changes.get("price") or product.price
        if "mrp" not in changes and ("price" in changes or "discount" in changes):
            changes["mrp"], _ = derive_pricing(price, None, changes.get("discount", product.discount))
        elif "discount" not in changes and ("price" in changes or "mrp" in changes):
            _, changes["discount"] = derive_pricing(price, changes["mrp"] or product.mrp, None)

        changed = product.apply_changes(
            {k: v for k, v in changes.items() if v is not None or k == "sku"},
            protected=("id", "sales_count"),
        )
        await self.db.flush()

        logger.info(f"Product {product.id} updated: {sorted(changed)}")
        return product

    async def delete_product(self, product_id: uuid.UUID) -> None:
        product = await self.get_product(product_id)
        await self.db.delete(product)
        await self.db.flush()
        logger.info(f"Product {product.id} deleted")
