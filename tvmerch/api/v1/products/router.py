"""Products API router"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import uuid

from tvmerch.core.database import get_db
from tvmerch.core.security import require_admin
from tvmerch.schemas.base import MessageResponse
from tvmerch.utils.dependencies import get_pagination_params
from tvmerch.utils.pagination import PaginationParams
from .schemas import (
    CategoryListResponse,
    ProductCollectionResponse,
    ProductCreate,
    ProductEnvelope,
    ProductPageResponse,
    ProductResponse,
    ProductUpdate,
)
from .services import ProductService

router = APIRouter()

def _collection(products) -> ProductCollectionResponse:
    return ProductCollectionResponse(
        products=[ProductResponse.model_validate(p) for p in products],
        count=len(products)
    )

@router.get("/", response_model=ProductPageResponse)
async def get_products(
    category: Optional[str] = Query(None, description="Category slug, or 'all'"),
    featured: Optional[bool] = Query(None),
    pagination: PaginationParams = Depends(get_pagination_params),
    db: AsyncSession = Depends(get_db)
):
    """Get products with pagination"""
    service = ProductService(db)
    result = await service.list_products(
        category=category,
        featured=featured,
        params=pagination
    )
    return ProductPageResponse(
        products=[ProductResponse.model_validate(p) for p in result.items],
        total_products=result.total,
        total_pages=result.pages,
        current_page=result.page
    )

@router.get("/search", response_model=ProductCollectionResponse)
async def search_products(
    q: str = Query(..., min_length=1, description="Search term"),
    db: AsyncSession = Depends(get_db)
):
    """Search products"""
    return _collection(await ProductService(db).search(q))

@router.get("/featured", response_model=ProductCollectionResponse)
async def get_featured_products(db: AsyncSession = Depends(get_db)):
    """Get featured products"""
    return _collection(await ProductService(db).featured())

@router.get("/best-sellers", response_model=ProductCollectionResponse)
async def get_best_sellers(db: AsyncSession = Depends(get_db)):
    return _collection(await ProductService(db).best_sellers())

@router.get("/categories", response_model=CategoryListResponse)
async def get_categories(db: AsyncSession = Depends(get_db)):
    categories = await ProductService(db).categories()
    return CategoryListResponse(categories=categories, count=len(categories))

@router.get("/category/{category}", response_model=ProductCollectionResponse)
async def get_products_by_category(
    category: str,
    db: AsyncSession = Depends(get_db)
):
    return _collection(await ProductService(db).by_category(category))

@router.get("/{product_id}", response_model=ProductEnvelope)
async def get_product(
    product_id: uuid.UUID,
    db: AsyncSession = Depends(get_db)
):
    """Get product by ID"""
    product = await ProductService(db).get_product(product_id)
    return ProductEnvelope(product=ProductResponse.model_validate(product))

@router.post("/", response_model=ProductEnvelope, status_code=status.HTTP_201_CREATED)
async def create_product(
    data: ProductCreate,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    product = await ProductService(db).create_product(data)
    return ProductEnvelope(
        message="Product created successfully",
        product=ProductResponse.model_validate(product)
    )

@router.put("/{product_id}", response_model=ProductEnvelope)
async def update_product(
    product_id: uuid.UUID,
    data: ProductUpdate,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    product = await ProductService(db).update_product(product_id, data)
    return ProductEnvelope(
        message="Product updated successfully",
        product=ProductResponse.model_validate(product)
    )

@router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product(
    product_id: uuid.UUID,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    await ProductService(db).delete_product(product_id)
    return MessageResponse(message="Product deleted successfully")
