"""
Product schemas for request/response validation
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
import uuid

from tvmerch.models.product import ProductCategory
from tvmerch.schemas.base import BaseSchema, Money, OptionalMoney

class ProductBase(BaseModel):
    """Base product schema"""

    @field_validator("sku", check_fields=False)
    @classmethod
    def blank_sku_is_none(cls, v):
        if v is None:
            return v
        v = v.strip().upper()
        return v or None

class ProductCreate(ProductBase):
    """Schema for creating product"""
    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    category: ProductCategory
    show_name: str = Field("", max_length=200)
    price: Money = Field(..., ge=0)
    mrp: OptionalMoney = Field(None, ge=0)
    discount: Optional[int] = Field(None, ge=0, lt=100)
    sizes: List[str] = Field(default_factory=list)
    quantity: int = Field(0, ge=0)
    sku: Optional[str] = Field(None, max_length=50)
    images: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    is_active: bool = True
    featured: bool = False
    is_best_seller: bool = False
    is_new_arrival: bool = True

class ProductUpdate(ProductBase):
    """Schema for partial product updates"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[ProductCategory] = None
    show_name: Optional[str] = Field(None, max_length=200)
    price: OptionalMoney = Field(None, ge=0)
    mrp: OptionalMoney = Field(None, ge=0)
    discount: Optional[int] = Field(None, ge=0, lt=100)
    sizes: Optional[List[str]] = None
    quantity: Optional[int] = Field(None, ge=0)
    sku: Optional[str] = Field(None, max_length=50)
    images: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    is_active: Optional[bool] = None
    featured: Optional[bool] = None
    is_best_seller: Optional[bool] = None
    is_new_arrival: Optional[bool] = None

class ProductResponse(BaseSchema):
    """Schema for product response"""
    id: uuid.UUID
    name: str
    description: str
    category: str
    show_name: str
    price: Money
    mrp: Money
    discount: int
    sizes: List[str]
    quantity: int
    in_stock: bool
    sku: Optional[str] = None
    images: List[str]
    tags: List[str]
    is_active: bool
    featured: bool
    is_best_seller: bool
    is_new_arrival: bool
    sales_count: int
    created_at: datetime
    updated_at: datetime

class ProductEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    product: ProductResponse

class ProductPageResponse(BaseModel):
    """Paginated catalog listing"""
    success: bool = True
    products: List[ProductResponse]
    total_products: int
    total_pages: int
    current_page: int

class ProductCollectionResponse(BaseModel):
    success: bool = True
    products: List[ProductResponse]
    count: int

class CategoryListResponse(BaseModel):
    success: bool = True
    categories: List[str]
    count: int
