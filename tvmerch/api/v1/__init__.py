"""API v1 routes aggregation"""

from fastapi import APIRouter

from .coupons.router import router as coupons_router
from .orders.router import router as orders_router
from .products.router import router as products_router
from .admin.router import router as admin_router

# Create v1 router
api_router = APIRouter()

# Include all routers
api_router.include_router(coupons_router, prefix="/coupons", tags=["Coupons"])
api_router.include_router(orders_router, prefix="/orders", tags=["Orders"])
api_router.include_router(products_router, prefix="/products", tags=["Products"])
api_router.include_router(admin_router, prefix="/admin", tags=["Admin"])

# Export router
router = api_router
