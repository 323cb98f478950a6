"""
Main FastAPI application
"""

from fastapi import FastAPI
import logging

from tvmerch.core.config import settings
from tvmerch.core.events import lifespan
from tvmerch.core.exceptions import register_exception_handlers
from tvmerch.core.middleware import setup_middleware
from tvmerch.api.v1 import api_router
from tvmerch.utils.helpers import utcnow

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="TV merchandise store API: catalog, orders, coupons and admin panel",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan
)

# Setup middleware
setup_middleware(app)
register_exception_handlers(app)

# Include API routes
app.include_router(api_router, prefix="/api/v1")

# Root endpoint
@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "docs": "/api/docs"
    }

# Health check
@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "timestamp": utcnow().isoformat()
    }

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tvmerch.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        workers=1 if settings.DEBUG else settings.WORKERS
    )
