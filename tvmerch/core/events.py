"""
Application lifespan: logging, schema creation and engine disposal
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from .config import settings
from .database import close_db, init_db
from .logging import setup_logging

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} ({settings.ENVIRONMENT})")

    # Test runs build their own in-memory schema
    if settings.ENVIRONMENT != "test":
        await init_db()

    if not settings.email_configured:
        logger.warning("SMTP credentials not set, transactional email is disabled")

    try:
        yield
    finally:
        await close_db()
        logger.info(f"{settings.APP_NAME} stopped")
