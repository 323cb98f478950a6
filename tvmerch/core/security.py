"""
Security utilities for admin authentication
Admin tokens are opaque strings carrying a configured prefix
"""

from typing import Optional, Dict, Any
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import secrets
import time

from .config import settings
from .exceptions import UnauthorizedException

# Security scheme; missing headers are reported by require_admin itself
security = HTTPBearer(auto_error=False)

class SecurityUtils:
    """Security utility functions"""

    @staticmethod
    def verify_admin_credentials(email: str, password: str) -> bool:
        """Compare submitted credentials with the configured admin account"""
        email_ok = secrets.compare_digest(
            (email or "").strip().lower(), settings.ADMIN_EMAIL.lower()
        )
        password_ok = secrets.compare_digest(password or "", settings.ADMIN_PASSWORD)
        return email_ok and password_ok

    @staticmethod
    def create_admin_token() -> str:
        """Issue an admin token"""
        return f"{settings.ADMIN_TOKEN_PREFIX}{int(time.time() * 1000)}"

    @staticmethod
    def is_admin_token(token: str) -> bool:
        return token.startswith(settings.ADMIN_TOKEN_PREFIX)

async def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Dict[str, Any]:
    """Dependency guarding admin-only routes"""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException("No admin token provided", error_code="MISSING_TOKEN")

    if not SecurityUtils.is_admin_token(credentials.credentials):
        raise UnauthorizedException("Invalid admin token", error_code="INVALID_TOKEN")

    return {"email": settings.ADMIN_EMAIL, "role": "admin"}
