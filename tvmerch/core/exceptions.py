"""
Custom exception classes and error handlers
Provides consistent error responses across the application
"""

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from typing import Any, Dict, Optional

class TVMerchException(HTTPException):
    """Base exception class for the store API"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code

class BadRequestException(TVMerchException):
    """400 Bad Request"""

    def __init__(self, detail: str, error_code: str = "BAD_REQUEST"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=error_code
        )

class UnauthorizedException(TVMerchException):
    """401 Unauthorized"""

    def __init__(self, detail: str = "Unauthorized", error_code: str = "UNAUTHORIZED"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code=error_code,
            headers={"WWW-Authenticate": "Bearer"}
        )

class NotFoundException(TVMerchException):
    """404 Not Found"""

    def __init__(self, detail: str = "Not found", error_code: str = "NOT_FOUND"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code=error_code
        )

class ConflictException(TVMerchException):
    """409 Conflict"""

    def __init__(self, detail: str, error_code: str = "CONFLICT"):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            error_code=error_code
        )

class InternalServerException(TVMerchException):
    """500 Internal Server Error"""

    def __init__(
        self,
        detail: str = "Internal server error",
        error_code: str = "INTERNAL_ERROR"
    ):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            error_code=error_code
        )

# Business logic exceptions
class DuplicateResourceException(ConflictException):
    """Resource already exists"""

    def __init__(self, detail: str):
        super().__init__(
            detail=detail,
            error_code="DUPLICATE_RESOURCE"
        )

class CouponInUseException(ConflictException):
    """Coupon has redemptions and cannot be removed"""

    def __init__(self, detail: str = "Cannot delete coupon that has been used"):
        super().__init__(
            detail=detail,
            error_code="COUPON_IN_USE"
        )

class CouponRedemptionException(ConflictException):
    """Coupon caps were reached by the time the redemption was written"""

    def __init__(self, detail: str):
        super().__init__(
            detail=detail,
            error_code="COUPON_REDEMPTION_REJECTED"
        )

class InvalidOrderTransitionException(BadRequestException):
    """Order cannot move to the requested status"""

    def __init__(self, current: str, requested: str):
        super().__init__(
            detail=f"Cannot change order status from {current} to {requested}",
            error_code="INVALID_STATUS_TRANSITION"
        )

async def tvmerch_exception_handler(request: Request, exc: TVMerchException) -> JSONResponse:
    """Render application exceptions in the store's response envelope"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "message": exc.detail,
            "error_code": exc.error_code,
            "request_id": getattr(request.state, "request_id", None),
        },
        headers=exc.headers,
    )

def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TVMerchException, tvmerch_exception_handler)
