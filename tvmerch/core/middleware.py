"""
Request middleware: CORS, request ids with access logging, and a last-resort
JSON error for anything the exception handlers did not catch
"""

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
import time
import uuid
import logging
from typing import Callable

from .config import settings

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

class RequestLogMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and log it once it has been answered"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()

        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"in {elapsed_ms:.1f}ms [{request_id}]"
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

class ErrorHandlerMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception(f"Unhandled error on {request.method} {request.url.path}")
            return JSONResponse(
                status_code=500,
                content={
                    "success": False,
                    "message": str(e) if settings.DEBUG else "An unexpected error occurred",
                    "error_code": "INTERNAL_ERROR",
                    "request_id": getattr(request.state, "request_id", None),
                },
            )

def setup_middleware(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Last added runs first
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(RequestLogMiddleware)
