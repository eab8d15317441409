"""
Error handling utilities following FastAPI best practices
"""

import traceback
from typing import Optional

from fastapi import HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from storefront.core.config import config
from storefront.core.logger import logger


class ErrorResponse(Exception):
    """Custom exception for application errors"""

    def __init__(self, message: str, status_code: int = 400, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class ErrorResponseModel(BaseModel):
    """Pydantic model for error responses"""
    success: bool = False
    error: str
    details: Optional[dict] = None


async def error_response_handler(request: Request, exc: ErrorResponse):
    """Handler for custom ErrorResponse exceptions"""
    metadata = {
        "event": "error_response",
        "status_code": exc.status_code,
        "url": str(request.url),
        "method": request.method,
        **exc.details,
    }

    if config.environment == "development":
        metadata["traceback"] = traceback.format_exc()

    if exc.status_code >= 500:
        logger.error(f"Error: {exc.message}", metadata=metadata)
    else:
        logger.warning(f"Error: {exc.message}", metadata=metadata)

    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message, "details": exc.details}
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    """Handler for FastAPI HTTPException"""
    logger.warning(
        f"HTTPException: {exc.detail}",
        metadata={
            "event": "http_exception",
            "status_code": exc.status_code,
            "url": str(request.url),
            "method": request.method,
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handler for request body/query validation failures"""
    logger.warning(
        "Request validation failed",
        metadata={
            "event": "validation_error",
            "url": str(request.url),
            "method": request.method,
        }
    )

    return JSONResponse(
        status_code=422,
        content={"success": False, "error": "Validation error", "details": jsonable_encoder(exc.errors())}
    )
