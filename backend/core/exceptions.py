"""
Custom exceptions and handlers for consistent API error responses.

Domain errors raised by the services derive from ``APIError`` so routers
can let them propagate and still produce a structured JSON body.
"""

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class APIError(HTTPException):
    """Base API error with consistent structure"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code


class NotFoundError(APIError):
    """Resource not found error"""

    def __init__(
        self, detail: str = "Resource not found", error_code: str = "NOT_FOUND"
    ):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND, detail=detail, error_code=error_code
        )


class ValidationError(APIError):
    """Validation error"""

    def __init__(
        self, detail: str = "Validation failed", error_code: str = "VALIDATION_ERROR"
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=error_code,
        )


class InvalidRating(ValidationError):
    """Rating outside the accepted 1-5 star range"""

    def __init__(self, rating: Any = None, detail: Optional[str] = None):
        self.rating = rating
        super().__init__(
            detail=detail or f"Rating must be an integer between 1 and 5, got {rating!r}",
            error_code="INVALID_RATING",
        )


class BusinessNotFound(NotFoundError):
    """Business does not exist or has been deactivated"""

    def __init__(self, business_id: Any = None):
        self.business_id = business_id
        super().__init__(
            detail=f"Business {business_id} not found",
            error_code="BUSINESS_NOT_FOUND",
        )


class StorageUnavailable(APIError):
    """Transient storage failure; the caller may retry later"""

    def __init__(self, detail: str = "Storage temporarily unavailable"):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail,
            error_code="STORAGE_UNAVAILABLE",
            headers={"Retry-After": "5"},
        )


class ConcurrentUpdateConflict(Exception):
    """Another writer changed the row first; the operation should be retried"""

    def __init__(self, message: str = "Concurrent update conflict"):
        super().__init__(message)


async def handle_value_error(request: Request, exc: ValueError) -> JSONResponse:
    """Convert ValueError to consistent API response"""
    logger.warning(f"ValueError at {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": str(exc),
            "error_code": "VALIDATION_ERROR",
            "path": str(request.url.path),
        },
    )


async def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
    """Handle custom API errors"""
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code} at {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.detail,
            "error_code": exc.error_code,
            "path": str(request.url.path),
        },
        headers=exc.headers,
    )


def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI app"""
    app.add_exception_handler(ValueError, handle_value_error)
    app.add_exception_handler(APIError, handle_api_error)
