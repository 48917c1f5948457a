"""
Custom exceptions and error handlers for consistent error responses.

Provides standardized error codes and global exception handlers.
Every error body uses the envelope:
    {"success": false, "error": <message>, "error_code": <code>, "details": {...}}
"""

import logging
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from typing import Any, Dict

logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, error_code: str, status_code: int = 500, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class ValidationFailedError(AppException):
    """Raised when input passes the schema but fails a business rule."""

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_VALIDATION_001",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )


class ConflictError(AppException):
    """Raised when a change conflicts with existing state (duplicates, locked records)."""

    def __init__(self, message: str, details: Dict[str, Any] = None, error_code: str = "ERR_CONFLICT_001"):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status.HTTP_409_CONFLICT,
            details=details
        )


class InvalidStatusTransitionError(ConflictError):
    """Raised when a booking status change is not allowed by the lifecycle."""

    def __init__(self, current: str, target: str):
        super().__init__(
            message=f"Cannot change booking status from {current} to {target}",
            details={"current_status": current, "target_status": target},
            error_code="ERR_STATE_001"
        )


class ResourceNotFoundError(AppException):
    """Raised when requested resource is not found."""

    def __init__(self, resource: str, resource_id: Any = None):
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} with ID {resource_id} not found"
        super().__init__(
            message=message,
            error_code="ERR_NOT_FOUND_001",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "id": resource_id}
        )


class AlreadyProcessedError(ResourceNotFoundError):
    """Raised when a review action targets a record that is missing or no longer PENDING."""

    def __init__(self, resource: str, resource_id: Any = None):
        super().__init__(resource, resource_id)
        self.message = f"{resource} not found or already processed"
        self.error_code = "ERR_NOT_FOUND_002"
        self.args = (self.message,)


class PersistenceError(AppException):
    """Raised when the store is unreachable or rejects a write."""

    def __init__(self, operation: str, reason: str):
        super().__init__(
            message=f"Failed to {operation}",
            error_code="ERR_PERSISTENCE_001",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"reason": reason}
        )


def error_body(message: Any, error_code: str, details: Dict[str, Any] = None) -> Dict[str, Any]:
    return {
        "success": False,
        "error": message,
        "error_code": error_code,
        "details": details or {}
    }


# Global Exception Handlers

async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handler for custom application exceptions."""
    if exc.status_code >= 500:
        logger.error("%s: %s %s", exc.error_code, exc.message, exc.details)
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(error_body(exc.message, exc.error_code, exc.details))
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handler for FastAPI HTTPException with standardized format."""
    # Map status code to error code
    error_code_map = {
        400: "ERR_BAD_REQUEST",
        404: "ERR_NOT_FOUND",
        405: "ERR_METHOD_NOT_ALLOWED",
        409: "ERR_CONFLICT",
        500: "ERR_INTERNAL_SERVER"
    }

    error_code = error_code_map.get(exc.status_code, "ERR_UNKNOWN")

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.detail, error_code)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handler for Pydantic validation errors."""
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=jsonable_encoder(
            error_body("Validation error", "ERR_VALIDATION", {"errors": errors})
        )
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler for unhandled exceptions."""
    logger.exception("Unhandled exception: %s: %s", type(exc).__name__, exc)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("An internal server error occurred", "ERR_INTERNAL_SERVER")
    )


async def persistence_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handler for store failures that escaped the service layer (e.g. failed reads)."""
    logger.error("Store error: %s: %s", type(exc).__name__, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(
            "A persistence error occurred",
            "ERR_PERSISTENCE_001",
            {"reason": str(getattr(exc, "orig", None) or exc)}
        )
    )
