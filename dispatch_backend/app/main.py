"""
FastAPI Application Entry Point.

This is the main application file for the Dispatch Backend.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from dispatch_backend.app.core.config import settings
from dispatch_backend.app.core.observability import ObservabilityMiddleware, configure_logging
from dispatch_backend.app.api.v1.router import router as api_v1_router
from dispatch_backend.app.db.session import engine, Base
from dispatch_backend.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    persistence_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from dispatch_backend.app.models.company import Company
from dispatch_backend.app.models.driver import Driver  # before vehicle for FK
from dispatch_backend.app.models.vehicle import Vehicle
from dispatch_backend.app.models.rate_card import RateCard
from dispatch_backend.app.models.consignee import Consignee
from dispatch_backend.app.models.booking import Booking
from dispatch_backend.app.models.audit_log import AuditLog

configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    Creates database tables on startup.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()

# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="Parcel booking, rate cards, consignee approval and fleet dispatch",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(SQLAlchemyError, persistence_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Status and application information
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.api_version,
    }


# Include API v1 router
app.include_router(api_v1_router, prefix=f"/{settings.api_version}")


@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint.

    Returns:
        dict: Welcome message and API documentation links
    """
    return {
        "message": "Welcome to Dispatch Backend API",
        "docs": "/docs",
        "health": "/health",
    }
