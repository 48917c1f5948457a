"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from dispatch_backend.app.api.v1.endpoints import (
    companies, rate_cards, consignees, bookings,
    vehicles, drivers, reports, audit_logs
)

router = APIRouter()

# Companies and their rate cards
router.include_router(companies.router)
router.include_router(rate_cards.router)

# Consignee registry and approval queue
router.include_router(consignees.router)

# Bookings and dispatch
router.include_router(bookings.router)
router.include_router(vehicles.router)
router.include_router(drivers.router)

# Reporting
router.include_router(reports.router)
router.include_router(audit_logs.router)
