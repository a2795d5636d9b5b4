"""Main API router aggregation."""

from fastapi import APIRouter

from .health import router as health_router
from .ledger import router as ledger_router
from .reports import router as reports_router
from .transfer import router as transfer_router

router = APIRouter()

# Include sub-routers
router.include_router(health_router)
router.include_router(ledger_router)
router.include_router(reports_router)
router.include_router(transfer_router)
