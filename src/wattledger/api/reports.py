"""Report endpoints across all buildings."""

from fastapi import APIRouter, Depends, Query

from ..schemas.billing import AlertRecord, BuildingUsage
from ..schemas.reports import BuildingSummary, BuildingUnitUsage
from ..services.aggregation import AggregationEngine
from ..services.alerts import AlertEvaluator
from ..services.ledger_store import LedgerStore
from ..services.reports import ReportService
from .deps import get_current_user, get_store

router = APIRouter(
    prefix="/reports",
    tags=["reports"],
    dependencies=[Depends(get_current_user)],
)


@router.get("/summary", response_model=list[BuildingSummary])
def monthly_summary(
    year: int,
    month: int = Query(..., ge=1, le=12),
    store: LedgerStore = Depends(get_store),
) -> list[BuildingSummary]:
    """Monthly totals for every building."""
    return ReportService(store).monthly_summary(year, month)


@router.get("/units", response_model=list[BuildingUnitUsage])
def unit_usage(
    year: int,
    month: int = Query(..., ge=1, le=12),
    store: LedgerStore = Depends(get_store),
) -> list[BuildingUnitUsage]:
    """Per-unit usage and threshold status."""
    return ReportService(store).unit_usage(year, month)


@router.get("/alerts", response_model=list[AlertRecord])
def all_alerts(
    year: int,
    month: int = Query(..., ge=1, le=12),
    store: LedgerStore = Depends(get_store),
) -> list[AlertRecord]:
    """Alerts across all buildings."""
    return AlertEvaluator(store).check_all_buildings(year, month)


@router.get("/usage", response_model=list[BuildingUsage])
def building_usage(
    year: int,
    month: int = Query(..., ge=1, le=12),
    store: LedgerStore = Depends(get_store),
) -> list[BuildingUsage]:
    """Summed kWh per building for one period (bar chart data)."""
    return AggregationEngine(store).building_usage_for_period(year, month)
