"""Building, unit and usage endpoints."""

from fastapi import APIRouter, Depends, Query

from ..config import settings
from ..models import User
from ..schemas.billing import AlertRecord, BillLineItem, OverageSimulation
from ..schemas.ledger import (
    BuildingResponse,
    RecordUsageRequest,
    UnitResponse,
    UpsertBuildingRequest,
    UpsertResponse,
    UpsertUnitRequest,
)
from ..schemas.reports import BuildingOverview, BuildingSummary
from ..services.aggregation import AggregationEngine
from ..services.alerts import AlertEvaluator
from ..services.billing import BillingCalculator
from ..services.ledger_store import LedgerStore
from ..services.reports import ReportService
from ..services.usage_recorder import UsageRecorder
from .deps import get_current_user, get_store, require_admin

router = APIRouter(tags=["ledger"], dependencies=[Depends(get_current_user)])


@router.get("/buildings", response_model=list[BuildingOverview])
def list_buildings(store: LedgerStore = Depends(get_store)) -> list[BuildingOverview]:
    """List buildings with their rate and unit count."""
    return ReportService(store).building_overview()


@router.put("/buildings", response_model=UpsertResponse)
def upsert_building(
    request: UpsertBuildingRequest,
    store: LedgerStore = Depends(get_store),
    _: User = Depends(require_admin),
) -> UpsertResponse:
    """Create a building or update its rate."""
    return UpsertResponse(id=store.upsert_building(request.name, request.rate))


@router.get("/buildings/{building_id}", response_model=BuildingResponse)
def get_building(
    building_id: int,
    store: LedgerStore = Depends(get_store),
) -> BuildingResponse:
    return BuildingResponse.model_validate(store.get_building(building_id))


@router.get("/buildings/{building_id}/units", response_model=list[UnitResponse])
def list_units(
    building_id: int,
    store: LedgerStore = Depends(get_store),
) -> list[UnitResponse]:
    """Units of a building, ordered by unit number."""
    store.get_building(building_id)
    return [UnitResponse.model_validate(u) for u in store.list_units(building_id)]


@router.get("/buildings/{building_id}/totals", response_model=BuildingSummary)
def building_totals(
    building_id: int,
    year: int,
    month: int = Query(..., ge=1, le=12),
    store: LedgerStore = Depends(get_store),
) -> BuildingSummary:
    """Total kWh, cost and per-unit average for one period."""
    building = store.get_building(building_id)
    engine = AggregationEngine(store)
    totals = engine.building_monthly_totals(building_id, year, month)

    return BuildingSummary(
        building_id=building_id,
        name=building.name,
        year=year,
        month=month,
        total_kwh=totals.total_kwh,
        total_cost=totals.total_cost,
        average_unit_kwh=engine.average_per_unit_kwh(building_id, year, month),
    )


@router.get("/buildings/{building_id}/alerts", response_model=list[AlertRecord])
def building_alerts(
    building_id: int,
    year: int,
    month: int = Query(..., ge=1, le=12),
    store: LedgerStore = Depends(get_store),
) -> list[AlertRecord]:
    """Units over their threshold for one period."""
    return AlertEvaluator(store).check_monthly_thresholds(building_id, year, month)


@router.put("/units", response_model=UpsertResponse)
def upsert_unit(
    request: UpsertUnitRequest,
    store: LedgerStore = Depends(get_store),
    _: User = Depends(require_admin),
) -> UpsertResponse:
    """Create a unit or update its threshold."""
    unit_id = store.upsert_unit(request.building_id, request.unit_number, request.threshold)
    return UpsertResponse(id=unit_id)


@router.get("/units/{unit_id}/bill", response_model=BillLineItem)
def unit_bill(
    unit_id: int,
    year: int,
    month: int = Query(..., ge=1, le=12),
    store: LedgerStore = Depends(get_store),
) -> BillLineItem:
    """Line item for one unit and month at the building's current rate."""
    return BillingCalculator(store).bill_for_month(unit_id, year, month)


@router.put("/usage", status_code=204)
def record_usage(
    request: RecordUsageRequest,
    store: LedgerStore = Depends(get_store),
    _: User = Depends(require_admin),
) -> None:
    """Record or overwrite one month of usage."""
    UsageRecorder(store).record(request.unit_id, request.year, request.month, request.kwh)


@router.post("/usage/simulate-overage", response_model=OverageSimulation)
def simulate_overage(
    year: int,
    month: int,
    store: LedgerStore = Depends(get_store),
    _: User = Depends(require_admin),
) -> OverageSimulation:
    """Demo: push the first unit with a threshold over it."""
    return UsageRecorder(store).simulate_overage(year, month, settings.overage_margin_kwh)
