"""Pydantic schemas for derived records, API validation and CSV rows."""

from .billing import (
    AlertRecord,
    BillLineItem,
    BuildingTotals,
    BuildingUsage,
    OverageSimulation,
    UsageSeriesPoint,
)
from .ledger import (
    BuildingResponse,
    RecordUsageRequest,
    UnitResponse,
    UpsertBuildingRequest,
    UpsertResponse,
    UpsertUnitRequest,
)
from .reports import BuildingOverview, BuildingSummary, BuildingUnitUsage, UnitUsageRow
from .transfer import BuildingRow, ImportResult, ImportSummary, UnitRow, UsageRow

__all__ = [
    "AlertRecord",
    "BillLineItem",
    "BuildingOverview",
    "BuildingResponse",
    "BuildingRow",
    "BuildingSummary",
    "BuildingTotals",
    "BuildingUnitUsage",
    "BuildingUsage",
    "ImportResult",
    "ImportSummary",
    "OverageSimulation",
    "RecordUsageRequest",
    "UnitResponse",
    "UnitRow",
    "UnitUsageRow",
    "UpsertBuildingRequest",
    "UpsertResponse",
    "UpsertUnitRequest",
    "UsageRow",
    "UsageSeriesPoint",
]
