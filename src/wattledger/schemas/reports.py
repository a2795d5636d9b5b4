"""Report schemas."""

from decimal import Decimal

from pydantic import BaseModel


class BuildingOverview(BaseModel):
    """A building with its rate and unit count."""

    id: int
    name: str
    energy_rate_per_kwh: Decimal
    unit_count: int


class BuildingSummary(BaseModel):
    """Monthly totals for one building."""

    building_id: int
    name: str
    year: int
    month: int
    total_kwh: Decimal
    total_cost: Decimal
    average_unit_kwh: Decimal


class UnitUsageRow(BaseModel):
    """Usage of one unit against its threshold."""

    unit_id: int
    unit_number: str
    kwh: Decimal
    threshold: Decimal  # 0 when the unit has none
    exceeds: bool


class BuildingUnitUsage(BaseModel):
    """All units of a building for a period."""

    building_id: int
    name: str
    units: list[UnitUsageRow]
