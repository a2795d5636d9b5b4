"""Ledger API schemas."""

from decimal import Decimal

from pydantic import BaseModel, Field


class BuildingResponse(BaseModel):
    """Building as stored."""

    id: int
    name: str
    energy_rate_per_kwh: Decimal

    class Config:
        from_attributes = True


class UnitResponse(BaseModel):
    """Unit as stored."""

    id: int
    building_id: int
    unit_number: str
    monthly_usage_threshold_kwh: Decimal | None

    class Config:
        from_attributes = True


class UpsertBuildingRequest(BaseModel):
    """Create a building or update its rate."""

    name: str = Field(..., min_length=1)
    rate: Decimal


class UpsertUnitRequest(BaseModel):
    """Create a unit or update its threshold."""

    building_id: int
    unit_number: str = Field(..., min_length=1)
    threshold: Decimal | None = None


class RecordUsageRequest(BaseModel):
    """Record (or overwrite) one month of usage."""

    unit_id: int
    year: int
    month: int
    kwh: Decimal


class UpsertResponse(BaseModel):
    """Id of the row written by an upsert."""

    id: int
