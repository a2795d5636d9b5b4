"""Derived billing, aggregation and alert records."""

from decimal import Decimal

from pydantic import BaseModel, computed_field

from ..utils.numbers import round_money


class BillLineItem(BaseModel):
    """One unit-period line item. Cost is always computed, never stored."""

    unit_id: int
    year: int
    month: int
    kwh: Decimal
    rate: Decimal

    @computed_field
    @property
    def cost(self) -> Decimal:
        return round_money(self.kwh * self.rate)


class AlertRecord(BaseModel):
    """A unit whose usage exceeded its threshold for a period."""

    unit_id: int
    year: int
    month: int
    kwh: Decimal
    threshold: Decimal


class BuildingTotals(BaseModel):
    """Building-level usage and cost for one period."""

    building_id: int
    year: int
    month: int
    total_kwh: Decimal
    total_cost: Decimal


class UsageSeriesPoint(BaseModel):
    """Summed usage of a building for one period (charting export)."""

    building_name: str
    year: int
    month: int
    total_kwh: Decimal


class BuildingUsage(BaseModel):
    """Summed usage of a building for a fixed period."""

    building_name: str
    total_kwh: Decimal


class OverageSimulation(BaseModel):
    """What the over-usage simulation wrote."""

    unit_id: int
    unit_number: str
    building_name: str
    year: int
    month: int
    threshold: Decimal
    kwh: Decimal
