"""Building-level totals, averages and usage series."""

from decimal import Decimal

from ..schemas.billing import BuildingTotals, BuildingUsage, UsageSeriesPoint
from ..utils.numbers import ZERO, round_money
from .billing import compute_cost
from .ledger_store import LedgerStore


class AggregationEngine:
    """Sums usage across units. Units without a record count as zero kWh."""

    def __init__(self, store: LedgerStore):
        self.store = store

    def _unit_kwh(self, building_id: int, year: int, month: int) -> list[Decimal]:
        units = self.store.list_units(building_id)
        recorded = self.store.usage_by_unit((u.id for u in units), year, month)
        return [recorded.get(u.id, ZERO) for u in units]

    def building_monthly_totals(self, building_id: int, year: int, month: int) -> BuildingTotals:
        """
        Total kWh and cost of a building for one period.

        Cost multiplies the summed kWh by the rate once and rounds once. Summing
        per-unit rounded costs gives different totals.
        """
        building = self.store.get_building(building_id)
        total_kwh = sum(self._unit_kwh(building_id, year, month), ZERO)

        return BuildingTotals(
            building_id=building_id,
            year=year,
            month=month,
            total_kwh=total_kwh,
            total_cost=compute_cost(total_kwh, building.energy_rate_per_kwh),
        )

    def average_per_unit_kwh(self, building_id: int, year: int, month: int) -> Decimal:
        """Mean kWh per unit, rounded to 2 places. 0.00 for a building with no units."""
        self.store.get_building(building_id)
        values = self._unit_kwh(building_id, year, month)
        if not values:
            return round_money(ZERO)
        return round_money(sum(values, ZERO) / len(values))

    def usage_series(self) -> list[UsageSeriesPoint]:
        """Summed kWh per (building, year, month) with usage, ordered by name then period."""
        points: dict[tuple[str, int, int], Decimal] = {}
        for name, year, month, kwh in self.store.list_usage_with_building_names():
            key = (name, year, month)
            points[key] = points.get(key, ZERO) + kwh

        return [
            UsageSeriesPoint(building_name=name, year=year, month=month, total_kwh=total)
            for (name, year, month), total in points.items()
        ]

    def building_usage_for_period(self, year: int, month: int) -> list[BuildingUsage]:
        """Summed kWh of every building for one period, ordered by name."""
        buildings = sorted(self.store.list_buildings(), key=lambda b: b.name)
        return [
            BuildingUsage(
                building_name=building.name,
                total_kwh=sum(self._unit_kwh(building.id, year, month), ZERO),
            )
            for building in buildings
        ]
