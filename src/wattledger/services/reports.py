"""Report data for the presentation layer."""

from ..schemas.reports import BuildingOverview, BuildingSummary, BuildingUnitUsage, UnitUsageRow
from ..utils.numbers import ZERO
from .aggregation import AggregationEngine
from .alerts import is_over_threshold
from .ledger_store import LedgerStore


class ReportService:
    """Read-only views over the ledger. Formatting is left to the caller."""

    def __init__(self, store: LedgerStore):
        self.store = store
        self.aggregation = AggregationEngine(store)

    def building_overview(self) -> list[BuildingOverview]:
        counts = self.store.unit_counts()
        return [
            BuildingOverview(
                id=b.id,
                name=b.name,
                energy_rate_per_kwh=b.energy_rate_per_kwh,
                unit_count=counts.get(b.id, 0),
            )
            for b in self.store.list_buildings()
        ]

    def monthly_summary(self, year: int, month: int) -> list[BuildingSummary]:
        """Totals and per-unit average of every building for one period."""
        summaries = []
        for building in self.store.list_buildings():
            totals = self.aggregation.building_monthly_totals(building.id, year, month)
            summaries.append(
                BuildingSummary(
                    building_id=building.id,
                    name=building.name,
                    year=year,
                    month=month,
                    total_kwh=totals.total_kwh,
                    total_cost=totals.total_cost,
                    average_unit_kwh=self.aggregation.average_per_unit_kwh(
                        building.id, year, month
                    ),
                )
            )
        return summaries

    def unit_usage(self, year: int, month: int) -> list[BuildingUnitUsage]:
        """Per-unit kWh against thresholds, buildings by id and units by number."""
        report = []
        for building in self.store.list_buildings():
            units = self.store.list_units(building.id)
            recorded = self.store.usage_by_unit((u.id for u in units), year, month)

            rows = []
            for unit in units:
                kwh = recorded.get(unit.id, ZERO)
                threshold = unit.monthly_usage_threshold_kwh or ZERO
                rows.append(
                    UnitUsageRow(
                        unit_id=unit.id,
                        unit_number=unit.unit_number,
                        kwh=kwh,
                        threshold=threshold,
                        exceeds=is_over_threshold(kwh, threshold),
                    )
                )
            report.append(BuildingUnitUsage(building_id=building.id, name=building.name, units=rows))
        return report
