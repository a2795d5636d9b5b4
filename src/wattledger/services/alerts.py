"""Threshold alerts."""

from decimal import Decimal

from ..schemas.billing import AlertRecord
from ..utils.numbers import ZERO
from .ledger_store import LedgerStore


def is_over_threshold(kwh: Decimal, threshold: Decimal | None) -> bool:
    """True only for a positive threshold strictly exceeded."""
    threshold = threshold if threshold is not None else ZERO
    return threshold > 0 and kwh > threshold


class AlertEvaluator:
    """Flags units whose monthly usage exceeds their threshold."""

    def __init__(self, store: LedgerStore):
        self.store = store

    def check_monthly_thresholds(
        self,
        building_id: int,
        year: int,
        month: int,
    ) -> list[AlertRecord]:
        """Alerts for one building and period, in ascending unit id."""
        self.store.get_building(building_id)
        units = sorted(self.store.list_units(building_id), key=lambda u: u.id)
        recorded = self.store.usage_by_unit((u.id for u in units), year, month)

        alerts = []
        for unit in units:
            kwh = recorded.get(unit.id, ZERO)
            threshold = unit.monthly_usage_threshold_kwh or ZERO
            if is_over_threshold(kwh, threshold):
                alerts.append(
                    AlertRecord(
                        unit_id=unit.id,
                        year=year,
                        month=month,
                        kwh=kwh,
                        threshold=threshold,
                    )
                )
        return alerts

    def check_all_buildings(self, year: int, month: int) -> list[AlertRecord]:
        """Alerts across every building, grouped in building id order."""
        alerts = []
        for building in self.store.list_buildings():
            alerts.extend(self.check_monthly_thresholds(building.id, year, month))
        return alerts
