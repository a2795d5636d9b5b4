"""Line-item cost calculation."""

from decimal import Decimal

from ..schemas.billing import BillLineItem
from ..utils.numbers import round_money
from .ledger_store import LedgerStore


def compute_cost(kwh: Decimal, rate: Decimal) -> Decimal:
    """Cost of kWh at a rate: one multiply, one round to cents."""
    return round_money(kwh * rate)


class BillingCalculator:
    """Derives line items from stored usage and the building's current rate."""

    def __init__(self, store: LedgerStore):
        self.store = store

    def bill_for_month(self, unit_id: int, year: int, month: int) -> BillLineItem:
        """
        Bill one unit for one month.

        The rate is read now, not snapshotted with the usage, so a rate change
        reprices past periods too.
        """
        unit = self.store.get_unit(unit_id)
        building = self.store.get_building(unit.building_id)
        kwh = self.store.get_usage_kwh(unit_id, year, month)

        return BillLineItem(
            unit_id=unit_id,
            year=year,
            month=month,
            kwh=kwh,
            rate=building.energy_rate_per_kwh,
        )
