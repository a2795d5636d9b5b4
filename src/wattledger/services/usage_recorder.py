"""Single validation path for recording usage."""

import logging
from decimal import Decimal

from ..errors import InvalidArgument, NotFound
from ..schemas.billing import OverageSimulation
from ..utils.numbers import parse_decimal
from .ledger_store import LedgerStore

logger = logging.getLogger(__name__)

DEFAULT_OVERAGE_MARGIN = Decimal("100")


def _require_int(value: int, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(f"{field} must be an integer, got {value!r}")
    return value


class UsageRecorder:
    """Validates and records usage facts. Shared by CSV import and the API."""

    def __init__(self, store: LedgerStore):
        self.store = store

    def record(
        self,
        unit_id: int,
        year: int,
        month: int,
        kwh: Decimal | int | str,
    ) -> Decimal:
        """Record kWh for a unit-period, overwriting any earlier value."""
        _require_int(unit_id, "unit_id")
        _require_int(year, "year")
        _require_int(month, "month")
        value = parse_decimal(kwh, "kwh")

        self.store.record_usage(unit_id, year, month, value)
        return value

    def simulate_overage(
        self,
        year: int,
        month: int,
        margin: Decimal = DEFAULT_OVERAGE_MARGIN,
    ) -> OverageSimulation:
        """
        Push the first unit that has a threshold over it for the period.

        Records threshold + margin kWh, so the next alert check flags the unit.
        """
        unit = self.store.first_unit_with_threshold()
        if unit is None:
            raise NotFound("No units with thresholds found")

        threshold = unit.monthly_usage_threshold_kwh
        kwh = self.record(unit.id, year, month, threshold + margin)
        logger.info(
            f"Simulated over-usage for unit {unit.unit_number} (id={unit.id}): "
            f"{kwh} kWh against threshold {threshold}"
        )

        return OverageSimulation(
            unit_id=unit.id,
            unit_number=unit.unit_number,
            building_name=unit.building.name,
            year=year,
            month=month,
            threshold=threshold,
            kwh=kwh,
        )
