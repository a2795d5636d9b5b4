"""Durable storage for buildings, units and monthly usage."""

import logging
from collections.abc import Iterable
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, contains_eager, joinedload

from ..errors import InvalidArgument, NotFound, StorageFailure
from ..models import Building, EnergyUsage, Unit
from ..utils.numbers import ZERO

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def validate_usage(month: int, kwh: Decimal) -> None:
    """Reject a month outside 1-12 or negative kWh."""
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise InvalidArgument(f"month must be between 1 and 12, got {month!r}")
    if kwh < 0:
        raise InvalidArgument(f"kwh must not be negative, got {kwh}")


class LedgerStore:
    """Keyed storage over an explicit session. Every write commits immediately."""

    def __init__(self, session: Session):
        self.session = session

    def _insert(self, model):
        dialect = self.session.get_bind().dialect.name
        try:
            return _UPSERT_DIALECTS[dialect](model)
        except KeyError:
            raise StorageFailure(f"Upsert is not supported on {dialect}") from None

    def _write(self, stmt, what: str):
        """Execute one write and commit, translating store errors."""
        try:
            result = self.session.execute(stmt).scalar_one_or_none()
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.warning(f"Failed to write {what}: {e}")
            raise StorageFailure(f"Failed to write {what}: {e}") from e
        return result

    # Writes

    def upsert_building(self, name: str, rate: Decimal) -> int:
        """Insert a building or update the rate of the one with this exact name."""
        if not name or not name.strip():
            raise InvalidArgument("building name must not be empty")
        if rate < 0:
            raise InvalidArgument(f"rate must not be negative, got {rate}")

        stmt = self._insert(Building).values(name=name, energy_rate_per_kwh=rate)
        stmt = stmt.on_conflict_do_update(
            index_elements=[Building.name],
            set_={
                "energy_rate_per_kwh": stmt.excluded.energy_rate_per_kwh,
                "updated_at": func.now(),
            },
        ).returning(Building.id)

        building_id = self._write(stmt, f"building {name!r}")
        logger.debug(f"Upserted building {name!r} (id={building_id}, rate={rate})")
        return building_id

    def upsert_unit(
        self,
        building_id: int,
        unit_number: str,
        threshold: Decimal | None = None,
    ) -> int:
        """Insert a unit or update the threshold of (building, unit number)."""
        if not unit_number or not unit_number.strip():
            raise InvalidArgument("unit number must not be empty")
        if threshold is not None and threshold < 0:
            raise InvalidArgument(f"threshold must not be negative, got {threshold}")
        self.get_building(building_id)

        stmt = self._insert(Unit).values(
            building_id=building_id,
            unit_number=unit_number,
            monthly_usage_threshold_kwh=threshold,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[Unit.building_id, Unit.unit_number],
            set_={
                "monthly_usage_threshold_kwh": stmt.excluded.monthly_usage_threshold_kwh,
                "updated_at": func.now(),
            },
        ).returning(Unit.id)

        unit_id = self._write(stmt, f"unit {unit_number!r} of building {building_id}")
        logger.debug(f"Upserted unit {unit_number!r} (id={unit_id}, building={building_id})")
        return unit_id

    def record_usage(self, unit_id: int, year: int, month: int, kwh: Decimal) -> None:
        """Insert or overwrite the (unit, year, month) usage fact."""
        validate_usage(month, kwh)
        self.get_unit(unit_id)

        stmt = self._insert(EnergyUsage).values(
            unit_id=unit_id,
            year=year,
            month=month,
            kwh=kwh,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[EnergyUsage.unit_id, EnergyUsage.year, EnergyUsage.month],
            set_={"kwh": stmt.excluded.kwh, "updated_at": func.now()},
        ).returning(EnergyUsage.id)

        self._write(stmt, f"usage for unit {unit_id} {year}-{month:02d}")
        logger.debug(f"Recorded {kwh} kWh for unit {unit_id} {year}-{month:02d}")

    # Buildings

    def list_buildings(self) -> list[Building]:
        return list(self.session.scalars(select(Building).order_by(Building.id)))

    def get_building(self, building_id: int) -> Building:
        building = self.session.get(Building, building_id)
        if not building:
            raise NotFound(f"Building {building_id} not found")
        return building

    def find_building_by_name(self, name: str) -> Building | None:
        return self.session.scalars(
            select(Building).where(Building.name == name)
        ).one_or_none()

    # Units

    def list_units(self, building_id: int) -> list[Unit]:
        """Units of a building, ordered by unit number."""
        return list(
            self.session.scalars(
                select(Unit)
                .where(Unit.building_id == building_id)
                .order_by(Unit.unit_number)
            )
        )

    def list_all_units(self) -> list[Unit]:
        """Every unit with its building loaded, ordered by building name then unit number."""
        return list(
            self.session.scalars(
                select(Unit)
                .join(Unit.building)
                .options(contains_eager(Unit.building))
                .order_by(Building.name, Unit.unit_number)
            )
        )

    def get_unit(self, unit_id: int) -> Unit:
        unit = self.session.get(Unit, unit_id)
        if not unit:
            raise NotFound(f"Unit {unit_id} not found")
        return unit

    def unit_counts(self) -> dict[int, int]:
        """Number of units per building id (buildings without units are absent)."""
        rows = self.session.execute(
            select(Unit.building_id, func.count(Unit.id)).group_by(Unit.building_id)
        )
        return {building_id: count for building_id, count in rows}

    def first_unit_with_threshold(self) -> Unit | None:
        """Lowest-id unit that has a threshold configured."""
        return self.session.scalars(
            select(Unit)
            .options(joinedload(Unit.building))
            .where(Unit.monthly_usage_threshold_kwh.is_not(None))
            .order_by(Unit.id)
            .limit(1)
        ).first()

    # Usage

    def get_usage(self, unit_id: int, year: int, month: int) -> EnergyUsage | None:
        return self.session.scalars(
            select(EnergyUsage).where(
                EnergyUsage.unit_id == unit_id,
                EnergyUsage.year == year,
                EnergyUsage.month == month,
            )
        ).one_or_none()

    def get_usage_kwh(self, unit_id: int, year: int, month: int) -> Decimal:
        """kWh for the period; an absent record reads as zero."""
        usage = self.get_usage(unit_id, year, month)
        return usage.kwh if usage else ZERO

    def usage_by_unit(
        self,
        unit_ids: Iterable[int],
        year: int,
        month: int,
    ) -> dict[int, Decimal]:
        """Recorded kWh per unit for the period. Units without a record are absent."""
        unit_ids = list(unit_ids)
        if not unit_ids:
            return {}
        rows = self.session.execute(
            select(EnergyUsage.unit_id, EnergyUsage.kwh).where(
                EnergyUsage.unit_id.in_(unit_ids),
                EnergyUsage.year == year,
                EnergyUsage.month == month,
            )
        )
        return {unit_id: kwh for unit_id, kwh in rows}

    def list_usage_with_building_names(self) -> list[tuple[str, int, int, Decimal]]:
        """(building name, year, month, kWh) for every usage fact, ordered by name then period."""
        rows = self.session.execute(
            select(Building.name, EnergyUsage.year, EnergyUsage.month, EnergyUsage.kwh)
            .join(Unit, Unit.id == EnergyUsage.unit_id)
            .join(Building, Building.id == Unit.building_id)
            .order_by(Building.name, EnergyUsage.year, EnergyUsage.month, EnergyUsage.unit_id)
        )
        return [(name, year, month, kwh) for name, year, month, kwh in rows]
