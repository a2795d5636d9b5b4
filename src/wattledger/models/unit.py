"""Unit model."""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base
from .types import ExactDecimal

if TYPE_CHECKING:
    from .building import Building
    from .usage import EnergyUsage


class Unit(Base):
    """A billable sub-unit of a building (apartment, suite)."""

    __tablename__ = "units"
    __table_args__ = (
        UniqueConstraint(
            "building_id",
            "unit_number",
            name="uq_building_unit_number",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    building_id: Mapped[int] = mapped_column(
        ForeignKey("buildings.id", ondelete="CASCADE"),
        index=True,
    )
    unit_number: Mapped[str] = mapped_column(String(50))

    # None = no alerting
    monthly_usage_threshold_kwh: Mapped[Decimal | None] = mapped_column(
        ExactDecimal,
        nullable=True,
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    # Relationships
    building: Mapped["Building"] = relationship(back_populates="units")
    usage_records: Mapped[list["EnergyUsage"]] = relationship(
        back_populates="unit",
        cascade="all, delete-orphan",
    )
