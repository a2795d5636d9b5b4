"""Monthly energy usage model."""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base
from .types import ExactDecimal

if TYPE_CHECKING:
    from .unit import Unit


class EnergyUsage(Base):
    """Monthly kWh observation for one unit."""

    __tablename__ = "energy_usage"
    __table_args__ = (
        UniqueConstraint(
            "unit_id",
            "year",
            "month",
            name="uq_unit_year_month",
        ),
        Index("ix_usage_unit_month", "unit_id", "year", "month"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    unit_id: Mapped[int] = mapped_column(
        ForeignKey("units.id", ondelete="CASCADE"),
    )

    # Period
    year: Mapped[int] = mapped_column(Integer)
    month: Mapped[int] = mapped_column(Integer)  # 1-12

    kwh: Mapped[Decimal] = mapped_column(ExactDecimal)

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
    unit: Mapped["Unit"] = relationship(back_populates="usage_records")
