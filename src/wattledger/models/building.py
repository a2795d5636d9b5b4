"""Building model."""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base
from .types import ExactDecimal

if TYPE_CHECKING:
    from .unit import Unit


class Building(Base):
    """A billed building with a flat energy rate."""

    __tablename__ = "buildings"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, index=True)

    # Currency per kWh
    energy_rate_per_kwh: Mapped[Decimal] = mapped_column(ExactDecimal)

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
    units: Mapped[list["Unit"]] = relationship(
        back_populates="building",
        cascade="all, delete-orphan",
        order_by="Unit.unit_number",
    )
