"""Schemas for CSV import rows and import results."""

from decimal import Decimal

from pydantic import BaseModel, field_validator

from ..utils.numbers import parse_decimal


class _Row(BaseModel):
    model_config = {"str_strip_whitespace": True}


class BuildingRow(_Row):
    """`Name,Rate`"""

    name: str
    rate: Decimal

    @field_validator("rate", mode="before")
    @classmethod
    def _parse_rate(cls, value: str) -> Decimal:
        return parse_decimal(value, "Rate")


class UnitRow(_Row):
    """`BuildingName,UnitNumber,Threshold?`"""

    building_name: str
    unit_number: str
    threshold: Decimal | None = None

    @field_validator("threshold", mode="before")
    @classmethod
    def _parse_threshold(cls, value: str | None) -> Decimal | None:
        if value is None or not str(value).strip():
            return None
        return parse_decimal(value, "Threshold")


class UsageRow(_Row):
    """`UnitId,Year,Month,Kwh`"""

    unit_id: int
    year: int
    month: int
    kwh: Decimal

    @field_validator("kwh", mode="before")
    @classmethod
    def _parse_kwh(cls, value: str) -> Decimal:
        return parse_decimal(value, "Kwh")


class ImportResult(BaseModel):
    """Rows applied by a single import."""

    kind: str
    processed: int


class ImportSummary(BaseModel):
    """Rows applied when loading a data directory."""

    buildings: int = 0
    units: int = 0
    usage: int = 0
