"""Bulk CSV import into the ledger and CSV export out of it."""

import csv
import io
import logging
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path

from pydantic import BaseModel, ValidationError

from ..errors import ImportAborted, InvalidArgument, NotFound, StorageFailure
from ..schemas.billing import AlertRecord
from ..schemas.transfer import BuildingRow, ImportSummary, UnitRow, UsageRow
from ..utils.numbers import format_decimal
from .aggregation import AggregationEngine
from .ledger_store import LedgerStore
from .usage_recorder import UsageRecorder

logger = logging.getLogger(__name__)

ALERTS_HEADER = ["UnitId", "Year", "Month", "Kwh", "Threshold"]
BUILDINGS_HEADER = ["BuildingId", "Name", "RatePerKwh"]
UNITS_HEADER = ["UnitId", "BuildingName", "UnitNumber", "ThresholdKwh"]
USAGE_SERIES_HEADER = ["BuildingName", "Year", "Month", "TotalKwh"]


def _data_rows(lines: Iterable[str]) -> Iterator[tuple[int, list[str]]]:
    """Yield (line number, cells) for each non-blank row after the header."""
    reader = csv.reader(lines)
    header_seen = False
    for row in reader:
        if not any(cell.strip() for cell in row):
            continue
        if not header_seen:
            header_seen = True
            continue
        yield reader.line_num, row


def _parse(schema: type[BaseModel], fields: list[str], row: list[str], required: int):
    """Map cells onto a row schema, raising InvalidArgument on bad shape or values."""
    if not required <= len(row) <= len(fields):
        expected = str(required) if required == len(fields) else f"{required}-{len(fields)}"
        raise InvalidArgument(f"expected {expected} columns, got {len(row)}")
    try:
        return schema(**dict(zip(fields, (cell.strip() for cell in row))))
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise InvalidArgument(details) from None


class CsvImporter:
    """
    Applies CSV rows one at a time through the ledger store.

    The first bad row aborts the import with ImportAborted. Rows applied
    before it stay committed.
    """

    def __init__(self, store: LedgerStore):
        self.store = store
        self.recorder = UsageRecorder(store)

    def _run(self, kind: str, lines: Iterable[str], apply: Callable[[list[str]], object]) -> int:
        processed = 0
        for line_number, row in _data_rows(lines):
            try:
                apply(row)
            except (InvalidArgument, NotFound, StorageFailure) as e:
                logger.warning(f"{kind} import stopped at line {line_number}: {e}")
                raise ImportAborted(line_number, processed, e) from e
            processed += 1

        logger.info(f"Imported {processed} {kind} row(s)")
        return processed

    def import_buildings(self, lines: Iterable[str]) -> int:
        """`Name,Rate`"""

        def apply(row: list[str]) -> None:
            parsed = _parse(BuildingRow, ["name", "rate"], row, required=2)
            self.store.upsert_building(parsed.name, parsed.rate)

        return self._run("buildings", lines, apply)

    def import_units(self, lines: Iterable[str]) -> int:
        """`BuildingName,UnitNumber[,Threshold]`"""

        def apply(row: list[str]) -> None:
            parsed = _parse(
                UnitRow, ["building_name", "unit_number", "threshold"], row, required=2
            )
            building = self.store.find_building_by_name(parsed.building_name)
            if not building:
                raise NotFound(f"Building '{parsed.building_name}' not found")
            self.store.upsert_unit(building.id, parsed.unit_number, parsed.threshold)

        return self._run("units", lines, apply)

    def import_usage(self, lines: Iterable[str]) -> int:
        """`UnitId,Year,Month,Kwh`"""

        def apply(row: list[str]) -> None:
            parsed = _parse(UsageRow, ["unit_id", "year", "month", "kwh"], row, required=4)
            self.recorder.record(parsed.unit_id, parsed.year, parsed.month, parsed.kwh)

        return self._run("usage", lines, apply)

    def load_directory(self, directory: Path) -> ImportSummary:
        """Import Buildings.csv, Units.csv and Usage.csv from a directory, skipping missing files."""
        importers = {
            "buildings": ("Buildings.csv", self.import_buildings),
            "units": ("Units.csv", self.import_units),
            "usage": ("Usage.csv", self.import_usage),
        }
        counts = {}
        for kind, (filename, importer) in importers.items():
            path = Path(directory) / filename
            if not path.exists():
                logger.info(f"Skipping {kind} import, {path} does not exist")
                continue
            with path.open(encoding="utf-8-sig", newline="") as f:
                counts[kind] = importer(f)

        return ImportSummary(**counts)


def _write_csv(header: list[str], rows: Iterable[list[object]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue()


class CsvExporter:
    """Renders ledger data as machine re-parseable CSV text."""

    def __init__(self, store: LedgerStore):
        self.store = store

    def export_alerts(self, alerts: Iterable[AlertRecord]) -> str:
        return _write_csv(
            ALERTS_HEADER,
            (
                [a.unit_id, a.year, a.month, format_decimal(a.kwh), format_decimal(a.threshold)]
                for a in alerts
            ),
        )

    def export_buildings(self) -> str:
        return _write_csv(
            BUILDINGS_HEADER,
            (
                [b.id, b.name, format_decimal(b.energy_rate_per_kwh)]
                for b in self.store.list_buildings()
            ),
        )

    def export_units(self) -> str:
        """Units by building name then unit number. A missing threshold is written as 0."""
        return _write_csv(
            UNITS_HEADER,
            (
                [
                    u.id,
                    u.building.name,
                    u.unit_number,
                    format_decimal(u.monthly_usage_threshold_kwh),
                ]
                for u in self.store.list_all_units()
            ),
        )

    def export_usage_for_charting(self) -> str:
        points = AggregationEngine(self.store).usage_series()
        return _write_csv(
            USAGE_SERIES_HEADER,
            ([p.building_name, p.year, p.month, format_decimal(p.total_kwh)] for p in points),
        )
