"""CSV import and export endpoints."""

import io
from enum import Enum

from fastapi import APIRouter, Depends, File, Query, Response, UploadFile

from ..models import User
from ..schemas.transfer import ImportResult
from ..services.alerts import AlertEvaluator
from ..services.csv_transfer import CsvExporter, CsvImporter
from ..services.ledger_store import LedgerStore
from .deps import get_current_user, get_store, require_admin

router = APIRouter(
    prefix="/transfer",
    tags=["transfer"],
    dependencies=[Depends(get_current_user)],
)


class ImportKind(str, Enum):
    """Which CSV layout an upload uses."""

    BUILDINGS = "buildings"
    UNITS = "units"
    USAGE = "usage"


def _csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import/{kind}", response_model=ImportResult)
def import_csv(
    kind: ImportKind,
    file: UploadFile = File(...),
    store: LedgerStore = Depends(get_store),
    _: User = Depends(require_admin),
) -> ImportResult:
    """
    Import an uploaded CSV.

    Stops at the first bad row; rows before it stay applied.
    """
    lines = io.StringIO(file.file.read().decode("utf-8-sig"), newline="")
    importer = CsvImporter(store)

    match kind:
        case ImportKind.BUILDINGS:
            processed = importer.import_buildings(lines)
        case ImportKind.UNITS:
            processed = importer.import_units(lines)
        case ImportKind.USAGE:
            processed = importer.import_usage(lines)

    return ImportResult(kind=kind.value, processed=processed)


@router.get("/export/alerts.csv")
def export_alerts(
    year: int,
    month: int = Query(..., ge=1, le=12),
    store: LedgerStore = Depends(get_store),
) -> Response:
    alerts = AlertEvaluator(store).check_all_buildings(year, month)
    return _csv_response(
        CsvExporter(store).export_alerts(alerts),
        f"alerts_{year}_{month:02d}.csv",
    )


@router.get("/export/buildings.csv")
def export_buildings(
    store: LedgerStore = Depends(get_store),
    _: User = Depends(require_admin),
) -> Response:
    return _csv_response(CsvExporter(store).export_buildings(), "buildings_export.csv")


@router.get("/export/units.csv")
def export_units(
    store: LedgerStore = Depends(get_store),
    _: User = Depends(require_admin),
) -> Response:
    return _csv_response(CsvExporter(store).export_units(), "units_export.csv")


@router.get("/export/usage.csv")
def export_usage(store: LedgerStore = Depends(get_store)) -> Response:
    """Usage over time per building, for charting."""
    return _csv_response(CsvExporter(store).export_usage_for_charting(), "usage_for_charts.csv")
