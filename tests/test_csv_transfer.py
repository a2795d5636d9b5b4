"""Tests for CSV import and export."""

from decimal import Decimal

import pytest
from sqlalchemy import func, select, text

from wattledger.errors import ImportAborted, InvalidArgument, NotFound, StorageFailure
from wattledger.models import Building, Unit
from wattledger.services.alerts import AlertEvaluator
from wattledger.services.csv_transfer import CsvExporter, CsvImporter

BUILDINGS_CSV = """Name,Rate
Oak Hall,0.15
Elm Court,0.12
"""

UNITS_CSV = """BuildingName,UnitNumber,Threshold
Oak Hall,101,400
Oak Hall,102,
Elm Court,1A
"""


def lines(text: str) -> list[str]:
    return text.splitlines(keepends=True)


def count(store, model) -> int:
    return store.session.scalar(select(func.count(model.id)))


def test_import_buildings(store):
    """Test importing buildings skips the header."""
    processed = CsvImporter(store).import_buildings(lines(BUILDINGS_CSV))

    assert processed == 2
    oak = store.find_building_by_name("Oak Hall")
    assert oak.energy_rate_per_kwh == Decimal("0.15")


def test_import_buildings_twice_is_idempotent(store):
    """Test re-importing buildings updates rates instead of duplicating."""
    importer = CsvImporter(store)
    importer.import_buildings(lines(BUILDINGS_CSV))
    importer.import_buildings(lines("Name,Rate\nOak Hall,0.18\nElm Court,0.12\n"))

    assert count(store, Building) == 2
    assert store.find_building_by_name("Oak Hall").energy_rate_per_kwh == Decimal("0.18")


def test_header_content_is_ignored(store):
    """Test any header row is accepted and skipped."""
    processed = CsvImporter(store).import_buildings(lines("whatever\nOak Hall,0.15\n"))

    assert processed == 1


def test_blank_lines_are_skipped(store):
    """Test blank lines do not count as rows."""
    processed = CsvImporter(store).import_buildings(lines("Name,Rate\n\nOak Hall,0.15\n\n"))

    assert processed == 1


def test_import_units_optional_threshold(store):
    """Test the threshold column may be blank or missing."""
    importer = CsvImporter(store)
    importer.import_buildings(lines(BUILDINGS_CSV))

    assert importer.import_units(lines(UNITS_CSV)) == 3

    oak = store.find_building_by_name("Oak Hall")
    units = {u.unit_number: u for u in store.list_units(oak.id)}
    assert units["101"].monthly_usage_threshold_kwh == Decimal("400")
    assert units["102"].monthly_usage_threshold_kwh is None


def test_import_units_unknown_building(store):
    """Test an unknown building aborts the import after the rows before it."""
    importer = CsvImporter(store)
    importer.import_buildings(lines(BUILDINGS_CSV))
    csv_text = "BuildingName,UnitNumber\nOak Hall,101\nNowhere,1\nOak Hall,102\n"

    with pytest.raises(ImportAborted) as exc_info:
        importer.import_units(lines(csv_text))

    assert exc_info.value.processed == 1
    assert exc_info.value.line_number == 3
    assert isinstance(exc_info.value.reason, NotFound)
    assert "Nowhere" in str(exc_info.value)
    # Earlier rows stay committed; nothing after the failure is applied
    assert count(store, Unit) == 1


def test_import_units_first_row_fails(store):
    """Test a failure on the first row reports zero processed."""
    with pytest.raises(ImportAborted) as exc_info:
        CsvImporter(store).import_units(lines("BuildingName,UnitNumber\nNowhere,1\n"))

    assert exc_info.value.processed == 0
    assert count(store, Unit) == 0


@pytest.mark.parametrize(
    "row",
    [
        "Oak Hall",  # too few columns
        "Oak Hall,0.15,extra",  # too many columns
        "Oak Hall,abc",  # not a number
        "Oak Hall,1,5",  # locale comma splits into an extra column
        "Oak Hall,-0.15",  # negative rate
    ],
)
def test_import_buildings_malformed(store, row):
    """Test malformed building rows abort with InvalidArgument."""
    with pytest.raises(ImportAborted) as exc_info:
        CsvImporter(store).import_buildings(lines(f"Name,Rate\n{row}\n"))

    assert isinstance(exc_info.value.reason, InvalidArgument)
    assert count(store, Building) == 0


def test_import_usage(store):
    """Test usage rows are recorded through the shared validation path."""
    importer = CsvImporter(store)
    importer.import_buildings(lines(BUILDINGS_CSV))
    importer.import_units(lines(UNITS_CSV))
    unit_id = store.list_units(store.find_building_by_name("Oak Hall").id)[0].id

    processed = importer.import_usage(
        lines(f"UnitId,Year,Month,Kwh\n{unit_id},2025,10,500\n{unit_id},2025,11,412.5\n")
    )

    assert processed == 2
    assert store.get_usage_kwh(unit_id, 2025, 11) == Decimal("412.5")


@pytest.mark.parametrize(
    "row,reason",
    [
        ("1,2025,13,10", InvalidArgument),
        ("1,2025,10,-1", InvalidArgument),
        ("x,2025,10,1", InvalidArgument),
        ("99,2025,10,1", NotFound),
    ],
)
def test_import_usage_bad_rows(store, row, reason):
    """Test invalid usage rows abort with the matching error kind."""
    building_id = store.upsert_building("Oak Hall", Decimal("0.15"))
    store.upsert_unit(building_id, "101")

    with pytest.raises(ImportAborted) as exc_info:
        CsvImporter(store).import_usage(lines(f"UnitId,Year,Month,Kwh\n{row}\n"))

    assert isinstance(exc_info.value.reason, reason)


def test_import_usage_storage_failure(store, oak_hall):
    """Test a database error on a row aborts with its line and the rows before it."""
    store.session.execute(text("DROP TABLE energy_usage"))
    store.session.commit()
    unit_id = oak_hall["102"]

    with pytest.raises(ImportAborted) as exc_info:
        CsvImporter(store).import_usage(lines(f"UnitId,Year,Month,Kwh\n{unit_id},2025,10,1\n"))

    assert exc_info.value.line_number == 2
    assert exc_info.value.processed == 0
    assert isinstance(exc_info.value.reason, StorageFailure)


def test_load_directory(store, tmp_path):
    """Test loading a data directory in dependency order."""
    (tmp_path / "Buildings.csv").write_text(BUILDINGS_CSV)
    (tmp_path / "Units.csv").write_text(UNITS_CSV)

    summary = CsvImporter(store).load_directory(tmp_path)

    assert summary.buildings == 2
    assert summary.units == 3
    assert summary.usage == 0


def test_export_alerts(store, oak_hall):
    """Test the alert export header and plain decimal formatting."""
    alerts = AlertEvaluator(store).check_monthly_thresholds(oak_hall["building"], 2025, 10)

    text = CsvExporter(store).export_alerts(alerts)

    assert text == f"UnitId,Year,Month,Kwh,Threshold\n{oak_hall['101']},2025,10,500,400\n"


def test_export_buildings(store, oak_hall):
    """Test the building export."""
    text = CsvExporter(store).export_buildings()

    assert text == f"BuildingId,Name,RatePerKwh\n{oak_hall['building']},Oak Hall,0.15\n"


def test_export_units(store, oak_hall):
    """Test the unit export orders by building then unit number and writes 0 for no threshold."""
    elm = store.upsert_building("Elm Court", Decimal("0.12"))
    elm_unit = store.upsert_unit(elm, "1")

    text = CsvExporter(store).export_units()

    assert text.splitlines() == [
        "UnitId,BuildingName,UnitNumber,ThresholdKwh",
        f"{elm_unit},Elm Court,1,0",
        f"{oak_hall['101']},Oak Hall,101,400",
        f"{oak_hall['102']},Oak Hall,102,400",
    ]


def test_export_usage_for_charting(store, oak_hall):
    """Test the charting export."""
    store.record_usage(oak_hall["102"], 2025, 10, Decimal("300.25"))

    text = CsvExporter(store).export_usage_for_charting()

    assert text == "BuildingName,Year,Month,TotalKwh\nOak Hall,2025,10,800.25\n"


def test_exported_buildings_reimport(store, oak_hall):
    """Test a building export feeds back into the rate column of an import."""
    exported = CsvExporter(store).export_buildings()
    reimport = "Name,Rate\n" + "".join(
        f"{name},{rate}\n" for _, name, rate in (line.split(",") for line in exported.splitlines()[1:])
    )

    assert CsvImporter(store).import_buildings(lines(reimport)) == 1
    assert count(store, Building) == 1
