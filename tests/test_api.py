"""Tests for the HTTP API."""

import pytest
from sqlalchemy import text

from wattledger.services.auth import hash_password, verify_password

BUILDINGS_CSV = b"Name,Rate\nOak Hall,0.15\n"
UNITS_CSV = b"BuildingName,UnitNumber,Threshold\nOak Hall,101,400\nOak Hall,102,400\n"


@pytest.fixture
def seeded(client, admin):
    """Oak Hall loaded through the import endpoints, with 500 kWh on unit 101 in 2025-10."""
    client.post(
        "/transfer/import/buildings",
        files={"file": ("Buildings.csv", BUILDINGS_CSV, "text/csv")},
        auth=admin,
    )
    client.post(
        "/transfer/import/units",
        files={"file": ("Units.csv", UNITS_CSV, "text/csv")},
        auth=admin,
    )
    building = client.get("/buildings", auth=admin).json()[0]
    units = client.get(f"/buildings/{building['id']}/units", auth=admin).json()
    unit_ids = {u["unit_number"]: u["id"] for u in units}
    response = client.put(
        "/usage",
        json={"unit_id": unit_ids["101"], "year": 2025, "month": 10, "kwh": "500"},
        auth=admin,
    )
    assert response.status_code == 204
    return {"building": building["id"], **unit_ids}


def test_password_hashing():
    """Test hashed passwords verify and reject wrong input."""
    hashed = hash_password("secret")

    assert verify_password("secret", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("secret", "not-a-hash")


def test_health(client):
    """Test the health endpoints."""
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/health/ready").json()["status"] == "ready"


def test_requires_credentials(client):
    """Test ledger routes reject anonymous and wrong credentials."""
    assert client.get("/buildings").status_code == 401
    assert client.get("/buildings", auth=("admin", "nope")).status_code == 401


def test_manager_cannot_write(client, manager):
    """Test admin-only routes are forbidden to managers."""
    response = client.put("/buildings", json={"name": "Oak Hall", "rate": "0.15"}, auth=manager)

    assert response.status_code == 403


def test_manager_can_read(client, seeded, manager):
    """Test managers can read reports."""
    response = client.get("/reports/summary", params={"year": 2025, "month": 10}, auth=manager)

    assert response.status_code == 200


def test_building_overview(client, seeded, admin):
    """Test the overview lists unit counts."""
    overview = client.get("/buildings", auth=admin).json()

    assert overview[0]["name"] == "Oak Hall"
    assert overview[0]["unit_count"] == 2


def test_unit_bill(client, seeded, admin):
    """Test the bill endpoint computes cost."""
    response = client.get(
        f"/units/{seeded['101']}/bill", params={"year": 2025, "month": 10}, auth=admin
    )

    assert response.status_code == 200
    assert float(response.json()["cost"]) == 75.0


def test_building_totals(client, seeded, admin):
    """Test totals and average for a building."""
    client.put(
        "/usage",
        json={"unit_id": seeded["102"], "year": 2025, "month": 10, "kwh": "300"},
        auth=admin,
    )

    body = client.get(
        f"/buildings/{seeded['building']}/totals",
        params={"year": 2025, "month": 10},
        auth=admin,
    ).json()

    assert float(body["total_kwh"]) == 800
    assert float(body["total_cost"]) == 120.0
    assert float(body["average_unit_kwh"]) == 400.0


def test_building_alerts(client, seeded, admin):
    """Test only unit 101 alerts."""
    alerts = client.get(
        f"/buildings/{seeded['building']}/alerts",
        params={"year": 2025, "month": 10},
        auth=admin,
    ).json()

    assert [a["unit_id"] for a in alerts] == [seeded["101"]]


def test_unit_usage_report(client, seeded, admin):
    """Test the per-unit report flags units over threshold."""
    report = client.get("/reports/units", params={"year": 2025, "month": 10}, auth=admin).json()

    flags = {u["unit_number"]: u["exceeds"] for u in report[0]["units"]}
    assert flags == {"101": True, "102": False}


def test_invalid_month_rejected(client, seeded, admin):
    """Test recording month 13 returns 400."""
    response = client.put(
        "/usage",
        json={"unit_id": seeded["101"], "year": 2025, "month": 13, "kwh": "1"},
        auth=admin,
    )

    assert response.status_code == 400


def test_missing_building_is_404(client, admin):
    """Test a missing building returns 404."""
    assert client.get("/buildings/123", auth=admin).status_code == 404


def test_import_failure_reports_progress(client, seeded, admin):
    """Test a failed import reports the line and rows processed."""
    response = client.post(
        "/transfer/import/units",
        files={"file": ("Units.csv", b"h\nOak Hall,103\nNowhere,1\n", "text/csv")},
        auth=admin,
    )

    assert response.status_code == 404
    assert response.json()["processed"] == 1
    assert response.json()["line"] == 3


def test_simulate_overage(client, seeded, admin):
    """Test the over-usage simulation creates an alert."""
    response = client.post(
        "/usage/simulate-overage", params={"year": 2025, "month": 11}, auth=admin
    )

    assert response.status_code == 200
    alerts = client.get("/reports/alerts", params={"year": 2025, "month": 11}, auth=admin).json()
    assert [a["unit_id"] for a in alerts] == [response.json()["unit_id"]]


def test_export_alerts_csv(client, seeded, manager):
    """Test the alert export download."""
    response = client.get(
        "/transfer/export/alerts.csv", params={"year": 2025, "month": 10}, auth=manager
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "alerts_2025_10.csv" in response.headers["content-disposition"]
    assert response.text == f"UnitId,Year,Month,Kwh,Threshold\n{seeded['101']},2025,10,500,400\n"


def test_export_units_admin_only(client, seeded, admin, manager):
    """Test building and unit exports are admin-only."""
    assert client.get("/transfer/export/units.csv", auth=manager).status_code == 403
    assert client.get("/transfer/export/units.csv", auth=admin).status_code == 200


@pytest.fixture
def usage_table_dropped(seeded, session_factory):
    """Seeded data with the usage table gone, so usage writes fail in the database."""
    with session_factory() as session:
        session.execute(text("DROP TABLE energy_usage"))
        session.commit()
    return seeded


def test_storage_failure_is_503(client, usage_table_dropped, admin):
    """Test a failed database write returns 503."""
    response = client.put(
        "/usage",
        json={"unit_id": usage_table_dropped["102"], "year": 2025, "month": 10, "kwh": "1"},
        auth=admin,
    )

    assert response.status_code == 503


def test_import_storage_failure_reports_line(client, usage_table_dropped, admin):
    """Test a database error during import returns 503 with the failing line."""
    csv_body = f"UnitId,Year,Month,Kwh\n{usage_table_dropped['102']},2025,10,1\n".encode()

    response = client.post(
        "/transfer/import/usage",
        files={"file": ("Usage.csv", csv_body, "text/csv")},
        auth=admin,
    )

    assert response.status_code == 503
    assert response.json()["line"] == 2
    assert response.json()["processed"] == 0
