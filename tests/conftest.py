"""Pytest configuration and fixtures."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from wattledger.database import build_engine, get_session
from wattledger.main import app
from wattledger.models import Base, Role
from wattledger.services.auth import ensure_user
from wattledger.services.ledger_store import LedgerStore

ADMIN = ("admin", "admin-pass")
MANAGER = ("manager", "manager-pass")


@pytest.fixture
def db_engine():
    """Create a test database engine."""
    # Use in-memory SQLite shared across threads for tests
    engine = build_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    yield engine

    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(db_engine, class_=Session)


@pytest.fixture
def db_session(session_factory):
    """Create a test database session."""
    with session_factory() as session:
        yield session


@pytest.fixture
def store(db_session):
    return LedgerStore(db_session)


@pytest.fixture
def oak_hall(store):
    """Oak Hall at 0.15/kWh: unit 101 (threshold 400, 500 kWh in 2025-10), unit 102 (threshold 400, no usage)."""
    building_id = store.upsert_building("Oak Hall", Decimal("0.15"))
    unit_101 = store.upsert_unit(building_id, "101", Decimal("400"))
    unit_102 = store.upsert_unit(building_id, "102", Decimal("400"))
    store.record_usage(unit_101, 2025, 10, Decimal("500"))
    return {"building": building_id, "101": unit_101, "102": unit_102}


@pytest.fixture
def client(session_factory):
    """API client with the session dependency pointed at the test database."""
    with session_factory() as session:
        ensure_user(session, *ADMIN, Role.ADMIN)
        ensure_user(session, *MANAGER, Role.MANAGER)

    def override_get_session():
        with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin():
    """HTTP Basic credentials of the seeded admin."""
    return ADMIN


@pytest.fixture
def manager():
    """HTTP Basic credentials of the seeded manager."""
    return MANAGER
