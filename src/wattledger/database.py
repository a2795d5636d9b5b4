"""Database connection and session management."""

from collections.abc import Generator

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from .config import settings
from .models import Base


def build_engine(url: str, **kwargs) -> Engine:
    """Create an engine, turning on foreign key enforcement for SQLite."""
    engine = create_engine(url, echo=False, **kwargs)

    if engine.dialect.name == "sqlite":

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, _record) -> None:
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


# Create engine
engine = build_engine(settings.database_url, pool_pre_ping=True)

# Session factory
session_factory = sessionmaker(engine, class_=Session)


def get_session() -> Generator[Session, None, None]:
    """Dependency for FastAPI to get a database session."""
    with session_factory() as session:
        try:
            yield session
        finally:
            session.close()


def init_db(bind: Engine | None = None, create_schema: bool | None = None) -> None:
    """Create missing tables, or just verify the connection when Alembic owns the schema."""
    bind = bind or engine
    if create_schema is None:
        create_schema = settings.create_schema_on_startup

    if create_schema:
        Base.metadata.create_all(bind)
        return

    with bind.connect() as conn:
        conn.exec_driver_sql("SELECT 1")
