"""Application configuration using Pydantic settings."""

from decimal import Decimal
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database - SQLAlchemy (sqlite or postgresql+psycopg)
    database_url: str = Field(
        "sqlite:///energy.db",
        description="SQLAlchemy connection string",
    )
    create_schema_on_startup: bool = Field(
        True,
        description="Create missing tables on startup; turn off when migrating with Alembic",
    )

    # Seeded accounts
    admin_username: str = Field("Administrator")
    admin_password: str = Field(
        "SuperCoolBuilding123",
        description="Password for the seeded admin account",
    )
    manager_username: str = Field("Manager")
    manager_password: str = Field(
        "ManagerPassword123",
        description="Password for the seeded building manager account",
    )

    # Data exchange
    sample_data_dir: Path | None = Field(
        None,
        description="Directory with Buildings.csv, Units.csv, Usage.csv loaded on startup",
    )

    # Demo over-usage simulation
    overage_margin_kwh: Decimal = Field(
        Decimal("100"),
        description="kWh added on top of a unit's threshold when simulating over-usage",
    )

    # Server
    host: str = Field("0.0.0.0")
    port: int = Field(8000)
    log_level: str = Field("INFO")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
