"""FastAPI application entrypoint."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .api.router import router
from .config import settings
from .database import init_db, session_factory
from .errors import (
    Conflict,
    ImportAborted,
    InvalidArgument,
    LedgerError,
    NotFound,
    StorageFailure,
)
from .models import Role
from .services.auth import ensure_user
from .services.csv_transfer import CsvImporter
from .services.ledger_store import LedgerStore
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    InvalidArgument: 400,
    NotFound: 404,
    Conflict: 409,
    StorageFailure: 503,
}


def status_for(exc: LedgerError) -> int:
    """HTTP status for a ledger error."""
    if isinstance(exc, ImportAborted):
        return status_for(exc.reason)
    for error_type, status in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status
    return 500


def seed_users() -> None:
    """Make sure the configured admin and manager accounts exist."""
    with session_factory() as session:
        ensure_user(session, settings.admin_username, settings.admin_password, Role.ADMIN)
        ensure_user(session, settings.manager_username, settings.manager_password, Role.MANAGER)


def load_sample_data() -> None:
    """Import the sample CSV directory, if configured. Failures are logged, not fatal."""
    if settings.sample_data_dir is None:
        return

    logger.info(f"Loading sample data from: {settings.sample_data_dir}")
    with session_factory() as session:
        try:
            summary = CsvImporter(LedgerStore(session)).load_directory(settings.sample_data_dir)
        except LedgerError as e:
            logger.warning(f"Could not import sample data automatically: {e}")
            return

    logger.info(
        f"Imported {summary.buildings} building(s), {summary.units} unit(s), "
        f"{summary.usage} usage record(s)"
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging()
    init_db()
    seed_users()
    load_sample_data()
    yield


app = FastAPI(
    title="WattLedger",
    description="Energy billing ledger for buildings and their units",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    """Turn core errors into JSON responses."""
    content = {"detail": str(exc)}
    if isinstance(exc, ImportAborted):
        content.update(line=exc.line_number, processed=exc.processed)
    return JSONResponse(status_code=status_for(exc), content=content)


# Include routes
app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "wattledger.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
    )
