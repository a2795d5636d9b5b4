"""Business logic services."""

from .aggregation import AggregationEngine
from .alerts import AlertEvaluator, is_over_threshold
from .auth import authenticate, ensure_user, hash_password, verify_password
from .billing import BillingCalculator, compute_cost
from .csv_transfer import CsvExporter, CsvImporter
from .ledger_store import LedgerStore, validate_usage
from .reports import ReportService
from .usage_recorder import UsageRecorder

__all__ = [
    "AggregationEngine",
    "AlertEvaluator",
    "BillingCalculator",
    "CsvExporter",
    "CsvImporter",
    "LedgerStore",
    "ReportService",
    "UsageRecorder",
    "authenticate",
    "compute_cost",
    "ensure_user",
    "hash_password",
    "is_over_threshold",
    "validate_usage",
    "verify_password",
]
