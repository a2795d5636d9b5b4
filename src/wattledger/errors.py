"""Error kinds raised by the ledger core."""


class LedgerError(Exception):
    """Base class for all ledger failures."""


class InvalidArgument(LedgerError, ValueError):
    """A value failed validation (month out of range, negative kWh, bad number)."""


class NotFound(LedgerError, LookupError):
    """A referenced building or unit does not exist."""


class Conflict(LedgerError):
    """A write collided with existing data in a way an upsert cannot resolve."""


class StorageFailure(LedgerError):
    """The underlying store failed or rejected a write."""


class ImportAborted(LedgerError):
    """A bulk import stopped at a bad row.

    Rows before ``line_number`` stay committed; ``processed`` counts them.
    """

    def __init__(self, line_number: int, processed: int, reason: LedgerError):
        self.line_number = line_number
        self.processed = processed
        self.reason = reason
        super().__init__(
            f"Import failed at line {line_number} after {processed} row(s): {reason}"
        )
