"""Energy billing ledger for buildings and their units."""

__version__ = "0.1.0"
