"""Utility modules."""

from .logging import setup_logging
from .numbers import format_decimal, parse_decimal, round_money

__all__ = [
    "format_decimal",
    "parse_decimal",
    "round_money",
    "setup_logging",
]
