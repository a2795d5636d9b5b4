"""Decimal parsing, rounding and formatting shared by billing and CSV transfer."""

from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation

from ..errors import InvalidArgument

CENTS = Decimal("0.01")
ZERO = Decimal("0")


def round_money(value: Decimal) -> Decimal:
    """Round to 2 places with banker's rounding (half to even)."""
    return value.quantize(CENTS, rounding=ROUND_HALF_EVEN)


def parse_decimal(value: Decimal | int | str, field: str = "value") -> Decimal:
    """
    Parse a locale-invariant decimal.

    Accepts Decimal, int, or text like "0.15". Floats, booleans and
    non-finite values are rejected.
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise InvalidArgument(f"{field} must be a decimal, got {type(value).__name__}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    else:
        text = str(value).strip()
        try:
            result = Decimal(text)
        except InvalidOperation:
            raise InvalidArgument(f"{field} is not a number: {value!r}") from None

    if not result.is_finite():
        raise InvalidArgument(f"{field} must be finite, got {value!r}")
    return result


def format_decimal(value: Decimal | None) -> str:
    """Plain decimal text: no exponent, no trailing zeros, no separators."""
    if value is None:
        value = ZERO
    normalized = value.normalize()
    if normalized == 0:
        return "0"
    return f"{normalized:f}"
