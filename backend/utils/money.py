"""Decimal helpers for monetary accumulation and response rounding."""

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_decimal(value) -> Decimal | None:
    """Convert a stored or upstream number to a finite Decimal.

    Returns None for None, booleans, non-numeric strings, NaN, and
    infinities so callers can skip the offending record.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        # str() keeps the shortest repr, e.g. 0.1 -> "0.1"
        return Decimal(str(value))
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            d = Decimal(text)
        except InvalidOperation:
            return None
        return d if d.is_finite() else None
    return None


def round_money(value: Decimal) -> Decimal:
    """Round to cents, half up. Use only at the response boundary."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def money_float(value: Decimal) -> float:
    """Round to cents and convert to a JSON-friendly float."""
    return float(round_money(value))
