"""Shared value parsing utilities for provider clients.

Upstream payloads carry prices as JSON numbers or numeric strings, and
sometimes as null, "NaN", or garbage. These helpers turn them into
``Decimal`` or ``None`` without raising.
"""

from decimal import Decimal

from utils.money import to_decimal


def parse_price(value) -> Decimal | None:
    """Parse a finite price from a JSON number or numeric string.

    Returns:
        The value as a Decimal, or None if it is missing, boolean,
        non-numeric, NaN, or infinite.
    """
    return to_decimal(value)


def first_price(row: dict, fields: tuple[str, ...]) -> Decimal | None:
    """Return the first finite price found among ``fields`` of ``row``.

    Args:
        row: A provider payload row.
        fields: Field names in order of preference.

    Returns:
        The first parseable price, or None if no field yields one.
    """
    for name in fields:
        price = parse_price(row.get(name))
        if price is not None:
            return price
    return None
