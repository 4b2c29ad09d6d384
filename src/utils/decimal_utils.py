"""Helpers for Decimal normalization of adapter amounts."""

from decimal import Decimal


def coerce_decimal(value) -> Decimal:
    """Normalize numeric values to Decimal.

    piecash returns Decimal amounts; other sources may hand over ints or
    floats. Floats go through ``str`` to keep their printed digits.

    Args:
        value: Raw numeric value from an adapter.

    Returns:
        Decimal: Normalized numeric value, zero for NULL.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


__all__ = ["coerce_decimal"]
