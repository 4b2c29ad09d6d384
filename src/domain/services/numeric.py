"""Fraction/decimal conversion helpers for display and data-entry paths."""

from decimal import Decimal

from src.domain.models.numeric import GncNumeric


def to_decimal(num, denom) -> str:
    """Render ``num/denom`` as an exact decimal string.

    A zero denominator yields ``"0"`` instead of raising, so display paths
    never fail on a corrupt row.

    Args:
        num: Integer numerator (int, str or integral Decimal).
        denom: Integer denominator.

    Returns:
        str: Decimal string such as ``"1.50"`` or ``"-0.3333"``.
    """
    denom_value = int(denom)
    if denom_value == 0:
        return "0"
    return GncNumeric(int(num), denom_value).to_decimal_string()


def from_decimal(amount, denom: int = 100) -> tuple[int, int]:
    """Convert a decimal amount into a ``(num, denom)`` pair.

    Args:
        amount: Decimal, int, str or float amount.
        denom: Target denominator.

    Returns:
        tuple[int, int]: Numerator rounded half away from zero and the
        denominator.
    """
    return GncNumeric.from_decimal(amount, denom).as_tuple()


def parse_fraction(text: str) -> GncNumeric:
    """Parse a ``"num/denom"`` or bare-integer fraction string."""
    return GncNumeric.parse(text)


def format_fraction(num, denom) -> str:
    return f"{int(num)}/{int(denom)}"


def numeric_to_decimal(num, denom) -> Decimal:
    """Return ``num/denom`` as a Decimal, treating denominator 0 as zero."""
    if int(denom) == 0:
        return Decimal("0")
    return GncNumeric(int(num), int(denom)).to_decimal()


__all__ = [
    "to_decimal",
    "from_decimal",
    "parse_fraction",
    "format_fraction",
    "numeric_to_decimal",
]
