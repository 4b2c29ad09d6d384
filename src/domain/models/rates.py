"""Domain models for exchange-rate resolution."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class ExchangeRate:
    """Rate converting one unit of ``from_currency`` into ``to_currency``.

    Attributes:
        from_currency: Source commodity mnemonic.
        to_currency: Target commodity mnemonic.
        rate: Multiplier applied to source amounts.
        date: Date of the price the rate was derived from.
        source: How the rate was found (``direct``,
            ``inverse:<tag>``, ``triangulated:<hub>`` or ``same-currency``).
    """

    from_currency: str
    to_currency: str
    rate: Decimal
    date: datetime
    source: str | None


@dataclass(frozen=True)
class ConversionResult:
    """Converted amount together with the rate used."""

    amount: Decimal
    rate: ExchangeRate


__all__ = ["ExchangeRate", "ConversionResult"]
