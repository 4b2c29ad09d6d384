"""Exchange-rate resolution over recorded prices."""

from collections.abc import Iterable
from datetime import datetime, timezone
from decimal import Decimal

from src.domain.constants import (
    DEFAULT_HUB_CURRENCIES,
    DIRECT_SOURCE,
    INVERSE_SOURCE_PREFIX,
    SAME_CURRENCY_SOURCE,
    TRIANGULATED_SOURCE_PREFIX,
)
from src.domain.models.rates import ConversionResult, ExchangeRate


class CurrencyResolver:
    """Find or derive the rate between two commodities.

    Lookup order: same commodity, direct price, inverse price, then one
    hop through each hub currency in turn. Each hub leg must itself be a
    direct or inverse rate, so triangulated rates are never chained.

    The price lookup object must provide ``fetch_latest_price``,
    ``fetch_commodity``, ``fetch_currency_by_mnemonic`` and
    ``fetch_currencies``.
    """

    def __init__(
        self,
        prices,
        hub_mnemonics: Iterable[str] | None = None,
    ) -> None:
        self._prices = prices
        self._hubs = tuple(hub_mnemonics or DEFAULT_HUB_CURRENCIES)

    def find_rate(
        self,
        from_guid: str,
        to_guid: str,
        as_of: datetime | None = None,
    ) -> ExchangeRate | None:
        """Return the rate converting ``from_guid`` into ``to_guid``.

        Args:
            from_guid: Source commodity GUID.
            to_guid: Target commodity GUID.
            as_of: Latest acceptable price date; defaults to now.

        Returns:
            ExchangeRate | None: Rate found, or None when no price path
            exists.
        """
        as_of = as_of or datetime.now(timezone.utc)
        if from_guid == to_guid:
            return self._same_currency(from_guid, as_of)

        rate = self._find_recorded_rate(from_guid, to_guid, as_of)
        if rate is not None:
            return rate

        for mnemonic in self._hubs:
            hub = self._prices.fetch_currency_by_mnemonic(mnemonic)
            if hub is None or hub.guid in (from_guid, to_guid):
                continue
            first = self._find_recorded_rate(from_guid, hub.guid, as_of)
            if first is None or _is_triangulated(first):
                continue
            second = self._find_recorded_rate(hub.guid, to_guid, as_of)
            if second is None or _is_triangulated(second):
                continue
            return ExchangeRate(
                from_currency=first.from_currency,
                to_currency=second.to_currency,
                rate=first.rate * second.rate,
                date=min(first.date, second.date),
                source=f"{TRIANGULATED_SOURCE_PREFIX}:{hub.mnemonic}",
            )
        return None

    def convert(
        self,
        amount: Decimal,
        from_guid: str,
        to_guid: str,
        as_of: datetime | None = None,
    ) -> ConversionResult | None:
        """Convert an amount, or return None when no rate exists."""
        rate = self.find_rate(from_guid, to_guid, as_of)
        if rate is None:
            return None
        if from_guid == to_guid:
            return ConversionResult(amount=amount, rate=rate)
        return ConversionResult(amount=amount * rate.rate, rate=rate)

    def get_all_rates(
        self,
        base_guid: str,
        as_of: datetime | None = None,
    ) -> dict[str, ExchangeRate | None]:
        """Resolve every other currency against ``base_guid``.

        Args:
            base_guid: GUID of the reporting currency.
            as_of: Optional price date bound.

        Returns:
            dict[str, ExchangeRate | None]: Rate per currency mnemonic, in
            mnemonic order; None marks a currency without any rate.
        """
        currencies = sorted(
            self._prices.fetch_currencies(),
            key=lambda commodity: commodity.mnemonic,
        )
        return {
            currency.mnemonic: self.find_rate(currency.guid, base_guid, as_of)
            for currency in currencies
            if currency.guid != base_guid
        }

    def _same_currency(self, guid: str, as_of: datetime) -> ExchangeRate:
        commodity = self._prices.fetch_commodity(guid)
        mnemonic = commodity.mnemonic if commodity else ""
        return ExchangeRate(
            from_currency=mnemonic,
            to_currency=mnemonic,
            rate=Decimal("1"),
            date=as_of,
            source=SAME_CURRENCY_SOURCE,
        )

    def _find_recorded_rate(
        self,
        from_guid: str,
        to_guid: str,
        as_of: datetime,
    ) -> ExchangeRate | None:
        direct = self._prices.fetch_latest_price(from_guid, to_guid, as_of)
        if direct is not None:
            return ExchangeRate(
                from_currency=self._mnemonic(from_guid),
                to_currency=self._mnemonic(to_guid),
                rate=direct.value.to_decimal(),
                date=direct.date,
                source=DIRECT_SOURCE,
            )

        inverse = self._prices.fetch_latest_price(to_guid, from_guid, as_of)
        if inverse is not None:
            value = inverse.value.to_decimal()
            return ExchangeRate(
                from_currency=self._mnemonic(from_guid),
                to_currency=self._mnemonic(to_guid),
                rate=Decimal("1") / value if value != 0 else Decimal("0"),
                date=inverse.date,
                source=f"{INVERSE_SOURCE_PREFIX}:{inverse.source}",
            )
        return None

    def _mnemonic(self, guid: str) -> str:
        commodity = self._prices.fetch_commodity(guid)
        return commodity.mnemonic if commodity else ""


def _is_triangulated(rate: ExchangeRate) -> bool:
    return (rate.source or "").startswith(TRIANGULATED_SOURCE_PREFIX)


__all__ = ["CurrencyResolver"]
