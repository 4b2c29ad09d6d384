"""Use case resolving exchange rates between currency mnemonics."""

from collections.abc import Iterable
from datetime import datetime

from src.application.ports.prices import PriceRepositoryPort
from src.domain.models.ledger import Commodity
from src.domain.models.rates import ConversionResult, ExchangeRate
from src.domain.services.fx import CurrencyResolver
from src.domain.services.normalization import normalize_mnemonic
from src.infrastructure.logging.logger import get_app_logger


class GetExchangeRateUseCase:
    """Resolve rates by mnemonic through the currency resolver."""

    def __init__(
        self,
        prices: PriceRepositoryPort,
        hub_mnemonics: Iterable[str] | None = None,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            prices: Port providing commodity and price lookups.
            hub_mnemonics: Optional hub currencies tried for triangulation.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._prices = prices
        self._resolver = CurrencyResolver(prices, hub_mnemonics)
        self._logger = logger or get_app_logger()

    def execute(
        self,
        from_currency: str,
        to_currency: str,
        as_of: datetime | None = None,
    ) -> ExchangeRate | None:
        """Return the rate between two currencies, or None when unknown.

        Raises:
            RuntimeError: If either mnemonic is not a stored currency.
        """
        source = self._currency(from_currency)
        target = self._currency(to_currency)
        rate = self._resolver.find_rate(source.guid, target.guid, as_of)
        if rate is None:
            self._logger.warning(
                f"No exchange rate from {source.mnemonic} to {target.mnemonic}"
            )
        else:
            self._logger.info(
                f"Rate {source.mnemonic}->{target.mnemonic}={rate.rate} "
                f"({rate.source}, {rate.date:%Y-%m-%d})"
            )
        return rate

    def convert(
        self,
        amount,
        from_currency: str,
        to_currency: str,
        as_of: datetime | None = None,
    ) -> ConversionResult | None:
        source = self._currency(from_currency)
        target = self._currency(to_currency)
        return self._resolver.convert(amount, source.guid, target.guid, as_of)

    def all_rates(
        self,
        base_currency: str,
        as_of: datetime | None = None,
    ) -> dict[str, ExchangeRate | None]:
        """Return the rate of every currency into ``base_currency``."""
        base = self._currency(base_currency)
        rates = self._resolver.get_all_rates(base.guid, as_of)
        missing = [mnemonic for mnemonic, rate in rates.items() if rate is None]
        if missing:
            self._logger.warning(
                f"No rate into {base.mnemonic} for: {', '.join(missing)}"
            )
        return rates

    def _currency(self, mnemonic: str) -> Commodity:
        cleaned = normalize_mnemonic(mnemonic) or ""
        commodity = self._prices.fetch_currency_by_mnemonic(cleaned)
        if commodity is None:
            raise RuntimeError(f"Missing currency in commodities: {mnemonic}")
        return commodity


__all__ = ["GetExchangeRateUseCase"]
