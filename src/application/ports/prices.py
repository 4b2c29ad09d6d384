"""Port for price and commodity lookups used by rate resolution."""

from datetime import datetime
from typing import Protocol

from src.domain.models.ledger import Commodity, Price


class PriceRepositoryPort(Protocol):
    """Port exposing read access to commodities and prices."""

    def fetch_latest_price(
        self,
        commodity_guid: str,
        currency_guid: str,
        as_of: datetime,
    ) -> Price | None:
        """Return the most recent price dated on or before ``as_of``."""

    def fetch_commodity(self, guid: str) -> Commodity | None:
        """Return a commodity by GUID."""

    def fetch_currency_by_mnemonic(self, mnemonic: str) -> Commodity | None:
        """Return the CURRENCY commodity with the given mnemonic."""

    def fetch_currencies(self) -> list[Commodity]:
        """Return every CURRENCY commodity."""


__all__ = ["PriceRepositoryPort"]
