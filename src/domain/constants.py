"""Domain constants for the GnuCash ledger core."""

from datetime import datetime, timezone
from decimal import Decimal

ACCOUNT_TYPES = (
    "ROOT",
    "ASSET",
    "BANK",
    "CASH",
    "CREDIT",
    "LIABILITY",
    "EQUITY",
    "INCOME",
    "EXPENSE",
    "STOCK",
    "MUTUAL",
    "RECEIVABLE",
    "PAYABLE",
    "TRADING",
)

ROOT_ACCOUNT_TYPE = "ROOT"
ROOT_ACCOUNT_NAME = "Root Account"

# Imported accounts with a type outside ACCOUNT_TYPES fall back to this.
FALLBACK_ACCOUNT_TYPE = "ASSET"

RECONCILE_STATES = ("n", "c", "y")
DEFAULT_RECONCILE_STATE = "n"

CURRENCY_NAMESPACE = "CURRENCY"
DEFAULT_COMMODITY_FRACTION = 100

# Hub currencies tried, in order, when no direct or inverse price exists.
DEFAULT_HUB_CURRENCIES = ("USD", "EUR")

SAME_CURRENCY_SOURCE = "same-currency"
DIRECT_SOURCE = "direct"
INVERSE_SOURCE_PREFIX = "inverse"
TRIANGULATED_SOURCE_PREFIX = "triangulated"

# Absolute tolerance on the split sum, shared by every currency.
BALANCE_TOLERANCE = Decimal("0.001")

FALLBACK_CURRENCY_MNEMONIC = "USD"
FALLBACK_CURRENCY_FULLNAME = "US Dollar"
FALLBACK_CURRENCY_QUOTE_SOURCE = "currency"

DEFAULT_EARLIEST_DATE = datetime(2000, 1, 1, tzinfo=timezone.utc)
DEFAULT_BOOK_CACHE_TTL_SECONDS = 60.0


__all__ = [
    "ACCOUNT_TYPES",
    "ROOT_ACCOUNT_TYPE",
    "ROOT_ACCOUNT_NAME",
    "FALLBACK_ACCOUNT_TYPE",
    "RECONCILE_STATES",
    "DEFAULT_RECONCILE_STATE",
    "CURRENCY_NAMESPACE",
    "DEFAULT_COMMODITY_FRACTION",
    "DEFAULT_HUB_CURRENCIES",
    "SAME_CURRENCY_SOURCE",
    "DIRECT_SOURCE",
    "INVERSE_SOURCE_PREFIX",
    "TRIANGULATED_SOURCE_PREFIX",
    "BALANCE_TOLERANCE",
    "FALLBACK_CURRENCY_MNEMONIC",
    "FALLBACK_CURRENCY_FULLNAME",
    "FALLBACK_CURRENCY_QUOTE_SOURCE",
    "DEFAULT_EARLIEST_DATE",
    "DEFAULT_BOOK_CACHE_TTL_SECONDS",
]
