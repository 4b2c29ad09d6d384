"""Domain package for ledger rules and core models."""

from .constants import ACCOUNT_TYPES, DEFAULT_HUB_CURRENCIES
from .exceptions import (
    AccountDeletionError,
    ImportAbortedError,
    InterchangeFormatError,
    InvalidAccountMoveError,
    LedgerError,
)
from .models import (
    Account,
    AccountBalance,
    Commodity,
    ExchangeRate,
    GncNumeric,
    LineItem,
    Price,
    Split,
    Transaction,
)
from .services import (
    CurrencyResolver,
    build_hierarchy,
    from_decimal,
    to_decimal,
    validate_transaction,
)

__all__ = [
    "ACCOUNT_TYPES",
    "DEFAULT_HUB_CURRENCIES",
    "Account",
    "AccountBalance",
    "AccountDeletionError",
    "Commodity",
    "CurrencyResolver",
    "ExchangeRate",
    "GncNumeric",
    "ImportAbortedError",
    "InterchangeFormatError",
    "InvalidAccountMoveError",
    "LedgerError",
    "LineItem",
    "Price",
    "Split",
    "Transaction",
    "build_hierarchy",
    "from_decimal",
    "to_decimal",
    "validate_transaction",
]
