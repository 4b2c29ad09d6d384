"""Domain models package."""

from .accounts import AccountBalance, LineItem
from .interchange import (
    CommodityRef,
    ImportSummary,
    InterchangeAccount,
    InterchangeBudget,
    InterchangeBudgetAmount,
    InterchangeCommodity,
    InterchangeDocument,
    InterchangePrice,
    InterchangeSplit,
    InterchangeTransaction,
)
from .ledger import (
    Account,
    Book,
    BookSnapshot,
    Budget,
    BudgetAmount,
    Commodity,
    Price,
    Split,
    Transaction,
)
from .numeric import GncNumeric, sum_numerics
from .rates import ConversionResult, ExchangeRate
from .validation import (
    SplitInput,
    TransactionInput,
    ValidationError,
    ValidationResult,
)

__all__ = [
    "Account",
    "AccountBalance",
    "Book",
    "BookSnapshot",
    "Budget",
    "BudgetAmount",
    "Commodity",
    "CommodityRef",
    "ConversionResult",
    "ExchangeRate",
    "GncNumeric",
    "ImportSummary",
    "InterchangeAccount",
    "InterchangeBudget",
    "InterchangeBudgetAmount",
    "InterchangeCommodity",
    "InterchangeDocument",
    "InterchangePrice",
    "InterchangeSplit",
    "InterchangeTransaction",
    "LineItem",
    "Price",
    "Split",
    "SplitInput",
    "Transaction",
    "TransactionInput",
    "ValidationError",
    "ValidationResult",
    "sum_numerics",
]
