"""Domain models for the double-entry ledger entities."""

from dataclasses import dataclass, field
from datetime import datetime

from src.domain.constants import (
    CURRENCY_NAMESPACE,
    DEFAULT_COMMODITY_FRACTION,
    DEFAULT_RECONCILE_STATE,
    ROOT_ACCOUNT_TYPE,
)
from src.domain.models.numeric import GncNumeric


@dataclass(frozen=True)
class Commodity:
    """Currency or tradeable security identified by namespace and mnemonic.

    Attributes:
        guid: Record identifier.
        namespace: ``CURRENCY`` for money, an exchange name otherwise.
        mnemonic: Ticker or ISO code (e.g., USD, AAPL).
        fullname: Optional display name.
        cusip: Optional exchange code.
        fraction: Smallest-unit multiplier (100 for cents).
        quote_flag: 1 when quotes should be fetched.
        quote_source: Optional quote source name.
        quote_tz: Optional quote timezone.
    """

    guid: str
    namespace: str
    mnemonic: str
    fullname: str | None = None
    cusip: str | None = None
    fraction: int = DEFAULT_COMMODITY_FRACTION
    quote_flag: int = 0
    quote_source: str | None = None
    quote_tz: str | None = None

    def __post_init__(self) -> None:
        if self.fraction <= 0:
            raise ValueError(
                f"Commodity {self.namespace}:{self.mnemonic} "
                f"has non-positive fraction {self.fraction}"
            )

    @property
    def key(self) -> tuple[str, str]:
        return (self.namespace, self.mnemonic)

    @property
    def is_currency(self) -> bool:
        return self.namespace == CURRENCY_NAMESPACE


@dataclass(frozen=True)
class Account:
    """Node of the account forest."""

    guid: str
    name: str
    account_type: str
    commodity_guid: str | None
    parent_guid: str | None
    commodity_scu: int = DEFAULT_COMMODITY_FRACTION
    non_std_scu: int = 0
    code: str = ""
    description: str | None = None
    hidden: bool = False
    placeholder: bool = False

    @property
    def is_root(self) -> bool:
        return self.account_type == ROOT_ACCOUNT_TYPE


@dataclass(frozen=True)
class Split:
    """One account-side leg of a transaction.

    Attributes:
        value: Amount in the transaction currency.
        quantity: Amount in the account commodity.
    """

    guid: str
    tx_guid: str
    account_guid: str
    value: GncNumeric
    quantity: GncNumeric
    memo: str = ""
    action: str = ""
    reconcile_state: str = DEFAULT_RECONCILE_STATE
    reconcile_date: datetime | None = None
    lot_guid: str | None = None


@dataclass(frozen=True)
class Transaction:
    """Balanced set of splits posted on a date."""

    guid: str
    currency_guid: str
    post_date: datetime | None
    enter_date: datetime | None
    description: str
    num: str = ""
    splits: list[Split] = field(default_factory=list)


@dataclass(frozen=True)
class Price:
    """Observed exchange point of a commodity in a currency."""

    guid: str
    commodity_guid: str
    currency_guid: str
    date: datetime
    value: GncNumeric
    source: str | None = None
    type: str | None = None


@dataclass(frozen=True)
class BudgetAmount:
    """Budgeted amount for one account and period."""

    budget_guid: str
    account_guid: str
    period_num: int
    amount: GncNumeric


@dataclass(frozen=True)
class Budget:
    """Named budget with a fixed number of periods."""

    guid: str
    name: str
    num_periods: int
    description: str | None = None
    amounts: list[BudgetAmount] = field(default_factory=list)


@dataclass(frozen=True)
class Book:
    """Ledger identified by its single root account."""

    guid: str
    root_account_guid: str
    root_template_guid: str | None = None


@dataclass(frozen=True)
class BookSnapshot:
    """Every entity belonging to one book, as read for export."""

    book: Book
    commodities: list[Commodity]
    accounts: list[Account]
    transactions: list[Transaction]
    prices: list[Price]
    budgets: list[Budget]


__all__ = [
    "Commodity",
    "Account",
    "Split",
    "Transaction",
    "Price",
    "BudgetAmount",
    "Budget",
    "Book",
    "BookSnapshot",
]
