"""Typed records of the GnuCash XML interchange document.

Values stay in their wire form here: fractions are ``"num/denom"`` strings
and timestamps are the raw ``ts:date`` text. Conversion to ledger entities
happens in the import planner.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CommodityRef:
    """Reference to a commodity by (namespace, mnemonic)."""

    namespace: str
    mnemonic: str

    @property
    def key(self) -> tuple[str, str]:
        return (self.namespace, self.mnemonic)


@dataclass(frozen=True)
class InterchangeCommodity:
    namespace: str
    mnemonic: str
    fullname: str | None = None
    xcode: str | None = None
    fraction: int = 100
    quote_flag: int | None = None
    quote_source: str | None = None
    quote_tz: str | None = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.namespace, self.mnemonic)


@dataclass(frozen=True)
class InterchangePrice:
    guid: str
    commodity: CommodityRef
    currency: CommodityRef
    date: str
    source: str
    value: str
    type: str | None = None


@dataclass(frozen=True)
class InterchangeAccount:
    name: str
    guid: str
    account_type: str
    commodity: CommodityRef | None = None
    commodity_scu: int | None = None
    description: str | None = None
    parent_guid: str | None = None


@dataclass(frozen=True)
class InterchangeSplit:
    guid: str
    reconciled_state: str
    value: str
    quantity: str
    account_guid: str
    reconcile_date: str | None = None
    memo: str | None = None
    action: str | None = None
    lot_guid: str | None = None


@dataclass(frozen=True)
class InterchangeTransaction:
    guid: str
    currency: CommodityRef
    date_posted: str
    date_entered: str
    description: str
    num: str | None = None
    splits: list[InterchangeSplit] = field(default_factory=list)


@dataclass(frozen=True)
class InterchangeBudgetAmount:
    account_guid: str
    period_num: int
    amount: str


@dataclass(frozen=True)
class InterchangeBudget:
    guid: str
    name: str
    num_periods: int
    description: str | None = None
    amounts: list[InterchangeBudgetAmount] = field(default_factory=list)


@dataclass(frozen=True)
class InterchangeDocument:
    """Whole book as carried by one interchange file."""

    book_guid: str
    book_id_type: str = "guid"
    commodities: list[InterchangeCommodity] = field(default_factory=list)
    prices: list[InterchangePrice] = field(default_factory=list)
    accounts: list[InterchangeAccount] = field(default_factory=list)
    transactions: list[InterchangeTransaction] = field(default_factory=list)
    budgets: list[InterchangeBudget] = field(default_factory=list)
    count_data: dict[str, int] = field(default_factory=dict)


@dataclass
class ImportSummary:
    """Counts and diagnostics collected during an import."""

    commodities: int = 0
    accounts: int = 0
    transactions: int = 0
    splits: int = 0
    prices: int = 0
    budgets: int = 0
    budget_amounts: int = 0
    book_guid: str | None = None
    root_account_guid: str | None = None
    skipped: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


__all__ = [
    "CommodityRef",
    "InterchangeCommodity",
    "InterchangePrice",
    "InterchangeAccount",
    "InterchangeSplit",
    "InterchangeTransaction",
    "InterchangeBudgetAmount",
    "InterchangeBudget",
    "InterchangeDocument",
    "ImportSummary",
]
