"""Turn a parsed interchange document into the entities to persist.

Planning is pure: it reads the document and the commodities already known
to the database, and returns every record in insertion order. Writing the
plan happens inside one database transaction in the import use case.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from src.domain.constants import (
    ACCOUNT_TYPES,
    CURRENCY_NAMESPACE,
    DEFAULT_COMMODITY_FRACTION,
    DEFAULT_RECONCILE_STATE,
    FALLBACK_ACCOUNT_TYPE,
    FALLBACK_CURRENCY_FULLNAME,
    FALLBACK_CURRENCY_MNEMONIC,
    FALLBACK_CURRENCY_QUOTE_SOURCE,
    RECONCILE_STATES,
    ROOT_ACCOUNT_NAME,
    ROOT_ACCOUNT_TYPE,
)
from src.domain.exceptions import ImportAbortedError
from src.domain.models.interchange import (
    CommodityRef,
    ImportSummary,
    InterchangeAccount,
    InterchangeDocument,
)
from src.domain.models.ledger import (
    Account,
    Book,
    Budget,
    BudgetAmount,
    Commodity,
    Price,
    Split,
    Transaction,
)
from src.domain.models.numeric import GncNumeric
from src.domain.services.dates import parse_timestamp
from src.domain.services.normalization import generate_guid

# Namespace used for currencies by pre-2.0 GnuCash files.
LEGACY_CURRENCY_NAMESPACE = "ISO4217"


@dataclass
class ImportPlan:
    """Entities to insert, in an order the schema constraints accept."""

    book: Book
    root_account: Account
    root_commodity_guid: str
    commodities: list[Commodity] = field(default_factory=list)
    accounts: list[Account] = field(default_factory=list)
    transactions: list[Transaction] = field(default_factory=list)
    prices: list[Price] = field(default_factory=list)
    budgets: list[Budget] = field(default_factory=list)
    summary: ImportSummary = field(default_factory=ImportSummary)


def canonical_namespace(namespace: str) -> str:
    if namespace == LEGACY_CURRENCY_NAMESPACE:
        return CURRENCY_NAMESPACE
    return namespace


def commodity_key(namespace: str, mnemonic: str) -> str:
    return f"{canonical_namespace(namespace)}:{mnemonic}"


def _ref_key(ref: CommodityRef) -> str:
    return commodity_key(ref.namespace, ref.mnemonic)


def sort_accounts_parent_first(
    accounts: Iterable[InterchangeAccount],
) -> list[InterchangeAccount]:
    """Order accounts so every parent precedes its children.

    Input order is kept wherever the parent constraint allows it.

    Raises:
        ImportAbortedError: If parent references form a cycle.
    """
    rows = list(accounts)
    by_guid = {account.guid: account for account in rows}
    ordered: list[InterchangeAccount] = []
    done: set[str] = set()

    for start in rows:
        if start.guid in done:
            continue
        chain: list[InterchangeAccount] = []
        on_chain: set[str] = set()
        current = start
        while current is not None and current.guid not in done:
            if current.guid in on_chain:
                raise ImportAbortedError(
                    f"Account parent cycle detected at {current.guid}"
                )
            chain.append(current)
            on_chain.add(current.guid)
            current = by_guid.get(current.parent_guid)
        for account in reversed(chain):
            ordered.append(account)
            done.add(account.guid)
    return ordered


def _parse_amount(text: str, what: str) -> GncNumeric:
    try:
        return GncNumeric.parse(text)
    except ValueError as exc:
        raise ImportAbortedError(f"Invalid amount {text!r} in {what}") from exc


class _Planner:
    def __init__(
        self,
        doc: InterchangeDocument,
        existing: Iterable[Commodity],
        guid_factory: Callable[[], str],
        allow_currency_fallback: bool,
    ) -> None:
        self.doc = doc
        self.guid_factory = guid_factory
        self.allow_currency_fallback = allow_currency_fallback
        self.summary = ImportSummary()
        self.commodity_map: dict[str, str] = {}
        self.new_commodities: list[Commodity] = []
        self.account_map: dict[str, str] = {}
        for commodity in existing:
            self.commodity_map[
                commodity_key(commodity.namespace, commodity.mnemonic)
            ] = commodity.guid

    def plan(self) -> ImportPlan:
        self._plan_commodities()
        root_commodity_guid = self._resolve_root_commodity()

        book_guid = self.doc.book_guid or self.guid_factory()
        root = Account(
            guid=self.guid_factory(),
            name=ROOT_ACCOUNT_NAME,
            account_type=ROOT_ACCOUNT_TYPE,
            commodity_guid=root_commodity_guid,
            parent_guid=None,
        )
        self.summary.book_guid = book_guid
        self.summary.root_account_guid = root.guid

        plan = ImportPlan(
            book=Book(
                guid=book_guid,
                root_account_guid=root.guid,
                root_template_guid=root.guid,
            ),
            root_account=root,
            root_commodity_guid=root_commodity_guid,
            commodities=self.new_commodities,
            summary=self.summary,
        )
        plan.accounts = self._plan_accounts(root.guid, root_commodity_guid)
        plan.transactions = self._plan_transactions(root_commodity_guid)
        plan.prices = self._plan_prices()
        plan.budgets = self._plan_budgets()
        return plan

    def _plan_commodities(self) -> None:
        for item in self.doc.commodities:
            key = commodity_key(item.namespace, item.mnemonic)
            if key in self.commodity_map:
                self.summary.skipped.append(f"Commodity {key} already exists")
                continue
            fraction = item.fraction or DEFAULT_COMMODITY_FRACTION
            if fraction <= 0:
                self.summary.warnings.append(
                    f"Commodity {key} has fraction {fraction}; "
                    f"using {DEFAULT_COMMODITY_FRACTION}"
                )
                fraction = DEFAULT_COMMODITY_FRACTION
            commodity = Commodity(
                guid=self.guid_factory(),
                namespace=canonical_namespace(item.namespace),
                mnemonic=item.mnemonic,
                fullname=item.fullname or None,
                cusip=item.xcode or None,
                fraction=fraction,
                quote_flag=item.quote_flag or 0,
                quote_source=item.quote_source or None,
                quote_tz=item.quote_tz or None,
            )
            self.new_commodities.append(commodity)
            self.commodity_map[key] = commodity.guid
            self.summary.commodities += 1

    def _resolve_root_commodity(self) -> str:
        preferred = commodity_key(CURRENCY_NAMESPACE, FALLBACK_CURRENCY_MNEMONIC)
        if preferred in self.commodity_map:
            return self.commodity_map[preferred]
        for key, guid in self.commodity_map.items():
            if key.startswith(f"{CURRENCY_NAMESPACE}:"):
                return guid
        if not self.allow_currency_fallback:
            raise ImportAbortedError(
                "No currency commodity available for the book root"
            )
        fallback = Commodity(
            guid=self.guid_factory(),
            namespace=CURRENCY_NAMESPACE,
            mnemonic=FALLBACK_CURRENCY_MNEMONIC,
            fullname=FALLBACK_CURRENCY_FULLNAME,
            fraction=DEFAULT_COMMODITY_FRACTION,
            quote_flag=1,
            quote_source=FALLBACK_CURRENCY_QUOTE_SOURCE,
        )
        self.new_commodities.append(fallback)
        self.commodity_map[preferred] = fallback.guid
        self.summary.warnings.append(
            f"No currency found; created {FALLBACK_CURRENCY_MNEMONIC} "
            "for the book root"
        )
        return fallback.guid

    def _plan_accounts(
        self,
        root_guid: str,
        root_commodity_guid: str,
    ) -> list[Account]:
        planned: list[Account] = []
        document_guids = {account.guid for account in self.doc.accounts}
        for item in sort_accounts_parent_first(self.doc.accounts):
            if item.account_type == ROOT_ACCOUNT_TYPE:
                self.account_map[item.guid] = root_guid
                self.summary.skipped.append(
                    f'Root account "{item.name}" mapped to new root'
                )
                continue

            if not item.parent_guid:
                parent_guid = root_guid
            elif item.parent_guid in self.account_map:
                parent_guid = self.account_map[item.parent_guid]
            else:
                if item.parent_guid not in document_guids:
                    self.summary.warnings.append(
                        f'Parent {item.parent_guid} of account "{item.name}" '
                        "not found; attached to root"
                    )
                parent_guid = root_guid

            if item.commodity is None:
                commodity_guid = root_commodity_guid
            else:
                key = _ref_key(item.commodity)
                commodity_guid = self.commodity_map.get(key)
                if commodity_guid is None:
                    self.summary.warnings.append(
                        f'Commodity {key} not found for account "{item.name}"'
                    )
                    commodity_guid = root_commodity_guid

            account_type = item.account_type
            if account_type not in ACCOUNT_TYPES:
                self.summary.warnings.append(
                    f'Unknown type "{account_type}" for account '
                    f'"{item.name}"; using {FALLBACK_ACCOUNT_TYPE}'
                )
                account_type = FALLBACK_ACCOUNT_TYPE

            planned.append(
                Account(
                    guid=item.guid,
                    name=item.name,
                    account_type=account_type,
                    commodity_guid=commodity_guid,
                    parent_guid=parent_guid,
                    commodity_scu=item.commodity_scu
                    or DEFAULT_COMMODITY_FRACTION,
                    description=item.description or None,
                )
            )
            self.account_map[item.guid] = item.guid
            self.summary.accounts += 1
        return planned

    def _plan_transactions(self, root_commodity_guid: str) -> list[Transaction]:
        planned: list[Transaction] = []
        for item in self.doc.transactions:
            key = _ref_key(item.currency)
            currency_guid = self.commodity_map.get(key)
            if currency_guid is None:
                self.summary.warnings.append(
                    f"Currency {key} not found for transaction "
                    f'"{item.description}"'
                )
                currency_guid = root_commodity_guid

            post_date = parse_timestamp(item.date_posted)
            if item.date_posted and post_date is None:
                self.summary.warnings.append(
                    f'Invalid post date "{item.date_posted}" '
                    f'for transaction "{item.description}"'
                )
            enter_date = parse_timestamp(item.date_entered)

            splits: list[Split] = []
            for entry in item.splits:
                account_guid = self.account_map.get(entry.account_guid)
                if account_guid is None:
                    raise ImportAbortedError(
                        f"Account {entry.account_guid} not found for split "
                        f'{entry.guid} in transaction "{item.description}"'
                    )
                state = entry.reconciled_state or DEFAULT_RECONCILE_STATE
                if state not in RECONCILE_STATES:
                    self.summary.warnings.append(
                        f"Split {entry.guid} has reconcile state {state!r}; "
                        f"using {DEFAULT_RECONCILE_STATE!r}"
                    )
                    state = DEFAULT_RECONCILE_STATE
                splits.append(
                    Split(
                        guid=entry.guid,
                        tx_guid=item.guid,
                        account_guid=account_guid,
                        value=_parse_amount(entry.value, f"split {entry.guid}"),
                        quantity=_parse_amount(
                            entry.quantity, f"split {entry.guid}"
                        ),
                        memo=entry.memo or "",
                        action=entry.action or "",
                        reconcile_state=state,
                        reconcile_date=parse_timestamp(entry.reconcile_date),
                        lot_guid=entry.lot_guid or None,
                    )
                )

            planned.append(
                Transaction(
                    guid=item.guid,
                    currency_guid=currency_guid,
                    post_date=post_date,
                    enter_date=enter_date,
                    description=item.description or "",
                    num=item.num or "",
                    splits=splits,
                )
            )
            self.summary.transactions += 1
            self.summary.splits += len(splits)
        return planned

    def _plan_prices(self) -> list[Price]:
        planned: list[Price] = []
        for item in self.doc.prices:
            commodity_ref = _ref_key(item.commodity)
            currency_ref = _ref_key(item.currency)
            commodity_guid = self.commodity_map.get(commodity_ref)
            currency_guid = self.commodity_map.get(currency_ref)
            if commodity_guid is None or currency_guid is None:
                self.summary.warnings.append(
                    f"Price skipped: commodity {commodity_ref} or currency "
                    f"{currency_ref} not found"
                )
                continue
            date = parse_timestamp(item.date)
            if date is None:
                self.summary.warnings.append(
                    f'Price skipped: invalid date "{item.date}"'
                )
                continue
            try:
                value = GncNumeric.parse(item.value)
            except ValueError:
                self.summary.warnings.append(
                    f'Price skipped: invalid value "{item.value}"'
                )
                continue
            planned.append(
                Price(
                    guid=item.guid or self.guid_factory(),
                    commodity_guid=commodity_guid,
                    currency_guid=currency_guid,
                    date=date,
                    value=value,
                    source=item.source or None,
                    type=item.type or None,
                )
            )
            self.summary.prices += 1
        return planned

    def _plan_budgets(self) -> list[Budget]:
        planned: list[Budget] = []
        for item in self.doc.budgets:
            amounts: list[BudgetAmount] = []
            for entry in item.amounts:
                account_guid = self.account_map.get(entry.account_guid)
                if account_guid is None:
                    self.summary.warnings.append(
                        f"Budget amount skipped: account {entry.account_guid} "
                        f'not found for budget "{item.name}"'
                    )
                    continue
                if not 0 <= entry.period_num < item.num_periods:
                    self.summary.warnings.append(
                        f"Budget amount skipped: period {entry.period_num} "
                        f'outside budget "{item.name}"'
                    )
                    continue
                try:
                    amount = GncNumeric.parse(entry.amount)
                except ValueError:
                    self.summary.warnings.append(
                        f'Budget amount skipped: invalid value "{entry.amount}"'
                    )
                    continue
                amounts.append(
                    BudgetAmount(
                        budget_guid=item.guid,
                        account_guid=account_guid,
                        period_num=entry.period_num,
                        amount=amount,
                    )
                )
            planned.append(
                Budget(
                    guid=item.guid,
                    name=item.name,
                    num_periods=item.num_periods,
                    description=item.description or None,
                    amounts=amounts,
                )
            )
            self.summary.budgets += 1
            self.summary.budget_amounts += len(amounts)
        return planned


def plan_import(
    doc: InterchangeDocument,
    existing_commodities: Iterable[Commodity] = (),
    guid_factory: Callable[[], str] = generate_guid,
    allow_currency_fallback: bool = True,
) -> ImportPlan:
    """Resolve references in a document and order its records for insertion.

    Document GUIDs for accounts, transactions, splits, prices and budgets
    are kept. ROOT accounts of the document are folded into one new root
    account; parentless accounts become its children.

    Args:
        doc: Parsed interchange document.
        existing_commodities: Commodities already stored in the target.
        guid_factory: Generator for new GUIDs (book, root, commodities).
        allow_currency_fallback: Create USD when no currency is available.

    Returns:
        ImportPlan: Records to insert and the import summary.

    Raises:
        ImportAbortedError: No usable currency, a split pointing at an
            account outside the document, an unreadable split amount or a
            parent cycle among the accounts.
    """
    return _Planner(
        doc,
        existing_commodities,
        guid_factory,
        allow_currency_fallback,
    ).plan()


__all__ = [
    "ImportPlan",
    "LEGACY_CURRENCY_NAMESPACE",
    "canonical_namespace",
    "commodity_key",
    "plan_import",
    "sort_accounts_parent_first",
]
