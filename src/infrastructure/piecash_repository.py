"""PieCash-backed read access to a GnuCash book file."""

from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path

from src.application.ports.book_scope import BookScopePort
from src.application.ports.prices import PriceRepositoryPort
from src.application.ports.snapshot import BookSnapshotPort
from src.domain.constants import CURRENCY_NAMESPACE, DEFAULT_COMMODITY_FRACTION
from src.domain.models.ledger import (
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
from src.domain.models.numeric import GncNumeric
from src.domain.services.dates import parse_timestamp
from src.domain.services.hierarchy import collect_descendants
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.piecash_compat import load_piecash, open_piecash_book
from src.utils.decimal_utils import coerce_decimal


class PieCashGnuCashRepository(
    PriceRepositoryPort,
    BookScopePort,
    BookSnapshotPort,
):
    """Repository reading a book through piecash, read-only."""

    def __init__(self, book_path: Path | str, logger=None) -> None:
        """Initialize the repository.

        Args:
            book_path: Path or URI to the GnuCash book supported by piecash.
            logger: Optional logger compatible with logging.Logger-like API.

        Raises:
            RuntimeError: If piecash is not installed.
        """
        self._piecash = load_piecash()
        self._book_path = book_path
        self._logger = logger or get_app_logger()

    @contextmanager
    def _open_book(self):
        book = open_piecash_book(
            self._piecash,
            self._book_path,
            readonly=True,
            open_if_lock=True,
        )
        try:
            yield book
        finally:
            close_method = getattr(book, "close", None)
            if callable(close_method):
                close_method()

    @staticmethod
    def _normalize_account_type(raw_type) -> str:
        if raw_type is None:
            return ""
        if hasattr(raw_type, "name"):
            return str(raw_type.name).upper()
        return str(raw_type).upper()

    @staticmethod
    def _coerce_datetime(raw_value) -> datetime | None:
        # piecash returns post dates as dates and other stamps as datetimes.
        return parse_timestamp(raw_value)

    @staticmethod
    def _numeric(entity, field: str, denom_hint: int) -> GncNumeric:
        """Return an entity's ``<field>_num/<field>_denom`` as a fraction.

        piecash exposes amounts as Decimals and keeps the stored pair on
        private columns; the Decimal is rescaled to ``denom_hint`` when the
        pair is unavailable.
        """
        for prefix in (field, f"_{field}"):
            num = getattr(entity, f"{prefix}_num", None)
            denom = getattr(entity, f"{prefix}_denom", None)
            if num is not None and denom is not None:
                if int(denom) == 0:
                    return GncNumeric(0, 1)
                return GncNumeric(int(num), int(denom))
        raw_value = getattr(entity, field, None)
        if hasattr(raw_value, "num") and hasattr(raw_value, "denom"):
            return GncNumeric(int(raw_value.num), int(raw_value.denom) or 1)
        return GncNumeric.from_decimal(coerce_decimal(raw_value), denom_hint)

    @staticmethod
    def _to_commodity(commodity) -> Commodity:
        return Commodity(
            guid=commodity.guid,
            namespace=commodity.namespace,
            mnemonic=commodity.mnemonic,
            fullname=getattr(commodity, "fullname", None),
            cusip=getattr(commodity, "cusip", None),
            fraction=int(
                getattr(commodity, "fraction", None)
                or DEFAULT_COMMODITY_FRACTION
            ),
            quote_flag=int(getattr(commodity, "quote_flag", 0) or 0),
            quote_source=getattr(commodity, "quote_source", None),
            quote_tz=getattr(commodity, "quote_tz", None),
        )

    def _to_account(self, account) -> Account:
        commodity = getattr(account, "commodity", None)
        parent = getattr(account, "parent", None)
        return Account(
            guid=account.guid,
            name=account.name,
            account_type=self._normalize_account_type(
                getattr(account, "type", "")
            ),
            commodity_guid=commodity.guid if commodity is not None else None,
            parent_guid=parent.guid if parent is not None else None,
            commodity_scu=int(
                getattr(account, "commodity_scu", None)
                or DEFAULT_COMMODITY_FRACTION
            ),
            non_std_scu=int(getattr(account, "non_std_scu", 0) or 0),
            code=getattr(account, "code", None) or "",
            description=getattr(account, "description", None),
            hidden=bool(getattr(account, "hidden", False)),
            placeholder=bool(getattr(account, "placeholder", False)),
        )

    def _to_price(self, price) -> Price:
        currency = price.currency
        return Price(
            guid=price.guid,
            commodity_guid=price.commodity.guid,
            currency_guid=currency.guid,
            date=self._coerce_datetime(getattr(price, "date", None)),
            value=self._numeric(
                price,
                "value",
                int(getattr(currency, "fraction", None)
                    or DEFAULT_COMMODITY_FRACTION),
            ),
            source=getattr(price, "source", None),
            type=getattr(price, "type", None),
        )

    def _to_transaction(self, transaction) -> Transaction:
        currency = transaction.currency
        currency_fraction = int(
            getattr(currency, "fraction", None) or DEFAULT_COMMODITY_FRACTION
        )
        splits = []
        for split in transaction.splits:
            account = split.account
            lot = getattr(split, "lot", None)
            splits.append(
                Split(
                    guid=split.guid,
                    tx_guid=transaction.guid,
                    account_guid=account.guid,
                    value=self._numeric(split, "value", currency_fraction),
                    quantity=self._numeric(
                        split,
                        "quantity",
                        int(
                            getattr(account, "commodity_scu", None)
                            or currency_fraction
                        ),
                    ),
                    memo=getattr(split, "memo", None) or "",
                    action=getattr(split, "action", None) or "",
                    reconcile_state=getattr(split, "reconcile_state", None)
                    or "n",
                    reconcile_date=self._coerce_datetime(
                        getattr(split, "reconcile_date", None)
                    ),
                    lot_guid=lot.guid if lot is not None else None,
                )
            )
        return Transaction(
            guid=transaction.guid,
            currency_guid=currency.guid,
            post_date=self._coerce_datetime(
                getattr(transaction, "post_date", None)
            ),
            enter_date=self._coerce_datetime(
                getattr(transaction, "enter_date", None)
            ),
            description=getattr(transaction, "description", None) or "",
            num=getattr(transaction, "num", None) or "",
            splits=sorted(splits, key=lambda item: item.guid),
        )

    def _book_accounts(self, book, root_guid: str) -> list[Account]:
        accounts = [self._to_account(book.root_account)]
        accounts.extend(self._to_account(item) for item in book.accounts)
        by_guid = {account.guid: account for account in accounts}
        if root_guid not in by_guid:
            return []
        return [
            by_guid[guid] for guid in collect_descendants(accounts, root_guid)
        ]

    def fetch_latest_price(
        self,
        commodity_guid: str,
        currency_guid: str,
        as_of: datetime,
    ) -> Price | None:
        latest: Price | None = None
        with self._open_book() as book:
            for raw_price in book.prices:
                if (
                    raw_price.commodity.guid != commodity_guid
                    or raw_price.currency.guid != currency_guid
                ):
                    continue
                price = self._to_price(raw_price)
                if price.date is None or price.date > as_of:
                    continue
                if latest is None or (price.date, price.guid) > (
                    latest.date,
                    latest.guid,
                ):
                    latest = price
        return latest

    def fetch_commodity(self, guid: str) -> Commodity | None:
        with self._open_book() as book:
            for commodity in book.commodities:
                if commodity.guid == guid:
                    return self._to_commodity(commodity)
        return None

    def fetch_currency_by_mnemonic(self, mnemonic: str) -> Commodity | None:
        with self._open_book() as book:
            for commodity in book.commodities:
                if (
                    commodity.mnemonic == mnemonic
                    and commodity.namespace == CURRENCY_NAMESPACE
                ):
                    return self._to_commodity(commodity)
        return None

    def fetch_currencies(self) -> list[Commodity]:
        with self._open_book() as book:
            currencies = [
                self._to_commodity(commodity)
                for commodity in book.commodities
                if commodity.namespace == CURRENCY_NAMESPACE
            ]
        return sorted(currencies, key=lambda item: item.mnemonic)

    def fetch_default_root_guid(self) -> str | None:
        with self._open_book() as book:
            root = getattr(book, "root_account", None)
            return root.guid if root is not None else None

    def fetch_account_guids(self, root_guid: str) -> list[str]:
        with self._open_book() as book:
            return [
                account.guid
                for account in self._book_accounts(book, root_guid)
            ]

    def fetch_earliest_post_date(self, root_guid: str) -> datetime | None:
        earliest: datetime | None = None
        with self._open_book() as book:
            guids = {
                account.guid
                for account in self._book_accounts(book, root_guid)
            }
            for transaction in book.transactions:
                if not any(
                    split.account.guid in guids
                    for split in transaction.splits
                ):
                    continue
                post_date = self._coerce_datetime(
                    getattr(transaction, "post_date", None)
                )
                if post_date and (earliest is None or post_date < earliest):
                    earliest = post_date
        return earliest

    def fetch_book_snapshot(self, root_guid: str) -> BookSnapshot:
        """Read every entity of the book rooted at ``root_guid``.

        Raises:
            LookupError: If the file's book has another root account.
        """
        with self._open_book() as book:
            accounts = self._book_accounts(book, root_guid)
            if not accounts:
                raise LookupError(f"No book with root account {root_guid}")
            guids = {account.guid for account in accounts}

            transactions = [
                self._to_transaction(transaction)
                for transaction in book.transactions
                if any(
                    split.account.guid in guids
                    for split in transaction.splits
                )
            ]
            transactions.sort(
                key=lambda tx: (
                    tx.post_date or datetime.min.replace(tzinfo=timezone.utc),
                    tx.guid,
                )
            )

            referenced = {
                account.commodity_guid
                for account in accounts
                if account.commodity_guid
            }
            referenced.update(tx.currency_guid for tx in transactions)
            prices = [
                self._to_price(price)
                for price in book.prices
                if price.commodity.guid in referenced
                or price.currency.guid in referenced
            ]
            for price in prices:
                referenced.update((price.commodity_guid, price.currency_guid))

            commodities = sorted(
                (
                    self._to_commodity(commodity)
                    for commodity in book.commodities
                    if commodity.guid in referenced
                ),
                key=lambda item: item.key,
            )
            budgets = self._budgets(book, guids)
            root_template = getattr(book, "root_template", None)
            snapshot_book = Book(
                guid=book.guid,
                root_account_guid=root_guid,
                root_template_guid=root_template.guid
                if root_template is not None
                else None,
            )

        self._logger.debug(
            f"Read piecash book {snapshot_book.guid}: {len(accounts)} "
            f"accounts, {len(transactions)} transactions"
        )
        return BookSnapshot(
            book=snapshot_book,
            commodities=commodities,
            accounts=accounts,
            transactions=transactions,
            prices=prices,
            budgets=budgets,
        )

    def _budgets(self, book, account_guids: set[str]) -> list[Budget]:
        budgets = []
        for budget in getattr(book, "budgets", None) or []:
            amounts = [
                BudgetAmount(
                    budget_guid=budget.guid,
                    account_guid=amount.account.guid,
                    period_num=int(amount.period_num),
                    amount=self._numeric(
                        amount, "amount", DEFAULT_COMMODITY_FRACTION
                    ),
                )
                for amount in getattr(budget, "amounts", None) or []
                if amount.account.guid in account_guids
            ]
            budgets.append(
                Budget(
                    guid=budget.guid,
                    name=budget.name,
                    num_periods=int(budget.num_periods),
                    description=getattr(budget, "description", None),
                    amounts=amounts,
                )
            )
        return budgets


__all__ = ["PieCashGnuCashRepository"]
