"""Map a book snapshot onto the interchange document records."""

from src.domain.constants import CURRENCY_NAMESPACE, FALLBACK_CURRENCY_MNEMONIC
from src.domain.models.interchange import (
    CommodityRef,
    InterchangeAccount,
    InterchangeBudget,
    InterchangeBudgetAmount,
    InterchangeCommodity,
    InterchangeDocument,
    InterchangePrice,
    InterchangeSplit,
    InterchangeTransaction,
)
from src.domain.models.ledger import Account, BookSnapshot, Commodity
from src.domain.services.dates import format_timestamp


def _accounts_parent_first(accounts: list[Account]) -> list[Account]:
    by_guid = {account.guid: account for account in accounts}
    ordered: list[Account] = []
    done: set[str] = set()
    for start in accounts:
        chain: list[Account] = []
        on_chain: set[str] = set()
        current = start
        while (
            current is not None
            and current.guid not in done
            and current.guid not in on_chain
        ):
            chain.append(current)
            on_chain.add(current.guid)
            current = by_guid.get(current.parent_guid)
        for account in reversed(chain):
            ordered.append(account)
            done.add(account.guid)
    return ordered


def _optional_timestamp(value) -> str:
    return format_timestamp(value) if value is not None else ""


def build_interchange_document(snapshot: BookSnapshot) -> InterchangeDocument:
    """Convert every entity of a book into interchange records.

    Accounts are emitted parents first. A transaction whose currency is
    not in the snapshot is written against ``CURRENCY:USD``.

    Args:
        snapshot: Entities of one book.

    Returns:
        InterchangeDocument: Document ready for serialization.
    """
    refs: dict[str, CommodityRef] = {
        commodity.guid: CommodityRef(commodity.namespace, commodity.mnemonic)
        for commodity in snapshot.commodities
    }
    fallback = CommodityRef(CURRENCY_NAMESPACE, FALLBACK_CURRENCY_MNEMONIC)
    blank = CommodityRef("", "")

    commodities = [_commodity(item) for item in snapshot.commodities]

    accounts = [
        InterchangeAccount(
            name=account.name,
            guid=account.guid,
            account_type=account.account_type,
            commodity=refs.get(account.commodity_guid),
            commodity_scu=account.commodity_scu,
            description=account.description or None,
            parent_guid=account.parent_guid or None,
        )
        for account in _accounts_parent_first(snapshot.accounts)
    ]

    transactions = [
        InterchangeTransaction(
            guid=tx.guid,
            currency=refs.get(tx.currency_guid, fallback),
            date_posted=_optional_timestamp(tx.post_date),
            date_entered=_optional_timestamp(tx.enter_date),
            description=tx.description or "",
            num=tx.num or None,
            splits=[
                InterchangeSplit(
                    guid=split.guid,
                    reconciled_state=split.reconcile_state,
                    value=str(split.value),
                    quantity=str(split.quantity),
                    account_guid=split.account_guid,
                    reconcile_date=(
                        format_timestamp(split.reconcile_date)
                        if split.reconcile_date
                        else None
                    ),
                    memo=split.memo or None,
                    action=split.action or None,
                    lot_guid=split.lot_guid or None,
                )
                for split in tx.splits
            ],
        )
        for tx in snapshot.transactions
    ]

    prices = [
        InterchangePrice(
            guid=price.guid,
            commodity=refs.get(price.commodity_guid, blank),
            currency=refs.get(price.currency_guid, blank),
            date=format_timestamp(price.date),
            source=price.source or "",
            value=str(price.value),
            type=price.type or None,
        )
        for price in snapshot.prices
    ]

    budgets = [
        InterchangeBudget(
            guid=budget.guid,
            name=budget.name,
            num_periods=budget.num_periods,
            description=budget.description or None,
            amounts=[
                InterchangeBudgetAmount(
                    account_guid=amount.account_guid,
                    period_num=amount.period_num,
                    amount=str(amount.amount),
                )
                for amount in budget.amounts
            ],
        )
        for budget in snapshot.budgets
    ]

    count_data = {
        "commodity": len(commodities),
        "account": len(accounts),
        "transaction": len(transactions),
    }
    if budgets:
        count_data["budget"] = len(budgets)
    if prices:
        count_data["price"] = len(prices)

    return InterchangeDocument(
        book_guid=snapshot.book.guid,
        book_id_type="guid",
        commodities=commodities,
        prices=prices,
        accounts=accounts,
        transactions=transactions,
        budgets=budgets,
        count_data=count_data,
    )


def _commodity(item: Commodity) -> InterchangeCommodity:
    return InterchangeCommodity(
        namespace=item.namespace,
        mnemonic=item.mnemonic,
        fullname=item.fullname or None,
        xcode=item.cusip or None,
        fraction=item.fraction,
        quote_flag=item.quote_flag or None,
        quote_source=item.quote_source or None,
        quote_tz=item.quote_tz or None,
    )


__all__ = ["build_interchange_document"]
