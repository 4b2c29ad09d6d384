"""Conversions between GnuCash SQL rows and ledger entities."""

from typing import Any

from src.domain.constants import DEFAULT_COMMODITY_FRACTION
from src.domain.models.ledger import (
    Account,
    Book,
    Commodity,
    Price,
    Split,
    Transaction,
)
from src.domain.models.numeric import GncNumeric
from src.domain.services.dates import format_sql_timestamp, parse_timestamp


def _numeric(num, denom) -> GncNumeric:
    denom_value = int(denom or 0)
    if denom_value == 0:
        return GncNumeric(0, 1)
    return GncNumeric(int(num or 0), denom_value)


def commodity_from_row(row) -> Commodity:
    return Commodity(
        guid=row.guid,
        namespace=row.namespace,
        mnemonic=row.mnemonic,
        fullname=row.fullname,
        cusip=row.cusip,
        fraction=int(row.fraction or DEFAULT_COMMODITY_FRACTION),
        quote_flag=int(row.quote_flag or 0),
        quote_source=row.quote_source,
        quote_tz=row.quote_tz,
    )


def account_from_row(row) -> Account:
    return Account(
        guid=row.guid,
        name=row.name,
        account_type=row.account_type,
        commodity_guid=row.commodity_guid,
        parent_guid=row.parent_guid,
        commodity_scu=int(row.commodity_scu or DEFAULT_COMMODITY_FRACTION),
        non_std_scu=int(row.non_std_scu or 0),
        code=row.code or "",
        description=row.description,
        hidden=bool(row.hidden),
        placeholder=bool(row.placeholder),
    )


def book_from_row(row) -> Book:
    return Book(
        guid=row.guid,
        root_account_guid=row.root_account_guid,
        root_template_guid=row.root_template_guid,
    )


def price_from_row(row) -> Price:
    return Price(
        guid=row.guid,
        commodity_guid=row.commodity_guid,
        currency_guid=row.currency_guid,
        date=parse_timestamp(row.date),
        value=_numeric(row.value_num, row.value_denom),
        source=row.source,
        type=row.type,
    )


def split_from_row(row) -> Split:
    return Split(
        guid=row.guid,
        tx_guid=row.tx_guid,
        account_guid=row.account_guid,
        value=_numeric(row.value_num, row.value_denom),
        quantity=_numeric(row.quantity_num, row.quantity_denom),
        memo=row.memo or "",
        action=row.action or "",
        reconcile_state=row.reconcile_state or "n",
        reconcile_date=parse_timestamp(row.reconcile_date),
        lot_guid=row.lot_guid,
    )


def transaction_from_row(row, splits: list[Split]) -> Transaction:
    return Transaction(
        guid=row.guid,
        currency_guid=row.currency_guid,
        post_date=parse_timestamp(row.post_date),
        enter_date=parse_timestamp(row.enter_date),
        description=row.description or "",
        num=row.num or "",
        splits=splits,
    )


def commodity_params(commodity: Commodity) -> dict[str, Any]:
    return {
        "guid": commodity.guid,
        "namespace": commodity.namespace,
        "mnemonic": commodity.mnemonic,
        "fullname": commodity.fullname,
        "cusip": commodity.cusip,
        "fraction": commodity.fraction,
        "quote_flag": commodity.quote_flag,
        "quote_source": commodity.quote_source,
        "quote_tz": commodity.quote_tz,
    }


def account_params(account: Account) -> dict[str, Any]:
    return {
        "guid": account.guid,
        "name": account.name,
        "account_type": account.account_type,
        "commodity_guid": account.commodity_guid,
        "commodity_scu": account.commodity_scu,
        "non_std_scu": account.non_std_scu,
        "parent_guid": account.parent_guid,
        "code": account.code,
        "description": account.description,
        "hidden": int(account.hidden),
        "placeholder": int(account.placeholder),
    }


def transaction_params(transaction: Transaction) -> dict[str, Any]:
    return {
        "guid": transaction.guid,
        "currency_guid": transaction.currency_guid,
        "num": transaction.num,
        "post_date": format_sql_timestamp(transaction.post_date),
        "enter_date": format_sql_timestamp(transaction.enter_date),
        "description": transaction.description,
    }


def split_params(split: Split) -> dict[str, Any]:
    return {
        "guid": split.guid,
        "tx_guid": split.tx_guid,
        "account_guid": split.account_guid,
        "memo": split.memo,
        "action": split.action,
        "reconcile_state": split.reconcile_state,
        "reconcile_date": format_sql_timestamp(split.reconcile_date),
        "value_num": split.value.num,
        "value_denom": split.value.denom,
        "quantity_num": split.quantity.num,
        "quantity_denom": split.quantity.denom,
        "lot_guid": split.lot_guid,
    }


def price_params(price: Price) -> dict[str, Any]:
    return {
        "guid": price.guid,
        "commodity_guid": price.commodity_guid,
        "currency_guid": price.currency_guid,
        "date": format_sql_timestamp(price.date),
        "source": price.source,
        "type": price.type,
        "value_num": price.value.num,
        "value_denom": price.value.denom,
    }


__all__ = [
    "commodity_from_row",
    "account_from_row",
    "book_from_row",
    "price_from_row",
    "split_from_row",
    "transaction_from_row",
    "commodity_params",
    "account_params",
    "transaction_params",
    "split_params",
    "price_params",
]
