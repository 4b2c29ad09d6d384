"""Serialize interchange records as GnuCash v2 XML."""

import gzip
import xml.etree.ElementTree as ET
from collections import defaultdict
from xml.etree.ElementTree import Element, SubElement

from src.domain.models.interchange import (
    CommodityRef,
    InterchangeAccount,
    InterchangeBudget,
    InterchangeCommodity,
    InterchangeDocument,
    InterchangePrice,
    InterchangeSplit,
    InterchangeTransaction,
)
from src.infrastructure.gnucash_xml.namespaces import NAMESPACES, ROOT_TAG

XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>'

# Tags are written with literal prefixes; the root declares every namespace.


def _add(parent: Element, tag: str, text=None, **attrib) -> Element:
    element = SubElement(parent, tag, attrib)
    if text is not None:
        element.text = str(text)
    return element


def _add_guid(parent: Element, tag: str, guid: str) -> Element:
    return _add(parent, tag, guid, type="guid")


def _add_ref(parent: Element, tag: str, ref: CommodityRef) -> None:
    element = _add(parent, tag)
    _add(element, "cmdty:space", ref.namespace)
    _add(element, "cmdty:id", ref.mnemonic)


def _add_timestamp(parent: Element, tag: str, value: str) -> None:
    _add(_add(parent, tag), "ts:date", value)


def _add_count(parent: Element, kind: str, count: int) -> None:
    _add(parent, "gnc:count-data", count, **{"cd:type": kind})


def _commodity(parent: Element, item: InterchangeCommodity) -> None:
    element = _add(parent, "gnc:commodity", version="2.0.0")
    _add(element, "cmdty:space", item.namespace)
    _add(element, "cmdty:id", item.mnemonic)
    if item.fullname:
        _add(element, "cmdty:name", item.fullname)
    if item.xcode:
        _add(element, "cmdty:xcode", item.xcode)
    _add(element, "cmdty:fraction", item.fraction)
    if item.quote_flag:
        _add(element, "cmdty:get_quotes")
        if item.quote_source:
            _add(element, "cmdty:quote_source", item.quote_source)
        if item.quote_tz:
            _add(element, "cmdty:quote_tz", item.quote_tz)


def _price(parent: Element, item: InterchangePrice) -> None:
    element = _add(parent, "price")
    _add_guid(element, "price:id", item.guid)
    _add_ref(element, "price:commodity", item.commodity)
    _add_ref(element, "price:currency", item.currency)
    _add_timestamp(element, "price:time", item.date)
    _add(element, "price:source", item.source)
    if item.type:
        _add(element, "price:type", item.type)
    _add(element, "price:value", item.value)


def _account(parent: Element, item: InterchangeAccount) -> None:
    element = _add(parent, "gnc:account", version="2.0.0")
    _add(element, "act:name", item.name)
    _add_guid(element, "act:id", item.guid)
    _add(element, "act:type", item.account_type)
    if item.commodity:
        _add_ref(element, "act:commodity", item.commodity)
    if item.commodity_scu is not None:
        _add(element, "act:commodity-scu", item.commodity_scu)
    if item.description:
        _add(element, "act:description", item.description)
    if item.parent_guid:
        _add_guid(element, "act:parent", item.parent_guid)


def _split(parent: Element, item: InterchangeSplit) -> None:
    element = _add(parent, "trn:split")
    _add_guid(element, "split:id", item.guid)
    _add(element, "split:reconciled-state", item.reconciled_state)
    if item.reconcile_date:
        _add_timestamp(element, "split:reconcile-date", item.reconcile_date)
    _add(element, "split:value", item.value)
    _add(element, "split:quantity", item.quantity)
    _add_guid(element, "split:account", item.account_guid)
    if item.memo:
        _add(element, "split:memo", item.memo)
    if item.action:
        _add(element, "split:action", item.action)
    if item.lot_guid:
        _add_guid(element, "split:lot", item.lot_guid)


def _transaction(parent: Element, item: InterchangeTransaction) -> None:
    element = _add(parent, "gnc:transaction", version="2.0.0")
    _add_guid(element, "trn:id", item.guid)
    _add_ref(element, "trn:currency", item.currency)
    if item.num:
        _add(element, "trn:num", item.num)
    _add_timestamp(element, "trn:date-posted", item.date_posted)
    _add_timestamp(element, "trn:date-entered", item.date_entered)
    _add(element, "trn:description", item.description)
    if item.splits:
        splits = _add(element, "trn:splits")
        for split in item.splits:
            _split(splits, split)


def _budget(parent: Element, item: InterchangeBudget) -> None:
    element = _add(parent, "gnc:budget", version="2.0.0")
    _add_guid(element, "bgt:id", item.guid)
    _add(element, "bgt:name", item.name)
    if item.description:
        _add(element, "bgt:description", item.description)
    _add(element, "bgt:num-periods", item.num_periods)
    if not item.amounts:
        return

    by_account: dict[str, list] = defaultdict(list)
    for amount in item.amounts:
        by_account[amount.account_guid].append(amount)
    slots = _add(element, "bgt:slots")
    for account_guid, amounts in by_account.items():
        account_slot = _add(slots, "slot")
        _add(account_slot, "slot:key", account_guid)
        frame = _add(account_slot, "slot:value", type="frame")
        for amount in amounts:
            period_slot = _add(frame, "slot")
            _add(period_slot, "slot:key", amount.period_num)
            _add(period_slot, "slot:value", amount.amount, type="numeric")


def _book_counts(doc: InterchangeDocument) -> dict[str, int]:
    if doc.count_data:
        return dict(doc.count_data)
    counts = {
        "commodity": len(doc.commodities),
        "account": len(doc.accounts),
        "transaction": len(doc.transactions),
    }
    if doc.budgets:
        counts["budget"] = len(doc.budgets)
    if doc.prices:
        counts["price"] = len(doc.prices)
    return counts


def build_document(doc: InterchangeDocument) -> str:
    """Serialize a document as indented GnuCash v2 XML.

    Args:
        doc: Records to write.

    Returns:
        str: XML text starting with a UTF-8 declaration.
    """
    root = Element(
        ROOT_TAG,
        {f"xmlns:{prefix}": uri for prefix, uri in NAMESPACES.items()},
    )
    _add_count(root, "book", 1)

    book = _add(root, "gnc:book", version="2.0.0")
    _add(book, "book:id", doc.book_guid, type=doc.book_id_type or "guid")
    for kind, count in _book_counts(doc).items():
        if count:
            _add_count(book, kind, count)
    for commodity in doc.commodities:
        _commodity(book, commodity)
    if doc.prices:
        pricedb = _add(book, "gnc:pricedb", version="1")
        for price in doc.prices:
            _price(pricedb, price)
    for account in doc.accounts:
        _account(book, account)
    for transaction in doc.transactions:
        _transaction(book, transaction)
    for budget in doc.budgets:
        _budget(book, budget)

    ET.indent(root, space="  ")
    body = ET.tostring(root, encoding="unicode")
    return f"{XML_DECLARATION}\n{body}\n"


def compress_document(text: str) -> bytes:
    """Gzip serialized XML as UTF-8."""
    return gzip.compress(text.encode("utf-8"))


__all__ = ["build_document", "compress_document", "XML_DECLARATION"]
