"""Parse GnuCash XML (plain or gzip) into interchange records."""

import gzip
import zlib
import xml.etree.ElementTree as ET
from xml.etree.ElementTree import Element

from src.domain.exceptions import InterchangeFormatError
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
from src.infrastructure.gnucash_xml.namespaces import (
    GZIP_MAGIC,
    ROOT_TAG,
    qualified as q,
)

DEFAULT_NUM_PERIODS = 12


def _decode(data: bytes | str) -> bytes | str:
    if isinstance(data, str):
        return data
    if data[:2] == GZIP_MAGIC:
        try:
            return gzip.decompress(data)
        except (OSError, EOFError, zlib.error) as exc:
            raise InterchangeFormatError(
                f"Corrupt gzip stream: {exc}"
            ) from exc
    return data


def _text(element: Element | None, path: str | None = None) -> str | None:
    if element is None:
        return None
    if path is not None:
        element = element.find(path)
        if element is None:
            return None
    return (element.text or "").strip()


def _int(raw: str | None, default: int | None) -> int | None:
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _commodity_ref(element: Element | None) -> CommodityRef | None:
    if element is None:
        return None
    namespace = _text(element, q("cmdty:space")) or ""
    mnemonic = _text(element, q("cmdty:id")) or ""
    if not namespace and not mnemonic:
        return None
    return CommodityRef(namespace, mnemonic)


def _timestamp(element: Element | None) -> str:
    if element is None:
        return ""
    return _text(element, q("ts:date")) or _text(element) or ""


def _count_data(parent: Element) -> dict[str, int]:
    counts: dict[str, int] = {}
    for element in parent.findall(q("gnc:count-data")):
        kind = element.get(q("cd:type"))
        value = _int(_text(element), None)
        if kind and value is not None:
            counts[kind] = value
    return counts


def _commodity(element: Element) -> InterchangeCommodity:
    quote = element.find(q("cmdty:get_quotes"))
    quote_flag = None
    if quote is not None:
        quote_flag = _int(_text(quote), 1)
    return InterchangeCommodity(
        namespace=_text(element, q("cmdty:space")) or "",
        mnemonic=_text(element, q("cmdty:id")) or "",
        fullname=_text(element, q("cmdty:name")) or None,
        xcode=_text(element, q("cmdty:xcode")) or None,
        fraction=_int(_text(element, q("cmdty:fraction")), 1),
        quote_flag=quote_flag,
        quote_source=_text(element, q("cmdty:quote_source")) or None,
        quote_tz=_text(element, q("cmdty:quote_tz")) or None,
    )


def _price(element: Element) -> InterchangePrice:
    blank = CommodityRef("", "")
    return InterchangePrice(
        guid=_text(element, q("price:id")) or "",
        commodity=_commodity_ref(element.find(q("price:commodity"))) or blank,
        currency=_commodity_ref(element.find(q("price:currency"))) or blank,
        date=_timestamp(element.find(q("price:time"))),
        source=_text(element, q("price:source")) or "",
        value=_text(element, q("price:value")) or "0/1",
        type=_text(element, q("price:type")) or None,
    )


def _account(element: Element) -> InterchangeAccount:
    return InterchangeAccount(
        name=_text(element, q("act:name")) or "",
        guid=_text(element, q("act:id")) or "",
        account_type=_text(element, q("act:type")) or "",
        commodity=_commodity_ref(element.find(q("act:commodity"))),
        commodity_scu=_int(_text(element, q("act:commodity-scu")), None),
        description=_text(element, q("act:description")) or None,
        parent_guid=_text(element, q("act:parent")) or None,
    )


def _split(element: Element) -> InterchangeSplit:
    reconcile = element.find(q("split:reconcile-date"))
    return InterchangeSplit(
        guid=_text(element, q("split:id")) or "",
        reconciled_state=_text(element, q("split:reconciled-state")) or "n",
        value=_text(element, q("split:value")) or "0/1",
        quantity=_text(element, q("split:quantity")) or "0/1",
        account_guid=_text(element, q("split:account")) or "",
        reconcile_date=_timestamp(reconcile) if reconcile is not None else None,
        memo=_text(element, q("split:memo")) or None,
        action=_text(element, q("split:action")) or None,
        lot_guid=_text(element, q("split:lot")) or None,
    )


def _transaction(element: Element) -> InterchangeTransaction:
    return InterchangeTransaction(
        guid=_text(element, q("trn:id")) or "",
        currency=_commodity_ref(element.find(q("trn:currency")))
        or CommodityRef("", ""),
        date_posted=_timestamp(element.find(q("trn:date-posted"))),
        date_entered=_timestamp(element.find(q("trn:date-entered"))),
        description=_text(element, q("trn:description")) or "",
        num=_text(element, q("trn:num")) or None,
        splits=[
            _split(item)
            for item in element.findall(f"{q('trn:splits')}/{q('trn:split')}")
        ],
    )


def _budget_amounts(element: Element) -> list[InterchangeBudgetAmount]:
    """Read ``bgt:slots``: one frame per account of period -> amount."""
    amounts: list[InterchangeBudgetAmount] = []
    slots = element.find(q("bgt:slots"))
    if slots is None:
        return amounts
    for account_slot in slots.findall("slot"):
        account_guid = _text(account_slot, q("slot:key")) or ""
        frame = account_slot.find(q("slot:value"))
        if frame is None:
            continue
        for period_slot in frame.findall("slot"):
            period_num = _int(_text(period_slot, q("slot:key")), None)
            if period_num is None:
                continue
            amounts.append(
                InterchangeBudgetAmount(
                    account_guid=account_guid,
                    period_num=period_num,
                    amount=_text(period_slot, q("slot:value")) or "0/1",
                )
            )
    return amounts


def _budget(element: Element) -> InterchangeBudget:
    return InterchangeBudget(
        guid=_text(element, q("bgt:id")) or "",
        name=_text(element, q("bgt:name")) or "",
        num_periods=_int(
            _text(element, q("bgt:num-periods")), DEFAULT_NUM_PERIODS
        ),
        description=_text(element, q("bgt:description")) or None,
        amounts=_budget_amounts(element),
    )


def parse_document(data: bytes | str) -> InterchangeDocument:
    """Parse a GnuCash v2 XML document.

    Gzip input is recognized by its magic bytes. Missing optional elements
    become None or the documented defaults.

    Args:
        data: Raw file content, compressed or not.

    Returns:
        InterchangeDocument: Records in their wire form.

    Raises:
        InterchangeFormatError: If the content is not XML, or the
            ``gnc-v2`` root or ``gnc:book`` element is missing.
    """
    try:
        root = ET.fromstring(_decode(data))
    except ET.ParseError as exc:
        raise InterchangeFormatError(f"Invalid GnuCash XML: {exc}") from exc
    if root.tag != ROOT_TAG:
        raise InterchangeFormatError(
            "Invalid GnuCash XML: missing gnc-v2 root element"
        )
    book = root.find(q("gnc:book"))
    if book is None:
        raise InterchangeFormatError(
            "Invalid GnuCash XML: missing gnc:book element"
        )

    book_id = book.find(q("book:id"))
    pricedb = book.find(q("gnc:pricedb"))
    return InterchangeDocument(
        book_guid=_text(book_id) or "",
        book_id_type=(book_id.get("type") if book_id is not None else None)
        or "guid",
        commodities=[
            _commodity(item) for item in book.findall(q("gnc:commodity"))
        ],
        prices=[_price(item) for item in pricedb.findall("price")]
        if pricedb is not None
        else [],
        accounts=[_account(item) for item in book.findall(q("gnc:account"))],
        transactions=[
            _transaction(item) for item in book.findall(q("gnc:transaction"))
        ],
        budgets=[_budget(item) for item in book.findall(q("gnc:budget"))],
        count_data=_count_data(book),
    )


__all__ = ["parse_document"]
