"""Shared fixtures for infrastructure tests."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from sqlalchemy import text

from src.application.use_cases.import_book import ImportBookUseCase
from src.infrastructure.db import _create_engine
from src.infrastructure.gnucash_schema import ensure_schema
from src.infrastructure.gnucash_xml import GnuCashXmlCodec
from src.infrastructure.ledger_repository import SqlAlchemyLedgerUnitOfWork

ROOT_GUID = "00000000000000000000000000000001"
ASSETS_GUID = "a0000000000000000000000000000001"
CHECKING_GUID = "a0000000000000000000000000000002"
EXPENSES_GUID = "e0000000000000000000000000000001"
GROCERIES_GUID = "e0000000000000000000000000000002"
TX_GUID = "70000000000000000000000000000001"

SAMPLE_BOOK_XML = f"""<?xml version="1.0" encoding="utf-8" ?>
<gnc-v2
     xmlns:gnc="http://www.gnucash.org/XML/gnc"
     xmlns:act="http://www.gnucash.org/XML/act"
     xmlns:book="http://www.gnucash.org/XML/book"
     xmlns:cd="http://www.gnucash.org/XML/cd"
     xmlns:cmdty="http://www.gnucash.org/XML/cmdty"
     xmlns:price="http://www.gnucash.org/XML/price"
     xmlns:slot="http://www.gnucash.org/XML/slot"
     xmlns:split="http://www.gnucash.org/XML/split"
     xmlns:sx="http://www.gnucash.org/XML/sx"
     xmlns:trn="http://www.gnucash.org/XML/trn"
     xmlns:ts="http://www.gnucash.org/XML/ts"
     xmlns:bgt="http://www.gnucash.org/XML/bgt">
<gnc:count-data cd:type="book">1</gnc:count-data>
<gnc:book version="2.0.0">
<book:id type="guid">b0000000000000000000000000000001</book:id>
<gnc:count-data cd:type="commodity">3</gnc:count-data>
<gnc:count-data cd:type="account">5</gnc:count-data>
<gnc:count-data cd:type="transaction">1</gnc:count-data>
<gnc:commodity version="2.0.0">
  <cmdty:space>CURRENCY</cmdty:space>
  <cmdty:id>USD</cmdty:id>
  <cmdty:get_quotes/>
  <cmdty:quote_source>currency</cmdty:quote_source>
  <cmdty:quote_tz/>
</gnc:commodity>
<gnc:commodity version="2.0.0">
  <cmdty:space>ISO4217</cmdty:space>
  <cmdty:id>EUR</cmdty:id>
  <cmdty:fraction>100</cmdty:fraction>
</gnc:commodity>
<gnc:commodity version="2.0.0">
  <cmdty:space>NASDAQ</cmdty:space>
  <cmdty:id>AAPL</cmdty:id>
  <cmdty:name>Apple Inc.</cmdty:name>
  <cmdty:xcode>037833100</cmdty:xcode>
  <cmdty:fraction>10000</cmdty:fraction>
</gnc:commodity>
<gnc:pricedb version="1">
  <price>
    <price:id type="guid">90000000000000000000000000000001</price:id>
    <price:commodity>
      <cmdty:space>NASDAQ</cmdty:space>
      <cmdty:id>AAPL</cmdty:id>
    </price:commodity>
    <price:currency>
      <cmdty:space>CURRENCY</cmdty:space>
      <cmdty:id>USD</cmdty:id>
    </price:currency>
    <price:time>
      <ts:date>2024-01-15 10:30:00 +0000</ts:date>
    </price:time>
    <price:source>user:price</price:source>
    <price:type>last</price:type>
    <price:value>18550/100</price:value>
  </price>
  <price>
    <price:id type="guid">90000000000000000000000000000002</price:id>
    <price:commodity>
      <cmdty:space>NYSE</cmdty:space>
      <cmdty:id>IBM</cmdty:id>
    </price:commodity>
    <price:currency>
      <cmdty:space>CURRENCY</cmdty:space>
      <cmdty:id>USD</cmdty:id>
    </price:currency>
    <price:time>
      <ts:date>2024-01-15 10:30:00 +0000</ts:date>
    </price:time>
    <price:source>user:price</price:source>
    <price:value>150</price:value>
  </price>
</gnc:pricedb>
<gnc:account version="2.0.0">
  <act:name>Root Account</act:name>
  <act:id type="guid">{ROOT_GUID}</act:id>
  <act:type>ROOT</act:type>
</gnc:account>
<gnc:account version="2.0.0">
  <act:name>Checking</act:name>
  <act:id type="guid">{CHECKING_GUID}</act:id>
  <act:type>BANK</act:type>
  <act:commodity>
    <cmdty:space>CURRENCY</cmdty:space>
    <cmdty:id>USD</cmdty:id>
  </act:commodity>
  <act:commodity-scu>100</act:commodity-scu>
  <act:description>Main account</act:description>
  <act:parent type="guid">{ASSETS_GUID}</act:parent>
</gnc:account>
<gnc:account version="2.0.0">
  <act:name>Assets</act:name>
  <act:id type="guid">{ASSETS_GUID}</act:id>
  <act:type>ASSET</act:type>
  <act:commodity>
    <cmdty:space>CURRENCY</cmdty:space>
    <cmdty:id>USD</cmdty:id>
  </act:commodity>
  <act:commodity-scu>100</act:commodity-scu>
  <act:parent type="guid">{ROOT_GUID}</act:parent>
</gnc:account>
<gnc:account version="2.0.0">
  <act:name>Expenses</act:name>
  <act:id type="guid">{EXPENSES_GUID}</act:id>
  <act:type>EXPENSE</act:type>
  <act:commodity>
    <cmdty:space>CURRENCY</cmdty:space>
    <cmdty:id>USD</cmdty:id>
  </act:commodity>
  <act:parent type="guid">{ROOT_GUID}</act:parent>
</gnc:account>
<gnc:account version="2.0.0">
  <act:name>Groceries</act:name>
  <act:id type="guid">{GROCERIES_GUID}</act:id>
  <act:type>EXPENSE</act:type>
  <act:commodity>
    <cmdty:space>CURRENCY</cmdty:space>
    <cmdty:id>USD</cmdty:id>
  </act:commodity>
  <act:parent type="guid">{EXPENSES_GUID}</act:parent>
</gnc:account>
<gnc:transaction version="2.0.0">
  <trn:id type="guid">{TX_GUID}</trn:id>
  <trn:currency>
    <cmdty:space>CURRENCY</cmdty:space>
    <cmdty:id>USD</cmdty:id>
  </trn:currency>
  <trn:num>101</trn:num>
  <trn:date-posted>
    <ts:date>2024-01-15 10:59:00 +0000</ts:date>
  </trn:date-posted>
  <trn:date-entered>
    <ts:date>2024-01-15 18:02:11 +0000</ts:date>
  </trn:date-entered>
  <trn:description>Weekly shop</trn:description>
  <trn:splits>
    <trn:split>
      <split:id type="guid">50000000000000000000000000000001</split:id>
      <split:reconciled-state>c</split:reconciled-state>
      <split:value>-5000/100</split:value>
      <split:quantity>-5000/100</split:quantity>
      <split:account type="guid">{CHECKING_GUID}</split:account>
    </trn:split>
    <trn:split>
      <split:id type="guid">50000000000000000000000000000002</split:id>
      <split:reconciled-state>n</split:reconciled-state>
      <split:value>5000/100</split:value>
      <split:quantity>5000/100</split:quantity>
      <split:account type="guid">{GROCERIES_GUID}</split:account>
      <split:memo>Market</split:memo>
    </trn:split>
  </trn:splits>
</gnc:transaction>
<gnc:budget version="2.0.0">
  <bgt:id type="guid">c0000000000000000000000000000001</bgt:id>
  <bgt:name>2024</bgt:name>
  <bgt:description>Household</bgt:description>
  <bgt:num-periods>12</bgt:num-periods>
  <bgt:slots>
    <slot>
      <slot:key>{GROCERIES_GUID}</slot:key>
      <slot:value type="frame">
        <slot>
          <slot:key>0</slot:key>
          <slot:value type="numeric">40000/100</slot:value>
        </slot>
        <slot>
          <slot:key>12</slot:key>
          <slot:value type="numeric">1/1</slot:value>
        </slot>
      </slot:value>
    </slot>
  </bgt:slots>
</gnc:budget>
</gnc:book>
</gnc-v2>
"""


@pytest.fixture
def sample_xml() -> str:
    return SAMPLE_BOOK_XML


@pytest.fixture
def sqlite_engine():
    """In-memory GnuCash schema with foreign keys enforced."""
    engine = _create_engine("sqlite://")
    ensure_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_port(sqlite_engine):
    return SimpleNamespace(get_gnucash_engine=lambda: sqlite_engine)


@pytest.fixture
def imported_book(db_port, sample_xml):
    """Import the sample book into the in-memory database."""
    use_case = ImportBookUseCase(
        GnuCashXmlCodec(),
        SqlAlchemyLedgerUnitOfWork(db_port, logger=MagicMock()),
        logger=MagicMock(),
    )
    return use_case.execute(sample_xml)


def commodity_guid(engine, mnemonic: str) -> str:
    with engine.connect() as conn:
        return conn.execute(
            text("SELECT guid FROM commodities WHERE mnemonic = :mnemonic"),
            {"mnemonic": mnemonic},
        ).scalar_one()
