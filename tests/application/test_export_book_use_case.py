"""Tests for the ExportBookUseCase."""

from unittest.mock import MagicMock

from src.application.use_cases.export_book import (
    ExportBookResult,
    ExportBookUseCase,
)
from src.domain.models.ledger import Account, Book, BookSnapshot, Commodity


def _snapshot_port() -> MagicMock:
    port = MagicMock()
    port.fetch_book_snapshot.return_value = BookSnapshot(
        book=Book(guid="book", root_account_guid="root"),
        commodities=[
            Commodity(guid="usd", namespace="CURRENCY", mnemonic="USD")
        ],
        accounts=[
            Account(
                guid="root",
                name="Root Account",
                account_type="ROOT",
                commodity_guid="usd",
                parent_guid=None,
            )
        ],
        transactions=[],
        prices=[],
        budgets=[],
    )
    return port


def _codec() -> MagicMock:
    codec = MagicMock()
    codec.build.return_value = "<gnc-v2/>"
    codec.compress.return_value = b"\x1f\x8b..."
    return codec


def test_execute_returns_plain_document():
    port, codec = _snapshot_port(), _codec()

    result = ExportBookUseCase(port, codec, MagicMock()).execute("root")

    port.fetch_book_snapshot.assert_called_once_with("root")
    [doc] = codec.build.call_args.args
    assert doc.book_guid == "book"
    assert result == ExportBookResult(
        content="<gnc-v2/>",
        compressed=False,
        count_data={"commodity": 1, "account": 1, "transaction": 0},
    )
    codec.compress.assert_not_called()


def test_execute_compresses_on_request():
    codec = _codec()
    logger = MagicMock()

    result = ExportBookUseCase(_snapshot_port(), codec, logger).execute(
        "root", compress=True
    )

    codec.compress.assert_called_once_with("<gnc-v2/>")
    assert result.content == b"\x1f\x8b..."
    assert result.compressed
    assert "bytes" in logger.info.call_args.args[0]
