"""Tests for the export_book_cli adapter."""

from unittest.mock import MagicMock

from src.adapters import export_book_cli
from src.application.use_cases.export_book import ExportBookResult


def _patch_use_case(monkeypatch, result=None, error=None) -> MagicMock:
    use_case = MagicMock()
    use_case.execute.return_value = result
    use_case.execute.side_effect = error
    monkeypatch.setattr(
        export_book_cli, "build_export_book_use_case", lambda: use_case
    )
    return use_case


def test_main_writes_text_document(
    monkeypatch, capsys, tmp_path, quiet_loggers
):
    quiet_loggers(monkeypatch, export_book_cli)
    use_case = _patch_use_case(
        monkeypatch,
        ExportBookResult(
            content="<gnc-v2/>",
            compressed=False,
            count_data={"account": 3, "commodity": 1},
        ),
    )
    output = tmp_path / "book.xml"

    assert export_book_cli.main(["root", str(output)]) == 0

    use_case.execute.assert_called_once_with("root", compress=False)
    assert output.read_text(encoding="utf-8") == "<gnc-v2/>"
    assert "Exported 3 account, 1 commodity" in capsys.readouterr().out


def test_main_writes_gzip_bytes(monkeypatch, tmp_path, quiet_loggers):
    quiet_loggers(monkeypatch, export_book_cli)
    use_case = _patch_use_case(
        monkeypatch,
        ExportBookResult(content=b"\x1f\x8b", compressed=True, count_data={}),
    )
    output = tmp_path / "book.gnucash"

    export_book_cli.main(["root", str(output), "--gzip"])

    use_case.execute.assert_called_once_with("root", compress=True)
    assert output.read_bytes() == b"\x1f\x8b"


def test_main_reports_unknown_book(
    monkeypatch, capsys, tmp_path, quiet_loggers
):
    logger = quiet_loggers(monkeypatch, export_book_cli)
    _patch_use_case(monkeypatch, error=LookupError("Book not found: x"))
    output = tmp_path / "book.xml"

    assert export_book_cli.main(["x", str(output)]) == 1

    assert not output.exists()
    assert "Export failed: Book not found: x" in capsys.readouterr().out
    logger.error.assert_called_once_with("Book not found: x")
