"""Tests for the exchange_rate_cli adapter."""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

from src.adapters import exchange_rate_cli
from src.domain.models.rates import ExchangeRate


def _patch_use_case(monkeypatch, rate=None, error=None) -> MagicMock:
    use_case = MagicMock()
    use_case.execute.return_value = rate
    use_case.execute.side_effect = error
    monkeypatch.setattr(
        exchange_rate_cli, "build_exchange_rate_use_case", lambda: use_case
    )
    return use_case


def test_main_prints_rate(monkeypatch, capsys, quiet_loggers):
    quiet_loggers(monkeypatch, exchange_rate_cli)
    use_case = _patch_use_case(
        monkeypatch,
        ExchangeRate(
            from_currency="GBP",
            to_currency="EUR",
            rate=Decimal("1.17"),
            date=datetime(2024, 3, 1, tzinfo=timezone.utc),
            source="triangulated:USD",
        ),
    )

    code = exchange_rate_cli.main(["gbp", "eur", "--date", "2024-03-02"])

    assert code == 0
    _from, _to, as_of = use_case.execute.call_args.args
    assert as_of == datetime(2024, 3, 2, tzinfo=timezone.utc)
    assert capsys.readouterr().out.strip() == (
        "1 GBP = 1.17 EUR (triangulated:USD, 2024-03-01)"
    )


def test_main_ignores_invalid_date(monkeypatch, quiet_loggers):
    logger = quiet_loggers(monkeypatch, exchange_rate_cli)
    use_case = _patch_use_case(monkeypatch)

    exchange_rate_cli.main(["EUR", "USD", "--date", "soon"])

    assert use_case.execute.call_args.args[2] is None
    logger.warning.assert_called_once()


def test_main_reports_missing_rate(monkeypatch, capsys, quiet_loggers):
    quiet_loggers(monkeypatch, exchange_rate_cli)
    _patch_use_case(monkeypatch)

    assert exchange_rate_cli.main(["jpy", "usd"]) == 1

    assert "No rate from JPY to USD." in capsys.readouterr().out


def test_main_reports_unknown_currency(monkeypatch, capsys, quiet_loggers):
    logger = quiet_loggers(monkeypatch, exchange_rate_cli)
    _patch_use_case(
        monkeypatch, error=RuntimeError("Missing currency in commodities: XXX")
    )

    assert exchange_rate_cli.main(["XXX", "USD"]) == 1

    assert "Missing currency" in capsys.readouterr().out
    logger.error.assert_called_once()
