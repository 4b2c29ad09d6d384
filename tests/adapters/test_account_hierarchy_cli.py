"""Tests for the account_hierarchy_cli adapter."""

from datetime import date
from unittest.mock import MagicMock

from src.adapters import account_hierarchy_cli
from src.domain.models.accounts import LineItem
from src.domain.models.numeric import GncNumeric


def test_main_prints_indented_tree(monkeypatch, capsys, quiet_loggers):
    quiet_loggers(monkeypatch, account_hierarchy_cli)
    use_case = MagicMock()
    use_case.execute.return_value = [
        LineItem(
            guid="assets",
            name="Assets",
            amount=GncNumeric(15050, 100),
            depth=0,
            children=[
                LineItem(
                    guid="cash",
                    name="Cash",
                    amount=GncNumeric(15000, 100),
                    depth=1,
                    children=[
                        LineItem(
                            guid="coins",
                            name="Coins",
                            amount=GncNumeric(1, 3),
                            depth=2,
                        )
                    ],
                ),
                LineItem(
                    guid="card",
                    name="Card",
                    amount=GncNumeric(50, 100),
                    depth=1,
                ),
            ],
        )
    ]
    monkeypatch.setattr(
        account_hierarchy_cli,
        "build_account_hierarchy_use_case",
        lambda: use_case,
    )

    code = account_hierarchy_cli.main(
        ["--root", "root", "--start", "2024-01-01", "--end", "bad"]
    )

    assert code == 0
    use_case.execute.assert_called_once_with(
        root_guid="root",
        start_date=date(2024, 1, 1),
        end_date=None,
    )
    assert capsys.readouterr().out.splitlines() == [
        "Assets: 150.50",
        "  Cash: 150",
        "    Coins: 0.33",
        "  Card: 0.50",
    ]
