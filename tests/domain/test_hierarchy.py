"""Tests for account tree roll-up and traversal."""

from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock

from src.domain.models.accounts import AccountBalance
from src.domain.models.numeric import GncNumeric
from src.domain.services.hierarchy import (
    build_account_path_map,
    build_hierarchy,
    collect_descendants,
)


def _balance(guid, name, parent, amount, previous=None) -> AccountBalance:
    return AccountBalance(
        guid=guid,
        name=name,
        account_type="ROOT" if parent is None else "ASSET",
        parent_guid=parent,
        balance=GncNumeric.from_decimal(amount),
        previous_balance=(
            None if previous is None else GncNumeric.from_decimal(previous)
        ),
    )


def _tree() -> list[AccountBalance]:
    return [
        _balance("root", "Root Account", None, "0"),
        _balance("assets", "Assets", "root", "10"),
        _balance("checking", "checking", "assets", "100.50"),
        _balance("savings", "Savings", "assets", "-20"),
        _balance("bank", "Bank", "assets", "5"),
        _balance("expenses", "Expenses", "root", "7"),
    ]


def test_amounts_roll_up_to_parents():
    items = build_hierarchy(_tree(), "root")

    assert [item.name for item in items] == ["Assets", "Expenses"]
    assets = items[0]
    assert assets.amount.to_decimal() == Decimal("95.50")
    assert assets.depth == 0
    assert [child.name for child in assets.children] == [
        "Bank",
        "checking",
        "Savings",
    ]
    assert assets.children[0].depth == 1


def test_root_is_not_returned_but_top_level_without_root_is():
    items = build_hierarchy(_tree())

    assert [item.name for item in items] == ["Root Account"]
    assert items[0].amount.to_decimal() == Decimal("102.50")


def test_orphan_accounts_become_top_level_items():
    rows = _tree() + [_balance("orphan", "Archive", "gone", "3")]

    items = build_hierarchy(rows, "root")

    assert [item.name for item in items] == ["Archive", "Assets", "Expenses"]


def test_previous_amounts_roll_up():
    rows = [
        _balance("assets", "Assets", "root", "1", previous="2"),
        _balance("cash", "Cash", "assets", "3", previous="4"),
    ]

    [assets] = build_hierarchy(rows, "root")

    assert assets.amount.to_decimal() == Decimal("4")
    assert assets.previous_amount.to_decimal() == Decimal("6")


def test_previous_amount_absent_without_comparison():
    [assets, _expenses] = build_hierarchy(_tree(), "root")

    assert assets.previous_amount is None


def test_parent_cycle_terminates_and_warns():
    """Each account of a cycle appears once."""
    logger = MagicMock()
    rows = [
        _balance("a", "Alpha", "b", "1"),
        _balance("b", "Beta", "a", "2"),
    ]

    items = build_hierarchy(rows, logger=logger)

    assert [item.name for item in items] == ["Alpha"]
    assert [child.name for child in items[0].children] == ["Beta"]
    assert items[0].amount.to_decimal() == Decimal("3")
    assert logger.warning.call_count == 2


def test_account_path_map_skips_root():
    accounts = [
        SimpleNamespace(
            guid="root", name="Root Account", account_type="ROOT",
            parent_guid=None,
        ),
        SimpleNamespace(
            guid="assets", name="Assets", account_type="ASSET",
            parent_guid="root",
        ),
        SimpleNamespace(
            guid="checking", name="Checking", account_type="BANK",
            parent_guid="assets",
        ),
    ]

    paths = build_account_path_map(accounts)

    assert paths == {
        "root": "",
        "assets": "Assets",
        "checking": "Assets:Checking",
    }


def test_account_path_map_stops_on_cycle():
    accounts = [
        SimpleNamespace(
            guid="a", name="A", account_type="ASSET", parent_guid="b"
        ),
        SimpleNamespace(
            guid="b", name="B", account_type="ASSET", parent_guid="a"
        ),
    ]

    assert build_account_path_map(accounts) == {"a": "B:A", "b": "A:B"}


def test_collect_descendants_breadth_first():
    rows = _tree()

    assert collect_descendants(rows, "root") == [
        "root",
        "assets",
        "expenses",
        "bank",
        "checking",
        "savings",
    ]
    assert collect_descendants(rows, "assets", include_root=False) == [
        "bank",
        "checking",
        "savings",
    ]
    assert collect_descendants(rows, "missing") == ["missing"]


def test_thirds_roll_up_exactly():
    rows = [
        _balance("pot", "Pot", "root", "0"),
        *(
            AccountBalance(
                guid=f"share{index}",
                name=f"Share {index}",
                account_type="ASSET",
                parent_guid="pot",
                balance=GncNumeric(1, 3),
            )
            for index in range(3)
        ),
    ]

    [pot] = build_hierarchy(rows, "root")

    assert pot.amount.compare(GncNumeric(1)) == 0
    assert pot.amount.to_decimal() == Decimal("1")
    assert pot.amount.to_decimal_string() == "1"


def test_deep_account_chain_rolls_up_without_recursion_limit():
    depth = 3000
    rows = [_balance("a0", "Level 0", "root", "0.01")]
    rows += [
        _balance(f"a{index}", f"Level {index}", f"a{index - 1}", "0.01")
        for index in range(1, depth)
    ]

    [top] = build_hierarchy(rows, "root")

    assert top.amount.to_decimal() == Decimal("30.00")
    item = top
    while item.children:
        [item] = item.children
    assert item.guid == f"a{depth - 1}"
    assert item.depth == depth - 1
    assert item.amount.to_decimal() == Decimal("0.01")
