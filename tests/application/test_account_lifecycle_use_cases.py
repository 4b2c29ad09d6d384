"""Tests for the MoveAccountUseCase and DeleteAccountUseCase."""

from unittest.mock import MagicMock

import pytest

from src.application.cache import BookScopedCache
from src.application.use_cases.delete_account import DeleteAccountUseCase
from src.application.use_cases.move_account import MoveAccountUseCase
from src.domain.exceptions import AccountDeletionError, InvalidAccountMoveError
from src.domain.models.ledger import Account

PARENTS = {"root": None, "assets": "root", "cash": "assets", "food": "root"}


def _account(guid, account_type="ASSET") -> Account:
    return Account(
        guid=guid,
        name=guid.title(),
        account_type=account_type,
        commodity_guid="usd",
        parent_guid=PARENTS.get(guid),
    )


@pytest.fixture
def cache() -> BookScopedCache:
    cache = BookScopedCache()
    cache.set("root", "account_guids", list(PARENTS))
    return cache


@pytest.fixture
def lifecycle_writer(writer):
    writer.fetch_account.side_effect = lambda guid: (
        _account(guid) if guid in PARENTS else None
    )
    writer.fetch_account_parents.return_value = dict(PARENTS)
    writer.count_splits.return_value = 0
    writer.count_children.return_value = 0
    return writer


def test_move_updates_parent_and_clears_cache(
    unit_of_work, lifecycle_writer, cache
):
    audit = MagicMock()

    MoveAccountUseCase(unit_of_work, audit, cache, MagicMock()).execute(
        "cash", "food"
    )

    lifecycle_writer.update_account_parent.assert_called_once_with(
        "cash", "food"
    )
    assert cache.get("root", "account_guids") is None
    audit.record.assert_called_once_with(
        "UPDATE",
        "ACCOUNT",
        "cash",
        {"parent_guid": "assets"},
        {"parent_guid": "food"},
    )


def test_move_under_descendant_is_rejected(
    unit_of_work, lifecycle_writer, cache
):
    audit = MagicMock()

    with pytest.raises(InvalidAccountMoveError):
        MoveAccountUseCase(unit_of_work, audit, cache, MagicMock()).execute(
            "assets", "cash"
        )

    lifecycle_writer.update_account_parent.assert_not_called()
    audit.record.assert_not_called()
    assert cache.get("root", "account_guids") == list(PARENTS)


def test_root_account_cannot_be_moved(unit_of_work, lifecycle_writer):
    lifecycle_writer.fetch_account.side_effect = None
    lifecycle_writer.fetch_account.return_value = _account("root", "ROOT")

    with pytest.raises(InvalidAccountMoveError, match="root"):
        MoveAccountUseCase(unit_of_work, logger=MagicMock()).execute(
            "root", "food"
        )


def test_delete_removes_empty_leaf(unit_of_work, lifecycle_writer, cache):
    audit = MagicMock()

    DeleteAccountUseCase(unit_of_work, audit, cache, MagicMock()).execute(
        "food"
    )

    lifecycle_writer.delete_account.assert_called_once_with("food")
    assert cache.get("root", "account_guids") is None
    action, entity, guid, old, new = audit.record.call_args.args
    assert (action, entity, guid, new) == ("DELETE", "ACCOUNT", "food", None)
    assert old == {
        "name": "Food",
        "account_type": "ASSET",
        "parent_guid": "root",
    }


def test_delete_missing_account(unit_of_work, lifecycle_writer):
    with pytest.raises(AccountDeletionError, match="not found"):
        DeleteAccountUseCase(unit_of_work, logger=MagicMock()).execute("ghost")

    lifecycle_writer.delete_account.assert_not_called()


@pytest.mark.parametrize(
    "splits, children, message",
    [(2, 0, "2 splits"), (0, 1, "1 child accounts")],
)
def test_delete_refuses_used_accounts(
    unit_of_work, lifecycle_writer, cache, splits, children, message
):
    lifecycle_writer.count_splits.return_value = splits
    lifecycle_writer.count_children.return_value = children

    with pytest.raises(AccountDeletionError, match=message):
        DeleteAccountUseCase(
            unit_of_work, cache=cache, logger=MagicMock()
        ).execute("assets")

    lifecycle_writer.delete_account.assert_not_called()
    assert cache.get("root", "account_guids") == list(PARENTS)
