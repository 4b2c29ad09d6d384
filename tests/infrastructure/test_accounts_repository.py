"""Tests for per-account balance reads."""

from datetime import date
from decimal import Decimal

import pytest

from src.domain.models.numeric import GncNumeric
from src.infrastructure.accounts_repository import SqlAlchemyAccountsRepository
from tests.infrastructure.conftest import (
    ASSETS_GUID,
    CHECKING_GUID,
    GROCERIES_GUID,
)


@pytest.fixture
def repository(db_port, imported_book):
    return SqlAlchemyAccountsRepository(db_port)


def _balances(rows) -> dict[str, Decimal]:
    return {row.guid: row.balance.to_decimal() for row in rows}


def test_balances_cover_every_account(repository):
    balances = _balances(repository.fetch_account_balances(None))

    assert len(balances) == 5
    assert balances[CHECKING_GUID] == Decimal("-50.00")
    assert balances[GROCERIES_GUID] == Decimal("50.00")
    assert balances[ASSETS_GUID] == Decimal("0")


def test_balances_restricted_to_guids(repository):
    rows = repository.fetch_account_balances([CHECKING_GUID])

    [row] = rows
    assert row.name == "Checking"
    assert row.parent_guid == ASSETS_GUID
    assert row.account_type == "BANK"
    assert row.balance.compare(GncNumeric(-50)) == 0


def test_empty_guid_list_returns_nothing(repository):
    assert repository.fetch_account_balances([]) == []


@pytest.mark.parametrize(
    "start, end, expected",
    [
        (date(2024, 1, 15), date(2024, 1, 15), Decimal("-50.00")),
        (None, date(2024, 1, 14), Decimal("0")),
        (date(2024, 1, 16), None, Decimal("0")),
        (date(2024, 1, 1), date(2024, 1, 31), Decimal("-50.00")),
    ],
)
def test_date_bounds_include_whole_end_day(repository, start, end, expected):
    rows = repository.fetch_account_balances([CHECKING_GUID], start, end)

    assert rows[0].balance.to_decimal() == expected


def test_date_params_use_exclusive_next_day():
    params = SqlAlchemyAccountsRepository._build_date_params(
        date(2024, 1, 1),
        date(2024, 1, 31),
    )

    assert params == {
        "start_date": "2024-01-01 00:00:00",
        "end_date": "2024-02-01 00:00:00",
    }
