"""Tests for double-entry transaction validation."""

from datetime import date

import pytest

from src.domain.models.validation import SplitInput, TransactionInput
from src.domain.services.validation import split_sum, validate_transaction

CURRENCY = "c" * 32
CHECKING = "a" * 32
FOOD = "e" * 32


def _tx(splits, **overrides) -> TransactionInput:
    values = {
        "currency_guid": CURRENCY,
        "post_date": "2024-01-15",
        "description": "Lunch",
        "splits": splits,
    }
    values.update(overrides)
    return TransactionInput(**values)


def _split(account, num, denom=100, **overrides) -> SplitInput:
    return SplitInput(account_guid=account, value_num=num, value_denom=denom,
                      **overrides)


def _fields(result) -> list[str]:
    return [error.field for error in result.errors]


def test_balanced_transaction_is_valid():
    result = validate_transaction(
        _tx([_split(CHECKING, -1250), _split(FOOD, 1250)])
    )

    assert result.valid
    assert result.errors == []


def test_mixed_denominators_balance_exactly():
    result = validate_transaction(
        _tx([_split(CHECKING, -1, 3), _split(FOOD, 1, 6), _split(FOOD, 1, 6)])
    )

    assert result.valid


def test_unbalanced_transaction_reports_sum():
    result = validate_transaction(
        _tx([_split(CHECKING, -1200), _split(FOOD, 1250)])
    )

    assert _fields(result) == ["splits"]
    assert result.errors[0].message == (
        "Splits must sum to zero (current sum: 0.50)"
    )


@pytest.mark.parametrize("num, valid", [(1, True), (2, False)])
def test_balance_tolerance_is_one_thousandth(num, valid):
    result = validate_transaction(
        _tx([_split(CHECKING, -1000, 1000), _split(FOOD, 1000 + num, 1000)])
    )

    assert result.valid is valid


def test_single_split_is_rejected():
    result = validate_transaction(_tx([_split(CHECKING, 0)]))

    assert "At least 2 splits are required (double-entry)" in [
        error.message for error in result.errors
    ]


def test_missing_splits_stop_validation():
    result = validate_transaction(_tx(None))

    assert _fields(result) == ["splits"]
    assert result.errors[0].message == "Splits are required"


def test_header_errors_are_collected():
    result = validate_transaction(
        _tx(
            [_split(CHECKING, -1), _split(FOOD, 1)],
            currency_guid=None,
            post_date="",
            description="   ",
        )
    )

    assert _fields(result) == ["currency_guid", "post_date", "description"]


def test_malformed_values_are_reported():
    result = validate_transaction(
        _tx(
            [_split(CHECKING, -1), _split(FOOD, 1)],
            currency_guid="usd",
            post_date="someday",
        )
    )

    messages = [error.message for error in result.errors]
    assert "Invalid currency GUID format" in messages
    assert "Invalid post date format" in messages


def test_split_field_errors_are_indexed():
    result = validate_transaction(
        _tx(
            [
                _split(None, None),
                _split("not-a-guid", 1, 0, quantity_denom=0),
                _split(FOOD, 1, reconcile_state="x"),
            ]
        )
    )

    assert _fields(result) == [
        "splits[0].account_guid",
        "splits[0].value_num",
        "splits[1].account_guid",
        "splits[1].value_denom",
        "splits[1].quantity_denom",
        "splits[2].reconcile_state",
        "splits",
    ]
    assert result.errors[0].message == "Split 1: Account is required"


def test_post_date_accepts_date_objects():
    result = validate_transaction(
        _tx(
            [_split(CHECKING, -1), _split(FOOD, 1)],
            post_date=date(2024, 1, 1),
        )
    )

    assert result.valid


def test_split_sum_treats_missing_parts_as_zero():
    total = split_sum([_split(CHECKING, None, None), _split(FOOD, 5, 0)])

    assert total.num == 5
