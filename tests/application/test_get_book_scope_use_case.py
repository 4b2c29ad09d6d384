"""Tests for the GetBookScopeUseCase."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

from src.application.cache import BookScopedCache
from src.application.use_cases.get_book_scope import GetBookScopeUseCase


def _scope_port() -> MagicMock:
    port = MagicMock()
    port.fetch_default_root_guid.return_value = "root"
    port.fetch_account_guids.return_value = ["root", "assets", "cash"]
    port.fetch_earliest_post_date.return_value = datetime(
        2021, 5, 1, tzinfo=timezone.utc
    )
    return port


def test_account_guids_defaults_to_first_book_and_is_cached():
    port = _scope_port()
    use_case = GetBookScopeUseCase(port, BookScopedCache(), MagicMock())

    first = use_case.account_guids()
    second = use_case.account_guids("root")

    assert first == second == ["root", "assets", "cash"]
    port.fetch_account_guids.assert_called_once_with("root")


def test_returned_guid_list_is_a_copy():
    use_case = GetBookScopeUseCase(_scope_port(), logger=MagicMock())

    use_case.account_guids().append("mutated")

    assert use_case.account_guids() == ["root", "assets", "cash"]


def test_account_guids_without_book_warns():
    port = _scope_port()
    port.fetch_default_root_guid.return_value = None
    logger = MagicMock()

    assert GetBookScopeUseCase(port, logger=logger).account_guids() == []
    logger.warning.assert_called_once_with("No book root account found")
    port.fetch_account_guids.assert_not_called()


def test_earliest_date_is_keyed_by_root():
    port = _scope_port()
    use_case = GetBookScopeUseCase(port, logger=MagicMock())

    assert use_case.earliest_date("root").year == 2021
    use_case.earliest_date("other")

    assert [c.args for c in port.fetch_earliest_post_date.call_args_list] == [
        ("root",),
        ("other",),
    ]


def test_earliest_date_defaults_when_book_is_empty():
    port = _scope_port()
    port.fetch_earliest_post_date.return_value = None

    value = GetBookScopeUseCase(port, logger=MagicMock()).earliest_date()

    assert value == datetime(2000, 1, 1, tzinfo=timezone.utc)


def test_invalidate_reloads_scope():
    port = _scope_port()
    use_case = GetBookScopeUseCase(port, logger=MagicMock())
    use_case.account_guids("root")

    use_case.invalidate("root")
    use_case.account_guids("root")
    use_case.invalidate()
    use_case.account_guids("root")

    assert port.fetch_account_guids.call_count == 3
