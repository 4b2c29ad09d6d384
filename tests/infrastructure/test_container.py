"""Tests for the composition root."""

from unittest.mock import MagicMock

import pytest

from src.application.cache import BookScopedCache
from src.application.use_cases import (
    DeleteAccountUseCase,
    ExportBookUseCase,
    GetAccountHierarchyUseCase,
    GetBookScopeUseCase,
    GetExchangeRateUseCase,
    ImportBookUseCase,
    MoveAccountUseCase,
    PostTransactionUseCase,
)
from src.infrastructure import container
from src.infrastructure.gnucash_repository import SqlAlchemyGnuCashRepository
from src.infrastructure.settings import GnuCashSettings


@pytest.fixture(autouse=True)
def _fresh_cache(monkeypatch):
    monkeypatch.setattr(container, "_book_cache", None)
    monkeypatch.setattr(container, "get_app_logger", lambda: MagicMock())


@pytest.fixture
def settings() -> GnuCashSettings:
    return GnuCashSettings(cache_ttl_seconds=5, hub_currencies=("EUR",))


def test_build_book_cache_is_shared(settings):
    first = container.build_book_cache(settings)
    second = container.build_book_cache()

    assert isinstance(first, BookScopedCache)
    assert second is first


def test_build_book_repository_uses_settings_backend(settings):
    repository = container.build_book_repository(MagicMock(), settings)

    assert isinstance(repository, SqlAlchemyGnuCashRepository)


def test_build_exchange_rate_use_case_takes_hubs(settings):
    use_case = container.build_exchange_rate_use_case(MagicMock(), settings)

    assert isinstance(use_case, GetExchangeRateUseCase)
    assert use_case._resolver._hubs == ("EUR",)


def test_mutating_use_cases_share_the_book_cache(settings):
    db_port = MagicMock()

    scope = container.build_book_scope_use_case(db_port, settings)
    move = container.build_move_account_use_case(db_port, settings)
    delete = container.build_delete_account_use_case(db_port, settings)

    assert isinstance(scope, GetBookScopeUseCase)
    assert isinstance(move, MoveAccountUseCase)
    assert isinstance(delete, DeleteAccountUseCase)
    assert scope._cache is move._cache is delete._cache


@pytest.mark.parametrize(
    "builder, expected",
    [
        ("build_import_book_use_case", ImportBookUseCase),
        ("build_post_transaction_use_case", PostTransactionUseCase),
    ],
)
def test_write_use_case_builders(builder, expected):
    use_case = getattr(container, builder)(MagicMock())

    assert isinstance(use_case, expected)


def test_read_use_case_builders(settings):
    db_port = MagicMock()

    assert isinstance(
        container.build_export_book_use_case(db_port, settings),
        ExportBookUseCase,
    )
    assert isinstance(
        container.build_account_hierarchy_use_case(db_port, settings),
        GetAccountHierarchyUseCase,
    )


def test_build_database_adapter_returns_port():
    adapter = container.build_database_adapter()

    assert hasattr(adapter, "get_gnucash_engine")
