"""Composition root for wiring infrastructure adapters."""

from typing import Optional

from src.application.cache import BookScopedCache
from src.application.ports.accounts_repository import AccountsRepositoryPort
from src.application.ports.database import DatabaseEnginePort
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
from src.infrastructure.accounts_repository import (
    SqlAlchemyAccountsRepository,
)
from src.infrastructure.audit_repository import SqlAlchemyAuditSink
from src.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from src.infrastructure.book_repository_factory import (
    BookRepository,
    create_book_repository,
)
from src.infrastructure.gnucash_xml import GnuCashXmlCodec
from src.infrastructure.ledger_repository import SqlAlchemyLedgerUnitOfWork
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.settings import GnuCashSettings

_book_cache: Optional[BookScopedCache] = None


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_book_cache(settings: GnuCashSettings | None = None) -> BookScopedCache:
    """Return the process-wide book scope cache."""
    global _book_cache
    if _book_cache is None:
        resolved = settings or GnuCashSettings.from_env()
        _book_cache = BookScopedCache(ttl_seconds=resolved.cache_ttl_seconds)
    return _book_cache


def build_book_repository(
    db_port: DatabaseEnginePort | None = None,
    settings: GnuCashSettings | None = None,
) -> BookRepository:
    """Return the configured read repository (prices, scope, snapshots)."""
    resolved_db = db_port or build_database_adapter()
    resolved = settings or GnuCashSettings.from_env()
    return create_book_repository(resolved_db, resolved, get_app_logger())


def build_accounts_repository(
    db_port: DatabaseEnginePort | None = None,
) -> AccountsRepositoryPort:
    """Return the per-account balance repository."""
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyAccountsRepository(resolved_db)


def build_import_book_use_case(
    db_port: DatabaseEnginePort | None = None,
    allow_currency_fallback: bool = True,
) -> ImportBookUseCase:
    resolved_db = db_port or build_database_adapter()
    logger = get_app_logger()
    return ImportBookUseCase(
        GnuCashXmlCodec(),
        SqlAlchemyLedgerUnitOfWork(resolved_db, logger=logger),
        logger=logger,
        allow_currency_fallback=allow_currency_fallback,
    )


def build_export_book_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: GnuCashSettings | None = None,
) -> ExportBookUseCase:
    return ExportBookUseCase(
        build_book_repository(db_port, settings),
        GnuCashXmlCodec(),
        logger=get_app_logger(),
    )


def build_exchange_rate_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: GnuCashSettings | None = None,
) -> GetExchangeRateUseCase:
    resolved = settings or GnuCashSettings.from_env()
    return GetExchangeRateUseCase(
        build_book_repository(db_port, resolved),
        hub_mnemonics=resolved.hub_currencies,
        logger=get_app_logger(),
    )


def build_book_scope_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: GnuCashSettings | None = None,
) -> GetBookScopeUseCase:
    resolved = settings or GnuCashSettings.from_env()
    return GetBookScopeUseCase(
        build_book_repository(db_port, resolved),
        cache=build_book_cache(resolved),
        logger=get_app_logger(),
    )


def build_account_hierarchy_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: GnuCashSettings | None = None,
) -> GetAccountHierarchyUseCase:
    resolved_db = db_port or build_database_adapter()
    return GetAccountHierarchyUseCase(
        build_accounts_repository(resolved_db),
        build_book_scope_use_case(resolved_db, settings),
        logger=get_app_logger(),
    )


def build_post_transaction_use_case(
    db_port: DatabaseEnginePort | None = None,
) -> PostTransactionUseCase:
    resolved_db = db_port or build_database_adapter()
    logger = get_app_logger()
    return PostTransactionUseCase(
        SqlAlchemyLedgerUnitOfWork(resolved_db, logger=logger),
        audit=SqlAlchemyAuditSink(resolved_db, logger=logger),
        logger=logger,
    )


def build_move_account_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: GnuCashSettings | None = None,
) -> MoveAccountUseCase:
    resolved_db = db_port or build_database_adapter()
    logger = get_app_logger()
    return MoveAccountUseCase(
        SqlAlchemyLedgerUnitOfWork(resolved_db, logger=logger),
        audit=SqlAlchemyAuditSink(resolved_db, logger=logger),
        cache=build_book_cache(settings),
        logger=logger,
    )


def build_delete_account_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: GnuCashSettings | None = None,
) -> DeleteAccountUseCase:
    resolved_db = db_port or build_database_adapter()
    logger = get_app_logger()
    return DeleteAccountUseCase(
        SqlAlchemyLedgerUnitOfWork(resolved_db, logger=logger),
        audit=SqlAlchemyAuditSink(resolved_db, logger=logger),
        cache=build_book_cache(settings),
        logger=logger,
    )


__all__ = [
    "build_database_adapter",
    "build_book_cache",
    "build_book_repository",
    "build_accounts_repository",
    "build_import_book_use_case",
    "build_export_book_use_case",
    "build_exchange_rate_use_case",
    "build_book_scope_use_case",
    "build_account_hierarchy_use_case",
    "build_post_transaction_use_case",
    "build_move_account_use_case",
    "build_delete_account_use_case",
]
