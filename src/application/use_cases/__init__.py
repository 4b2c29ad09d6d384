"""Application use cases package."""

from .delete_account import DeleteAccountUseCase
from .export_book import ExportBookResult, ExportBookUseCase
from .get_account_hierarchy import GetAccountHierarchyUseCase
from .get_book_scope import GetBookScopeUseCase
from .get_exchange_rate import GetExchangeRateUseCase
from .import_book import ImportBookUseCase
from .move_account import MoveAccountUseCase
from .post_transaction import PostTransactionResult, PostTransactionUseCase

__all__ = [
    "DeleteAccountUseCase",
    "ExportBookResult",
    "ExportBookUseCase",
    "GetAccountHierarchyUseCase",
    "GetBookScopeUseCase",
    "GetExchangeRateUseCase",
    "ImportBookUseCase",
    "MoveAccountUseCase",
    "PostTransactionResult",
    "PostTransactionUseCase",
]
