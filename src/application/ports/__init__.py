"""Application ports package."""

from .accounts_repository import AccountsRepositoryPort
from .audit import AuditSinkPort
from .book_scope import BookScopePort
from .database import DatabaseEnginePort
from .interchange import InterchangeCodecPort
from .ledger import LedgerUnitOfWorkPort, LedgerWriterPort
from .prices import PriceRepositoryPort
from .snapshot import BookSnapshotPort

__all__ = [
    "AccountsRepositoryPort",
    "AuditSinkPort",
    "BookScopePort",
    "BookSnapshotPort",
    "DatabaseEnginePort",
    "InterchangeCodecPort",
    "LedgerUnitOfWorkPort",
    "LedgerWriterPort",
    "PriceRepositoryPort",
]
