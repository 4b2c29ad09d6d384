"""Select the repository that reads books for export, scoping and rates."""

from collections.abc import Callable

from src.application.ports.database import DatabaseEnginePort
from src.infrastructure.gnucash_repository import SqlAlchemyGnuCashRepository
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.piecash_repository import PieCashGnuCashRepository
from src.infrastructure.settings import SUPPORTED_BACKENDS, GnuCashSettings

BookRepository = SqlAlchemyGnuCashRepository | PieCashGnuCashRepository


def _sqlalchemy_backend(db_port, settings, logger) -> BookRepository:
    return SqlAlchemyGnuCashRepository(db_port)


def _piecash_backend(db_port, settings, logger) -> BookRepository:
    if settings.piecash_file is None:
        logger.warning(
            "No GnuCash book configured; set PIECASH_FILE or place a single "
            ".gnucash file under data/"
        )
        raise RuntimeError("PieCash backend requires a PIECASH_FILE path.")
    logger.info(f"Reading books through piecash from {settings.piecash_file}")
    return PieCashGnuCashRepository(settings.piecash_file, logger=logger)


_BACKENDS: dict[str, Callable[..., BookRepository]] = {
    "sqlalchemy": _sqlalchemy_backend,
    "piecash": _piecash_backend,
}


def create_book_repository(
    db_port: DatabaseEnginePort,
    settings: GnuCashSettings,
    logger=None,
) -> BookRepository:
    """Build the read repository named by ``settings.backend``.

    Both backends serve prices, book scope and book snapshots, so callers
    never depend on which one is active.

    Raises:
        RuntimeError: If the piecash backend has no book location.
        ValueError: If the backend name is not supported.
    """
    resolved_logger = logger or get_app_logger()
    backend = (settings.backend or "").strip().lower()
    builder = _BACKENDS.get(backend)
    if builder is None:
        raise ValueError(
            f"Unsupported GnuCash backend: {backend}. "
            f"Expected {' or '.join(SUPPORTED_BACKENDS)}."
        )
    return builder(db_port, settings, resolved_logger)


__all__ = ["BookRepository", "create_book_repository"]
