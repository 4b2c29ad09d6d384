"""Database infrastructure for the ledger core.

This module exposes helpers to create and reuse the SQLAlchemy engine
connected to the GnuCash SQL database (PostgreSQL, MySQL or SQLite). It
belongs to the infrastructure layer because it deals with external systems.
"""

import os
from typing import Optional

import dotenv
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import QueuePool

from src.application.ports.database import DatabaseEnginePort


def _get_env_var(name: str) -> str:
    """Read an environment variable or raise a descriptive error.

    Args:
        name: Name of the environment variable to read.

    Returns:
        str: The raw value of the environment variable.

    Raises:
        RuntimeError: If the environment variable is missing or empty.
    """
    dotenv.load_dotenv()
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing environment variable: {name}")
    return value


def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _create_engine(db_url: str) -> Engine:
    """Create a configured SQLAlchemy engine for the GnuCash database.

    Server databases get a small pool with health checks. SQLite files get
    the driver default pool and enforced foreign keys.

    Args:
        db_url: Fully qualified database URL (including driver and credentials)

    Returns:
        Engine: A SQLAlchemy engine instance.
    """
    if db_url.startswith("sqlite"):
        engine = create_engine(db_url, future=True)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_engine(
        db_url,
        poolclass=QueuePool,
        pool_size=5,
        max_overflow=5,
        pool_pre_ping=True,
        future=True,
    )


_gnucash_engine: Optional[Engine] = None


def get_gnucash_engine() -> Engine:
    """Get a singleton SQLAlchemy engine for the GnuCash database.

    Returns:
        Engine: Lazily initialized engine connected to the GnuCash backend.
    """
    global _gnucash_engine
    if _gnucash_engine is None:
        db_url = _get_env_var("GNUCASH_DB_URL")
        _gnucash_engine = _create_engine(db_url)
    return _gnucash_engine


class SqlAlchemyDatabaseEngineAdapter(DatabaseEnginePort):
    """DatabaseEnginePort implementation backed by a SQLAlchemy engine.

    The adapter hides configuration details (environment variables, pooling)
    behind the port so application use cases can depend only on the protocol.
    """

    def get_gnucash_engine(self) -> Engine:
        """Get the engine for the GnuCash database.

        Returns:
            Engine: SQLAlchemy engine connected to GnuCash.
        """
        return get_gnucash_engine()


__all__ = [
    "get_gnucash_engine",
    "SqlAlchemyDatabaseEngineAdapter",
]
