"""Database ports for the ledger core.

This module defines the application-layer protocol for accessing the
GnuCash database engine. Infrastructure implementations are expected to
provide concrete adapters that satisfy it.
"""

from typing import Protocol

from sqlalchemy.engine import Engine


class DatabaseEnginePort(Protocol):
    """Port exposing the engine of the GnuCash SQL database.

    Application use cases can depend on this protocol instead of concrete
    database drivers or configuration details.
    """

    def get_gnucash_engine(self) -> Engine:
        """Get the engine for the GnuCash database.

        Returns:
            Engine: SQLAlchemy engine connected to the GnuCash backend.
        """


__all__ = ["DatabaseEnginePort"]
