"""Ports for writing ledger entities inside one database transaction."""

from contextlib import AbstractContextManager
from typing import Protocol

from src.domain.models.ledger import (
    Account,
    Book,
    Budget,
    Commodity,
    Price,
    Transaction,
)


class LedgerWriterPort(Protocol):
    """Writes bound to an open database transaction."""

    def fetch_commodities(self) -> list[Commodity]:
        """Return every stored commodity."""

    def fetch_account_parents(self) -> dict[str, str | None]:
        """Return the parent GUID of every stored account."""

    def fetch_account(self, guid: str) -> Account | None:
        """Return one account, or None when it does not exist."""

    def count_splits(self, account_guid: str) -> int:
        """Return the number of splits posted to an account."""

    def count_children(self, account_guid: str) -> int:
        """Return the number of direct child accounts."""

    def insert_commodities(self, commodities: list[Commodity]) -> int:
        """Insert commodities and return how many were written."""

    def insert_accounts(self, accounts: list[Account]) -> int:
        """Insert accounts in the given order."""

    def insert_book(self, book: Book) -> None:
        """Insert a book record."""

    def insert_transactions(self, transactions: list[Transaction]) -> int:
        """Insert transactions together with their splits."""

    def insert_prices(self, prices: list[Price]) -> int:
        """Insert prices."""

    def insert_budgets(self, budgets: list[Budget]) -> int:
        """Insert budgets together with their amounts."""

    def update_account_parent(self, guid: str, parent_guid: str) -> None:
        """Re-parent an account."""

    def delete_account(self, guid: str) -> None:
        """Delete an account row."""


class LedgerUnitOfWorkPort(Protocol):
    """Factory of atomic write scopes.

    Leaving the scope normally commits; an exception rolls back every
    write made through the yielded writer.
    """

    def begin(self) -> AbstractContextManager[LedgerWriterPort]:
        """Open a transaction and yield a writer bound to it."""


__all__ = ["LedgerWriterPort", "LedgerUnitOfWorkPort"]
