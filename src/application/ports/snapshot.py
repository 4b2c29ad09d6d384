"""Port for reading a whole book for export."""

from typing import Protocol

from src.domain.models.ledger import BookSnapshot


class BookSnapshotPort(Protocol):
    """Port exposing every entity of one book."""

    def fetch_book_snapshot(self, root_guid: str) -> BookSnapshot:
        """Return the book whose root account is ``root_guid``.

        Raises:
            LookupError: If no book has that root account.
        """


__all__ = ["BookSnapshotPort"]
