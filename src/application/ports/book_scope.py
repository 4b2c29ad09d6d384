"""Port for resolving which accounts belong to a book."""

from datetime import datetime
from typing import Protocol


class BookScopePort(Protocol):
    """Port exposing the account set under a book root."""

    def fetch_default_root_guid(self) -> str | None:
        """Return the root account GUID of the first book, if any."""

    def fetch_account_guids(self, root_guid: str) -> list[str]:
        """Return the root GUID followed by every descendant GUID."""

    def fetch_earliest_post_date(self, root_guid: str) -> datetime | None:
        """Return the earliest post date of transactions in the book."""


__all__ = ["BookScopePort"]
