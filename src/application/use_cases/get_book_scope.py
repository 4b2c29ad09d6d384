"""Use case exposing the cached account scope of a book."""

from datetime import datetime

from src.application.cache import BookScopedCache
from src.application.ports.book_scope import BookScopePort
from src.domain.constants import DEFAULT_EARLIEST_DATE
from src.infrastructure.logging.logger import get_app_logger

ACCOUNT_GUIDS_ENTRY = "account_guids"
EARLIEST_DATE_ENTRY = "earliest_date"


class GetBookScopeUseCase:
    """Resolve the accounts and earliest activity date of a book.

    Both values are served from ``cache`` and can be stale by up to its TTL.
    """

    def __init__(
        self,
        scope_port: BookScopePort,
        cache: BookScopedCache | None = None,
        logger=None,
    ) -> None:
        self._scope_port = scope_port
        self._cache = cache or BookScopedCache()
        self._logger = logger or get_app_logger()

    def resolve_root(self, root_guid: str | None = None) -> str | None:
        if root_guid:
            return root_guid
        return self._scope_port.fetch_default_root_guid()

    def account_guids(self, root_guid: str | None = None) -> list[str]:
        """Return the root GUID and every account GUID beneath it.

        Args:
            root_guid: Book root; defaults to the first book's root.

        Returns:
            list[str]: Account GUIDs, empty when there is no book.
        """
        root = self.resolve_root(root_guid)
        if root is None:
            self._logger.warning("No book root account found")
            return []
        guids = self._cache.get_or_load(
            root,
            ACCOUNT_GUIDS_ENTRY,
            lambda: self._scope_port.fetch_account_guids(root),
        )
        return list(guids or [])

    def earliest_date(self, root_guid: str | None = None) -> datetime:
        """Return the earliest transaction post date of the book.

        Falls back to 2000-01-01 when the book has no transactions.
        """
        root = self.resolve_root(root_guid)
        if root is None:
            return DEFAULT_EARLIEST_DATE
        value = self._cache.get_or_load(
            root,
            EARLIEST_DATE_ENTRY,
            lambda: self._scope_port.fetch_earliest_post_date(root),
        )
        return value or DEFAULT_EARLIEST_DATE

    def invalidate(self, root_guid: str | None = None) -> None:
        """Drop cached scope data for one book, or for every book."""
        if root_guid is None:
            self._cache.clear()
        else:
            self._cache.invalidate(root_guid)


__all__ = ["GetBookScopeUseCase"]
