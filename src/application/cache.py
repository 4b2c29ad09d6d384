"""Time-bounded cache keyed by book identity."""

import time
from collections.abc import Callable, Hashable
from typing import Any

from src.domain.constants import DEFAULT_BOOK_CACHE_TTL_SECONDS


class BookScopedCache:
    """Cache values per (book, name) for a fixed number of seconds.

    Results may be up to ``ttl_seconds`` stale. Call ``invalidate`` when a
    book's root or account set changes.

    Args:
        ttl_seconds: Lifetime of an entry.
        clock: Monotonic time source, replaceable in tests.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_BOOK_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[tuple[Hashable, str], tuple[float, Any]] = {}

    def get(self, book_key: Hashable, name: str, default=None):
        entry = self._entries.get((book_key, name))
        if entry is None:
            return default
        stored_at, value = entry
        if self._clock() - stored_at >= self._ttl:
            del self._entries[(book_key, name)]
            return default
        return value

    def set(self, book_key: Hashable, name: str, value) -> None:
        self._entries[(book_key, name)] = (self._clock(), value)

    def get_or_load(
        self,
        book_key: Hashable,
        name: str,
        loader: Callable[[], Any],
    ):
        """Return the cached value or store the loader's result.

        A None result is not cached, so the next call loads again.
        """
        missing = object()
        value = self.get(book_key, name, missing)
        if value is not missing:
            return value
        value = loader()
        if value is not None:
            self.set(book_key, name, value)
        return value

    def invalidate(self, book_key: Hashable) -> None:
        """Drop every entry of one book."""
        for key in [key for key in self._entries if key[0] == book_key]:
            del self._entries[key]

    def clear(self) -> None:
        self._entries.clear()


__all__ = ["BookScopedCache"]
