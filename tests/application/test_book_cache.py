"""Tests for the book-scoped TTL cache."""

from unittest.mock import MagicMock

from src.application.cache import BookScopedCache


class _Clock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def test_entries_expire_after_ttl():
    clock = _Clock()
    cache = BookScopedCache(ttl_seconds=10, clock=clock)
    cache.set("book", "guids", ["a"])

    clock.now += 9.9
    assert cache.get("book", "guids") == ["a"]

    clock.now += 0.1
    assert cache.get("book", "guids", "expired") == "expired"


def test_get_or_load_calls_loader_once_per_ttl():
    clock = _Clock()
    cache = BookScopedCache(ttl_seconds=5, clock=clock)
    loader = MagicMock(return_value=["a", "b"])

    assert cache.get_or_load("book", "guids", loader) == ["a", "b"]
    assert cache.get_or_load("book", "guids", loader) == ["a", "b"]
    assert loader.call_count == 1

    clock.now += 5
    cache.get_or_load("book", "guids", loader)
    assert loader.call_count == 2


def test_none_results_are_not_cached():
    cache = BookScopedCache(clock=_Clock())
    loader = MagicMock(return_value=None)

    cache.get_or_load("book", "earliest", loader)
    cache.get_or_load("book", "earliest", loader)

    assert loader.call_count == 2


def test_falsy_values_other_than_none_are_cached():
    cache = BookScopedCache(clock=_Clock())
    loader = MagicMock(return_value=[])

    cache.get_or_load("book", "guids", loader)
    cache.get_or_load("book", "guids", loader)

    assert loader.call_count == 1


def test_invalidate_drops_one_book_and_clear_drops_all():
    cache = BookScopedCache(clock=_Clock())
    cache.set("first", "guids", [1])
    cache.set("first", "earliest", 2)
    cache.set("second", "guids", [3])

    cache.invalidate("first")

    assert cache.get("first", "guids") is None
    assert cache.get("first", "earliest") is None
    assert cache.get("second", "guids") == [3]

    cache.clear()
    assert cache.get("second", "guids") is None
