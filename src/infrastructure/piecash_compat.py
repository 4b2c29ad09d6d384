"""Compatibility helpers for importing piecash and opening books."""

from __future__ import annotations

import inspect
import warnings
from pathlib import Path
from urllib.parse import urlparse

from sqlalchemy.exc import SAWarning

_PIECASH = None


def _patch_sqlalchemy_for_piecash() -> None:
    """Drop the ``constructor`` argument piecash passes to SQLAlchemy 2."""
    try:
        from sqlalchemy.orm import decl_api
    except ImportError:
        return

    original = decl_api.registry.generate_base
    if getattr(original, "_piecash_patched", False):
        return
    if "constructor" in inspect.signature(original).parameters:
        return

    def _generate_base(self, *args, **kwargs):
        kwargs.pop("constructor", None)
        return original(self, *args, **kwargs)

    _generate_base._piecash_patched = True  # type: ignore[attr-defined]
    decl_api.registry.generate_base = _generate_base


def load_piecash():
    """Import piecash lazily, with compatibility patches applied.

    Raises:
        RuntimeError: If piecash is not installed.
    """
    global _PIECASH
    if _PIECASH is not None:
        return _PIECASH
    _patch_sqlalchemy_for_piecash()
    warnings.filterwarnings("ignore", category=SAWarning)
    try:
        import piecash
    except ImportError as exc:
        raise RuntimeError(
            "piecash is required for the piecash backend; "
            "install the 'piecash' extra"
        ) from exc
    _PIECASH = piecash
    return piecash


def book_location(book_path: Path | str) -> tuple[str | None, str | None]:
    """Split a book reference into ``(sqlite_file, uri)``.

    Args:
        book_path: Filesystem path, ``file://`` URI or database URI.

    Returns:
        tuple[str | None, str | None]: Exactly one element is set.
    """
    if isinstance(book_path, Path):
        return str(book_path), None
    parsed = urlparse(book_path)
    if parsed.scheme and parsed.scheme != "file":
        return None, book_path
    raw = parsed.path if parsed.scheme == "file" else book_path
    return str(Path(raw).expanduser().resolve()), None


def open_piecash_book(
    piecash,
    book_path: Path | str,
    *,
    readonly: bool = True,
    open_if_lock: bool = True,
):
    """Open a book read-only from a path or URI.

    Older piecash releases take the location positionally; newer ones
    accept ``sqlite_file``/``uri_conn`` keywords.
    """
    sqlite_file, uri = book_location(book_path)
    open_book = piecash.open_book
    try:
        params = inspect.signature(open_book).parameters
    except (TypeError, ValueError):
        params = None

    keyword_style = params is None or any(
        name in params for name in ("sqlite_file", "uri_conn")
    ) or any(p.kind == inspect.Parameter.VAR_KEYWORD for p in params.values())
    if keyword_style:
        return open_book(
            sqlite_file=sqlite_file,
            uri_conn=uri,
            readonly=readonly,
            open_if_lock=open_if_lock,
            check_exists=False,
        )
    return open_book(
        sqlite_file or uri,
        readonly=readonly,
        open_if_lock=open_if_lock,
    )


__all__ = ["load_piecash", "book_location", "open_piecash_book"]
