"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

import dotenv

from src.domain.constants import (
    DEFAULT_BOOK_CACHE_TTL_SECONDS,
    DEFAULT_HUB_CURRENCIES,
)
from src.infrastructure.logging.logger import get_app_logger
from src.utils.utils import get_project_root

SUPPORTED_BACKENDS = ("sqlalchemy", "piecash")


@dataclass(frozen=True)
class GnuCashSettings:
    """Settings for the ledger backends and caches.

    Attributes:
        backend: Read backend for exports (sqlalchemy or piecash).
        piecash_file: Optional path or URI to a ``.gnucash`` book.
        cache_ttl_seconds: Lifetime of book-scope cache entries.
        hub_currencies: Mnemonics tried, in order, for triangulation.
    """

    backend: str = "sqlalchemy"
    piecash_file: Optional[Path | str] = None
    cache_ttl_seconds: float = DEFAULT_BOOK_CACHE_TTL_SECONDS
    hub_currencies: tuple[str, ...] = DEFAULT_HUB_CURRENCIES

    @classmethod
    def from_env(cls) -> "GnuCashSettings":
        """Build settings from environment variables and ``.env``.

        Returns:
            GnuCashSettings: Settings sourced from environment variables.
        """
        dotenv.load_dotenv()
        logger = get_app_logger()
        backend = os.getenv("GNUCASH_BACKEND", "sqlalchemy").strip().lower()
        raw_piecash = os.getenv("PIECASH_FILE")
        if raw_piecash:
            piecash_file = cls._normalize_path(raw_piecash, logger=logger)
        else:
            piecash_file = cls._default_piecash_file(logger=logger)
        return cls(
            backend=backend,
            piecash_file=piecash_file,
            cache_ttl_seconds=cls._parse_ttl(
                os.getenv("BOOK_CACHE_TTL_SECONDS"),
                logger=logger,
            ),
            hub_currencies=cls._parse_hubs(os.getenv("FX_HUB_CURRENCIES")),
        )

    @staticmethod
    def _parse_ttl(raw: str | None, logger) -> float:
        if not raw:
            return DEFAULT_BOOK_CACHE_TTL_SECONDS
        try:
            value = float(raw)
        except ValueError:
            logger.warning(
                f"Invalid BOOK_CACHE_TTL_SECONDS={raw!r}; "
                f"using {DEFAULT_BOOK_CACHE_TTL_SECONDS}"
            )
            return DEFAULT_BOOK_CACHE_TTL_SECONDS
        return max(value, 0.0)

    @staticmethod
    def _parse_hubs(raw: str | None) -> tuple[str, ...]:
        """Parse a comma-separated list such as ``USD,EUR``."""
        if not raw:
            return DEFAULT_HUB_CURRENCIES
        hubs = tuple(
            part.strip().upper() for part in raw.split(",") if part.strip()
        )
        return hubs or DEFAULT_HUB_CURRENCIES

    @staticmethod
    def _normalize_path(
        raw_path: str,
        logger,
    ) -> Path | str:
        """Normalize the piecash file path or URI.

        Args:
            raw_path: Raw file path string.
            logger: Logger used for warnings.

        Returns:
            Path | str: Normalized filesystem path or URI string.
        """
        parsed = urlparse(raw_path)
        if parsed.scheme and parsed.scheme != "file":
            return raw_path
        if parsed.scheme == "file":
            raw_path = unquote(parsed.path)
        path = Path(raw_path).expanduser().resolve()
        if not path.exists():
            logger.warning(f"GnuCash book does not exist at {path}")
        return path

    @staticmethod
    def _default_piecash_file(logger) -> Path | None:
        """Return the single ``.gnucash`` book under ``data/``, if any."""
        data_dir = get_project_root() / "data"
        if not data_dir.exists():
            return None
        matches = sorted(data_dir.glob("*.gnucash"))
        if len(matches) == 1:
            return matches[0].resolve()
        if len(matches) > 1:
            logger.warning(
                "Multiple .gnucash files found in data/. "
                "Set PIECASH_FILE to choose one."
            )
        return None


__all__ = ["GnuCashSettings", "SUPPORTED_BACKENDS"]
