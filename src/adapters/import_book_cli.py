"""CLI adapter importing a GnuCash XML file as a new book.

The whole document is written in one database transaction: a fatal
problem leaves the database untouched.
"""

import argparse
from pathlib import Path

from src.domain.exceptions import ImportAbortedError, InterchangeFormatError
from src.infrastructure.container import (
    build_database_adapter,
    build_import_book_use_case,
)
from src.infrastructure.gnucash_schema import ensure_schema
from src.infrastructure.logging.logger import get_app_logger, get_usage_logger


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Import a GnuCash XML (optionally gzip) file.",
    )
    parser.add_argument("file", type=Path, help="Path to the .gnucash/.xml file")
    parser.add_argument(
        "--create-schema",
        action="store_true",
        help="Create missing ledger tables before importing.",
    )
    parser.add_argument(
        "--no-currency-fallback",
        action="store_true",
        help="Abort instead of creating USD when no currency is available.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the import and print a one-line summary."""
    args = _build_parser().parse_args(argv)
    logger = get_app_logger()
    get_usage_logger().info(f"import_book_cli file={args.file}")
    db_adapter = build_database_adapter()
    if args.create_schema:
        ensure_schema(db_adapter.get_gnucash_engine())

    use_case = build_import_book_use_case(
        db_adapter,
        allow_currency_fallback=not args.no_currency_fallback,
    )
    try:
        summary = use_case.execute(args.file.read_bytes())
    except (InterchangeFormatError, ImportAbortedError) as exc:
        logger.error(f"Import of {args.file} failed: {exc}")
        print(f"Import failed: {exc}")
        return 1

    print(
        f"Imported book {summary.book_guid} (root {summary.root_account_guid}): "
        f"{summary.accounts} accounts, {summary.transactions} transactions, "
        f"{summary.splits} splits, {summary.prices} prices, "
        f"{summary.budgets} budgets, {len(summary.skipped)} skipped, "
        f"{len(summary.warnings)} warnings."
    )
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
