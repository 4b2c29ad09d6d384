"""CLI adapter printing the rolled-up account tree of a book."""

import argparse
from datetime import date

from src.domain.models.accounts import LineItem
from src.infrastructure.container import build_account_hierarchy_use_case
from src.infrastructure.logging.logger import get_app_logger, get_usage_logger


def _parse_date(value: str | None, logger) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        logger.warning(f"Invalid date '{value}'. Expected format YYYY-MM-DD.")
        return None


def _print_items(items: list[LineItem]) -> None:
    stack = list(reversed(items))
    while stack:
        item = stack.pop()
        amount = item.amount.to_decimal_string()
        print(f"{'  ' * item.depth}{item.name}: {amount}")
        stack.extend(reversed(item.children))


def main(argv: list[str] | None = None) -> int:
    """Print each account with its subtree total."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--root", help="Root account GUID of the book")
    parser.add_argument("--start", help="First post date, YYYY-MM-DD")
    parser.add_argument("--end", help="Last post date, YYYY-MM-DD")
    args = parser.parse_args(argv)

    logger = get_app_logger()
    get_usage_logger().info(f"account_hierarchy_cli root={args.root}")
    use_case = build_account_hierarchy_use_case()
    items = use_case.execute(
        root_guid=args.root,
        start_date=_parse_date(args.start, logger),
        end_date=_parse_date(args.end, logger),
    )
    _print_items(items)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
