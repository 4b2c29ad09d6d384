"""CLI adapter printing the exchange rate between two currencies."""

import argparse
from datetime import datetime

from src.domain.services.dates import parse_timestamp
from src.infrastructure.container import build_exchange_rate_use_case
from src.infrastructure.logging.logger import get_app_logger, get_usage_logger


def _parse_date(value: str | None, logger) -> datetime | None:
    """Parse a date string leniently.

    Args:
        value: Date string such as YYYY-MM-DD.
        logger: Logger used for warnings.

    Returns:
        datetime | None: Parsed date or None when absent or invalid.
    """
    if not value:
        return None
    parsed = parse_timestamp(value)
    if parsed is None:
        logger.warning(f"Invalid date '{value}'. Using the current time.")
    return parsed


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Resolve the rate converting FROM into TO.",
    )
    parser.add_argument("from_currency", help="Source mnemonic, e.g. EUR")
    parser.add_argument("to_currency", help="Target mnemonic, e.g. USD")
    parser.add_argument("--date", help="Resolve as of this date")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the lookup and print a one-line result."""
    args = _build_parser().parse_args(argv)
    logger = get_app_logger()
    get_usage_logger().info(
        f"exchange_rate_cli {args.from_currency}->{args.to_currency}"
    )
    as_of = _parse_date(args.date, logger)
    use_case = build_exchange_rate_use_case()
    try:
        rate = use_case.execute(args.from_currency, args.to_currency, as_of)
    except RuntimeError as exc:
        logger.error(str(exc))
        print(str(exc))
        return 1

    if rate is None:
        print(
            f"No rate from {args.from_currency.upper()} "
            f"to {args.to_currency.upper()}."
        )
        return 1
    print(
        f"1 {rate.from_currency} = {rate.rate} {rate.to_currency} "
        f"({rate.source}, {rate.date:%Y-%m-%d})"
    )
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
