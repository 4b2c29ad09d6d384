"""CLI adapter exporting one book as GnuCash XML."""

import argparse
from pathlib import Path

from src.infrastructure.container import build_export_book_use_case
from src.infrastructure.logging.logger import get_app_logger, get_usage_logger


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Export the book rooted at ROOT_GUID as GnuCash XML.",
    )
    parser.add_argument("root_guid", help="GUID of the book's root account")
    parser.add_argument("output", type=Path, help="Destination file")
    parser.add_argument(
        "--gzip",
        action="store_true",
        help="Write gzip-compressed output.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the export and print a one-line summary."""
    args = _build_parser().parse_args(argv)
    logger = get_app_logger()
    get_usage_logger().info(
        f"export_book_cli root={args.root_guid} gzip={args.gzip}"
    )
    use_case = build_export_book_use_case()
    try:
        result = use_case.execute(args.root_guid, compress=args.gzip)
    except LookupError as exc:
        logger.error(str(exc))
        print(f"Export failed: {exc}")
        return 1

    if result.compressed:
        args.output.write_bytes(result.content)
    else:
        args.output.write_text(result.content, encoding="utf-8")

    counts = ", ".join(
        f"{count} {kind}" for kind, count in sorted(result.count_data.items())
    )
    print(f"Exported {counts} to {args.output}.")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
