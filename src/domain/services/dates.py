"""Lenient timestamp parsing and GnuCash timestamp formatting."""

import re
from datetime import date, datetime, time, timezone

_LENIENT_TIMESTAMP = re.compile(
    r"^(\d{4}-\d{2}-\d{2})(?:T|\s+)"
    r"(\d{2}:\d{2}(?::\d{2}(?:\.(\d+))?)?)"
    r"\s*(Z|[+-]\d{2}:?\d{2})?$"
)

_FALLBACK_FORMATS = (
    "%Y-%m-%d %H:%M:%S %z",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d",
    "%d/%m/%Y",
    "%m/%d/%Y",
    "%Y%m%d%H%M%S",
    "%Y%m%d",
    "%d %b %Y",
    "%b %d %Y",
    "%b %d, %Y",
)

GNUCASH_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S +0000"
SQL_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _normalize_offset(offset: str | None) -> str:
    if not offset or offset == "Z":
        return "+00:00"
    if ":" in offset:
        return offset
    return f"{offset[:3]}:{offset[3:]}"


def parse_timestamp(value) -> datetime | None:
    """Parse a timestamp leniently into an aware UTC datetime.

    Strict ISO 8601 is tried first, then a lenient date-time pattern that
    takes a ``T`` or a space before the time, ``Z`` or ``+HHMM`` offsets and
    any number of fraction digits (``2024-01-15 10:30:00 +0000``), then a
    list of common layouts. Naive values are taken as UTC.

    Args:
        value: String, date or datetime.

    Returns:
        datetime | None: Parsed value, or None when nothing matched.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)

    text = str(value).strip()
    if not text:
        return None

    try:
        return _as_utc(datetime.fromisoformat(text))
    except ValueError:
        pass

    match = _LENIENT_TIMESTAMP.match(text)
    if match:
        day, clock, fraction, offset = match.groups()
        clock = clock.split(".")[0]
        if clock.count(":") == 1:
            clock = f"{clock}:00"
        if fraction:
            clock = f"{clock}.{fraction[:6].ljust(6, '0')}"
        try:
            return _as_utc(
                datetime.fromisoformat(
                    f"{day}T{clock}{_normalize_offset(offset)}"
                )
            )
        except ValueError:
            pass

    for fmt in _FALLBACK_FORMATS:
        try:
            return _as_utc(datetime.strptime(text, fmt))
        except ValueError:
            continue
    return None


def format_timestamp(value: datetime) -> str:
    """Format a datetime as ``YYYY-MM-DD HH:MM:SS +0000`` in UTC."""
    return _as_utc(value).strftime(GNUCASH_TIMESTAMP_FORMAT)


def format_sql_timestamp(value: datetime | None) -> str | None:
    """Format a datetime for the GnuCash SQL ``TIMESTAMP`` columns."""
    if value is None:
        return None
    return _as_utc(value).strftime(SQL_TIMESTAMP_FORMAT)


__all__ = [
    "GNUCASH_TIMESTAMP_FORMAT",
    "SQL_TIMESTAMP_FORMAT",
    "parse_timestamp",
    "format_timestamp",
    "format_sql_timestamp",
]
