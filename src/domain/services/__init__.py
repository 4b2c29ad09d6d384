"""Domain services package."""

from .accounts import ensure_deletable, ensure_valid_move
from .dates import format_timestamp, parse_timestamp
from .fx import CurrencyResolver
from .hierarchy import (
    build_account_path_map,
    build_hierarchy,
    collect_descendants,
)
from .interchange_export import build_interchange_document
from .interchange_import import ImportPlan, plan_import
from .normalization import (
    generate_guid,
    is_valid_guid,
    normalize_guid,
    normalize_mnemonic,
    normalize_namespace,
)
from .numeric import format_fraction, from_decimal, parse_fraction, to_decimal
from .validation import validate_transaction

__all__ = [
    "CurrencyResolver",
    "ImportPlan",
    "build_account_path_map",
    "build_hierarchy",
    "build_interchange_document",
    "collect_descendants",
    "ensure_deletable",
    "ensure_valid_move",
    "format_fraction",
    "format_timestamp",
    "from_decimal",
    "generate_guid",
    "is_valid_guid",
    "normalize_guid",
    "normalize_mnemonic",
    "normalize_namespace",
    "parse_fraction",
    "parse_timestamp",
    "plan_import",
    "to_decimal",
    "validate_transaction",
]
