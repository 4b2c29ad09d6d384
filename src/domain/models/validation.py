"""Domain models for candidate transactions and their validation result."""

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass(frozen=True)
class SplitInput:
    """Split as submitted for creation, before any GUID is assigned."""

    account_guid: str | None
    value_num: int | None
    value_denom: int | None
    quantity_num: int | None = None
    quantity_denom: int | None = None
    memo: str = ""
    action: str = ""
    reconcile_state: str | None = None


@dataclass(frozen=True)
class TransactionInput:
    """Transaction as submitted for creation or update."""

    currency_guid: str | None
    post_date: str | date | datetime | None
    description: str | None
    splits: list[SplitInput] | None
    num: str = ""


@dataclass(frozen=True)
class ValidationError:
    """Single validation problem tied to an input field."""

    field: str
    message: str


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a candidate transaction."""

    errors: list[ValidationError] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors


__all__ = [
    "SplitInput",
    "TransactionInput",
    "ValidationError",
    "ValidationResult",
]
