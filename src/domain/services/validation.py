"""Double-entry validation of candidate transactions."""

from src.domain.constants import BALANCE_TOLERANCE, RECONCILE_STATES
from src.domain.models.numeric import GncNumeric, sum_numerics
from src.domain.models.validation import (
    SplitInput,
    TransactionInput,
    ValidationError,
    ValidationResult,
)
from src.domain.services.dates import parse_timestamp
from src.domain.services.normalization import is_valid_guid


def _validate_split(index: int, split: SplitInput) -> list[ValidationError]:
    field = f"splits[{index}]"
    label = f"Split {index + 1}:"
    errors: list[ValidationError] = []

    if not split.account_guid:
        errors.append(
            ValidationError(
                f"{field}.account_guid", f"{label} Account is required"
            )
        )
    elif not is_valid_guid(split.account_guid):
        errors.append(
            ValidationError(
                f"{field}.account_guid",
                f"{label} Invalid account GUID format",
            )
        )

    if split.value_num is None:
        errors.append(
            ValidationError(f"{field}.value_num", f"{label} Value is required")
        )

    if not split.value_denom:
        errors.append(
            ValidationError(
                f"{field}.value_denom",
                f"{label} Value denominator must be non-zero",
            )
        )

    if split.quantity_denom is not None and split.quantity_denom == 0:
        errors.append(
            ValidationError(
                f"{field}.quantity_denom",
                f"{label} Quantity denominator must be non-zero",
            )
        )

    if split.reconcile_state and split.reconcile_state not in RECONCILE_STATES:
        errors.append(
            ValidationError(
                f"{field}.reconcile_state",
                f"{label} Invalid reconcile state",
            )
        )
    return errors


def split_sum(splits: list[SplitInput]) -> GncNumeric:
    """Sum split values exactly.

    Missing numerators count as zero and missing or zero denominators as
    one; those splits are already reported individually.
    """
    return sum_numerics(
        GncNumeric(split.value_num or 0, split.value_denom or 1)
        for split in splits
    )


def validate_transaction(tx: TransactionInput) -> ValidationResult:
    """Validate a transaction for creation or update.

    Errors are collected and returned; nothing is raised.

    Args:
        tx: Candidate transaction.

    Returns:
        ValidationResult: Every problem found, empty when valid.
    """
    errors: list[ValidationError] = []

    if not tx.currency_guid:
        errors.append(ValidationError("currency_guid", "Currency is required"))
    elif not is_valid_guid(tx.currency_guid):
        errors.append(
            ValidationError("currency_guid", "Invalid currency GUID format")
        )

    if tx.post_date is None or tx.post_date == "":
        errors.append(ValidationError("post_date", "Post date is required"))
    elif parse_timestamp(tx.post_date) is None:
        errors.append(ValidationError("post_date", "Invalid post date format"))

    if not tx.description or not tx.description.strip():
        errors.append(
            ValidationError("description", "Description is required")
        )

    if tx.splits is None:
        errors.append(ValidationError("splits", "Splits are required"))
        return ValidationResult(errors)

    if len(tx.splits) < 2:
        errors.append(
            ValidationError(
                "splits", "At least 2 splits are required (double-entry)"
            )
        )

    for index, split in enumerate(tx.splits):
        errors.extend(_validate_split(index, split))

    if len(tx.splits) >= 2:
        total = split_sum(tx.splits).to_decimal()
        if abs(total) > BALANCE_TOLERANCE:
            errors.append(
                ValidationError(
                    "splits",
                    f"Splits must sum to zero (current sum: {total:.2f})",
                )
            )

    return ValidationResult(errors)


__all__ = ["validate_transaction", "split_sum"]
