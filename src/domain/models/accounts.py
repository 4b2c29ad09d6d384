"""Domain models for account balances and the rolled-up hierarchy."""

from dataclasses import dataclass, field

from src.domain.models.numeric import GncNumeric


@dataclass(frozen=True)
class AccountBalance:
    """Account with its own (non-recursive) balance.

    Balances stay exact fractions; convert with ``to_decimal`` or
    ``to_decimal_string`` only when displaying them.

    Attributes:
        guid: Account GUID.
        name: Account name.
        account_type: GnuCash account type.
        parent_guid: Parent GUID, or None for a top-level account.
        balance: Balance of the account's own splits.
        previous_balance: Optional comparison-period balance.
        commodity_guid: Optional account commodity GUID.
    """

    guid: str
    name: str
    account_type: str
    parent_guid: str | None
    balance: GncNumeric
    previous_balance: GncNumeric | None = None
    commodity_guid: str | None = None


@dataclass(frozen=True)
class LineItem:
    """Node of the rolled-up account tree."""

    guid: str
    name: str
    amount: GncNumeric
    depth: int
    children: list["LineItem"] = field(default_factory=list)
    previous_amount: GncNumeric | None = None


__all__ = ["AccountBalance", "LineItem"]
