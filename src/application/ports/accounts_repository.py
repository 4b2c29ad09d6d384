"""Port for reading account balances."""

from datetime import date
from typing import Protocol

from src.domain.models.accounts import AccountBalance


class AccountsRepositoryPort(Protocol):
    """Port exposing per-account balances for hierarchy reports."""

    def fetch_account_balances(
        self,
        account_guids: list[str] | None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[AccountBalance]:
        """Return each account with the sum of its own split values.

        Args:
            account_guids: Optional restriction to a set of accounts.
            start_date: Optional lower bound for transaction post dates.
            end_date: Optional upper bound for transaction post dates.
        """


__all__ = ["AccountsRepositoryPort"]
